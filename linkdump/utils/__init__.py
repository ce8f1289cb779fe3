from linkdump.utils.parser import parse_content
from linkdump.utils.slug import generate_slug
from linkdump.utils.expiry import resolve_expiry, parse_expiry_option
from linkdump.utils.helpers import base_url, get_dump_url, utc_now, require_environment, guarantee_500_response
from linkdump.utils.config import app_env, app_name, app_prefix, load_config, redis_settings
from linkdump.utils.identity import resolve_client_id
from linkdump.utils.logging import initialize_logging


__all__ = [
    'parse_content',
    'generate_slug',
    'resolve_expiry',
    'parse_expiry_option',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'redis_settings',
    'base_url',
    'get_dump_url',
    'utc_now',
    'require_environment',
    'guarantee_500_response',
    'resolve_client_id',
    'initialize_logging',
]
