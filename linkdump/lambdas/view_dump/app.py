import logging

from botocore.exceptions import BotoCoreError, ClientError

from linkdump.types import LambdaEvent, LambdaContext, LambdaResponse
from linkdump.store import DumpStore
from linkdump.exceptions import ConfigurationError, MalformedResponseError
from linkdump.dao.redis import DumpRedisDAO
from linkdump.dao.exceptions import DataStoreError, DumpExpiredError, DumpNotFoundError
from linkdump.utils import load_config, redis_settings, app_prefix
from linkdump.utils.codec import encode_items
from linkdump.utils.helpers import guarantee_500_response, utc_now
from linkdump.utils.responses import response_200, response_400, response_404, response_500
from linkdump.lambdas.view_dump.constants import (
    MISSING_SLUG,
    DUMP_UNAVAILABLE,
    DUMP_NOT_FOUND,
    DUMP_EXPIRED,
    STORAGE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    DUMP_SERVED,
)


logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = 'this dump has expired or does not exist'


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to read a dump

    - Step 1: Extract slug from request path
    - Step 2: Fetch the dump, hiding it if past its deadline
    - Step 3: Respond with its items and remaining lifetime

    HTTP responses:
        200: Dump found
            slug, items, createdAt, expiresAt (or null), remainingSeconds (or null)
        400: Missing slug in path parameters
        404: Dump unavailable (never existed or expired, indistinguishable to the client)
        500: Internal server error

    Example:
        >>> event = {'pathParameters': {'slug': 'V1StGXR8_Z'}}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])['items']
        [{'type': 'header', 'level': 1, 'text': 'Reading list'}, ...]
    """
    # 0- Get application's config
    try:
        app_config = load_config('view_dump')
        redis_config = redis_settings(app_config)
    except (ConfigurationError, MalformedResponseError, BotoCoreError, ClientError):
        logger.exception('Failed to load AppConfig for view dump function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Extract slug from request's path
    slug = (event.get('pathParameters') or {}).get('slug')
    if not slug:
        logger.info('Missing "slug" in path. Responding with 400.', extra={'event': MISSING_SLUG})
        return response_400(message="missing 'slug' in path", error_code=MISSING_SLUG)

    # 2- Fetch the dump, hiding it if past its deadline
    now = utc_now()
    try:
        store = DumpStore(dump_dao=DumpRedisDAO(**redis_config, prefix=app_prefix()))
        dump = store.fetch(slug, now=now)
    except DumpNotFoundError:
        logger.info('Dump not found in database. Responding with 404.', extra={'slug': slug, 'event': DUMP_NOT_FOUND})
        return response_404(message=UNAVAILABLE_MESSAGE, error_code=DUMP_UNAVAILABLE)
    except DumpExpiredError:
        logger.info('Dump is past its deadline. Responding with 404.', extra={'slug': slug, 'event': DUMP_EXPIRED})
        return response_404(message=UNAVAILABLE_MESSAGE, error_code=DUMP_UNAVAILABLE)
    except DataStoreError:
        logger.exception('Data store unavailable. Responding with 500.', extra={'slug': slug, 'event': STORAGE_UNAVAILABLE})
        return response_500(error_code=STORAGE_UNAVAILABLE)

    # 3- Respond with its items and remaining lifetime
    remaining = dump.remaining(now)
    logger.info('Serving dump. Responding with 200.', extra={'slug': slug, 'event': DUMP_SERVED})
    return response_200(
        {
            'slug': dump.slug,
            'items': encode_items(dump.items),
            'createdAt': dump.created_at.isoformat(),
            'expiresAt': None if dump.expires_at is None else dump.expires_at.isoformat(),
            'remainingSeconds': None if remaining is None else int(remaining.total_seconds()),
        }
    )
