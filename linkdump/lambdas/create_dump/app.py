import json
import logging

from botocore.exceptions import BotoCoreError, ClientError

from linkdump.types import LambdaEvent, LambdaContext, LambdaResponse
from linkdump.store import DumpStore
from linkdump.constants import Content
from linkdump.exceptions import ConfigurationError, EmptyDumpError, InvalidExpiryOptionError, MalformedResponseError
from linkdump.dao.redis import DumpRedisDAO, RateLimitRedisDAO
from linkdump.dao.exceptions import DataStoreError, RateLimitedError
from linkdump.utils import load_config, redis_settings, app_prefix, get_dump_url, parse_expiry_option, resolve_client_id
from linkdump.utils.helpers import guarantee_500_response
from linkdump.utils.logging import client_digest
from linkdump.utils.responses import response_200, response_400, response_429, response_500
from linkdump.lambdas.create_dump.constants import (
    INVALID_JSON,
    MISSING_TEXT,
    INVALID_EXPIRY,
    TEXT_TOO_LONG,
    EMPTY_DUMP,
    RATE_LIMITED,
    STORAGE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    DUMP_CREATED,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to publish a dump

    This Lambda handler follows this procedure to publish a dump:
    - Step 1: Extract pasted text and expiry option from request body
    - Step 2: Resolve the client's identity for rate limiting
    - Step 3: Parse, rate limit, and store the dump (via DumpStore)
    - Step 4: Respond to user with the dump's slug and share URL

    HTTP responses:
        200: Dump published
            slug, url, expiresAt (ISO 8601 or null), itemCount
        400: Bad client request
            invalid JSON, missing 'text', text too long, unsupported 'expiry', or no content
        429: Too many dumps published by this client
            Retry-After header holds the seconds to wait
        500: Internal server error

    Example:
        >>> event = {'body': '{"text": "# Links\\nhttps://example.com", "expiry": 60}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
    """
    # 0- Get application's config
    try:
        app_config = load_config('create_dump')
        redis_config = redis_settings(app_config)
    except (ConfigurationError, MalformedResponseError, BotoCoreError, ClientError):
        logger.exception('Failed to load AppConfig for create dump function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Extract pasted text and expiry option from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON)

    text = request_body.get('text')
    if not isinstance(text, str) or not text.strip():
        logger.info("Missing 'text' in body. Responding with 400.", extra={'event': MISSING_TEXT})
        return response_400(message="missing 'text' in JSON body", error_code=MISSING_TEXT)
    if len(text) > Content.MAX_TEXT_LENGTH:
        logger.info('Pasted text is too long. Responding with 400.', extra={'textLength': len(text), 'event': TEXT_TOO_LONG})
        return response_400(message=f'text exceeds {Content.MAX_TEXT_LENGTH} characters', error_code=TEXT_TOO_LONG)

    try:
        expiry_option = parse_expiry_option(request_body.get('expiry'))
    except InvalidExpiryOptionError as e:
        logger.info('Unsupported expiry option. Responding with 400.', extra={'event': INVALID_EXPIRY})
        return response_400(message=str(e), error_code=INVALID_EXPIRY)

    # 2- Resolve the client's identity for rate limiting
    client_id = resolve_client_id(event)

    # 3- Parse, rate limit, and store the dump
    try:
        store = DumpStore(
            dump_dao=DumpRedisDAO(**redis_config, prefix=app_prefix()),
            rate_limiter=RateLimitRedisDAO(**redis_config, prefix=app_prefix()),
        )
        dump = store.publish(text, expiry_option=expiry_option, client_id=client_id)
    except EmptyDumpError:
        logger.info('Pasted text holds no content. Responding with 400.', extra={'event': EMPTY_DUMP})
        return response_400(message='no content to publish', error_code=EMPTY_DUMP)
    except RateLimitedError as e:
        logger.info(
            'Client exceeded the write rate limit. Responding with 429.',
            extra={'client': client_digest(client_id), 'event': RATE_LIMITED},
        )
        return response_429(
            retry_after=e.retry_after,
            error_code=RATE_LIMITED,
            message=f'Too many dumps published. Try again in {e.retry_after} seconds.',
        )
    except DataStoreError:
        logger.exception('Data store unavailable. Responding with 500.', extra={'event': STORAGE_UNAVAILABLE})
        return response_500(error_code=STORAGE_UNAVAILABLE)

    # 4- Respond to user with the dump's slug and share URL
    logger.info(
        'Dump published. Responding with 200.',
        extra={'slug': dump.slug, 'itemCount': len(dump.items), 'event': DUMP_CREATED},
    )
    return response_200(
        {
            'slug': dump.slug,
            'url': get_dump_url(dump.slug, event),
            'expiresAt': None if dump.expires_at is None else dump.expires_at.isoformat(),
            'itemCount': len(dump.items),
        }
    )
