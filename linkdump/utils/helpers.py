"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_dump_url() -> str
        Get string representation of the share URL for a given slug
    utc_now() -> datetime
        Current time as an aware UTC datetime (default clock)
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(func) -> Callable
        Decorator: Turn uncaught handler exceptions into a JSON 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from linkdump.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import functools
import logging
from datetime import datetime, UTC
from collections.abc import Callable

from linkdump.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from linkdump.exceptions import MissingEnvironmentVariableError
from linkdump.types import LambdaEvent, LambdaContext, LambdaResponse
from linkdump.utils.runtime import running_locally
from linkdump.utils.responses import response_500


logger = logging.getLogger(__name__)


def base_url(event: LambdaEvent) -> str:
    """Extract public base URL from API Gateway event

    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.
    Local hosts (localhost, 127.0.0.1) are served over plain http.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://linkdump.example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain.split(':')[0] in {'localhost', '127.0.0.1'}:
        return f'http://{domain}'
    elif domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_dump_url(slug: str, event: LambdaEvent) -> str:
    """Get string representation of a dump's share URL

    Args:
        slug (str): dump slug
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: share url string representation
    """
    return f'{base_url(event).rstrip("/")}/{slug}'


def utc_now() -> datetime:
    return datetime.now(UTC)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(func: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: respond with a JSON 500 instead of crashing the handler.

    When running locally the exception is re-raised so SAM shows the traceback.
    """

    @functools.wraps(func)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return func(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
