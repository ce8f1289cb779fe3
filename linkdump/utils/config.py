"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`) and deployed to the
corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "create_dump": {
                "redis": { "host": ..., "port": ..., "db": ... }
            },
            "view_dump": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"create_dump"`) from this AppConfig
document.

Typical usage inside a Lambda handler:
    >>> from linkdump.utils.config import load_config
    >>> config = load_config('create_dump')
    >>> print(config['redis']['host'])
    redis-15501.host.docker.internal
"""

import os
import json
import functools
import logging
import urllib.parse
import urllib.request
from collections.abc import Callable

import boto3

from linkdump.types import AppConfig, LambdaConfiguration
from linkdump.constants import ENV
from linkdump.exceptions import BadConfigurationError, MalformedResponseError
from linkdump.utils.helpers import require_environment
from linkdump.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return the Redis key namespace as <app name>:<app env>, or None if APP_NAME is not set."""
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _lambda_section(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Extract the active backend's config for one lambda from a full AppConfig document."""
    try:
        backend = document['active_backend']
        return {backend: document['configs'][lambda_name][backend]}
    except (KeyError, TypeError) as e:
        raise MalformedResponseError(f"AppConfig document has no '{lambda_name}' section for the active backend") from e


def _sam_load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local
          AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://appconfig-agent:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        data = _lambda_section(document, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return data

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'create_dump', 'view_dump').

    Raises:
        MissingEnvironmentVariableError: if APPCONFIG_* identifiers are not set.
        MalformedResponseError: if the document lacks the lambda's section.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    try:
        document = json.loads(content.decode('utf-8'))
    except json.JSONDecodeError as e:
        raise MalformedResponseError('Invalid JSON in AppConfig configuration') from e

    data = _lambda_section(document, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return data


def redis_settings(config: LambdaConfiguration) -> dict:
    """Turn a lambda's redis section into RedisClientMixin keyword arguments."""
    try:
        return {f'redis_{k}': v for k, v in config['redis'].items()}
    except (KeyError, AttributeError) as e:
        raise BadConfigurationError("Lambda configuration has no 'redis' section") from e
