from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Physical retention of a dump record after its logical deadline (1 day in seconds)
    RETENTION_GRACE = 86_400  # 60 * 60 * 24


class Expiry:
    """Selectable dump lifetimes."""

    NEVER = 'never'
    OPTIONS_MINUTES = frozenset({1, 5, 10, 60, 1440, 10080})
    DEFAULT_OPTION = 10


class RateLimit:
    """Per-client write rate limit."""

    MAX_WRITES = 3  # Writes admitted per client within the trailing window
    WINDOW_SECONDS = 60  # Trailing window length


class Content:
    """Pasted text limits."""

    MAX_TEXT_LENGTH = 100_000  # Characters accepted per publish


class Slug:
    """Slug generation parameters."""

    ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-'
    LENGTH = 10
    MIN_LENGTH = 10
    MAX_ATTEMPTS = 5  # Attempts to mint a free slug before giving up


class Identity:
    """Client identity resolution."""

    UNKNOWN = 'unknown'
    RESOLVER_TIMEOUT_SECONDS = 2


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        IP_RESOLVER_URL = 'IP_RESOLVER_URL'  # e.g. https://api.ipify.org?format=json

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
