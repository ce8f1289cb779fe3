class LinkDumpError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linkdump_error'


class MalformedResponseError(LinkDumpError):
    """Raised when a response is malformed."""

    error_code = 'app:malformed_response_error'


class InvalidExpiryOptionError(LinkDumpError, ValueError):
    """Raised when a dump lifetime is not one of the selectable options."""

    error_code = 'app:invalid_expiry_option_error'


class EmptyDumpError(LinkDumpError, ValueError):
    """Raised when pasted text holds no content items."""

    error_code = 'app:empty_dump_error'


class TextTooLongError(LinkDumpError, ValueError):
    """Raised when pasted text exceeds the accepted length."""

    error_code = 'app:text_too_long_error'


class IdentityResolutionError(LinkDumpError):
    """Raised when the client's public identity can't be resolved in time."""

    error_code = 'app:identity_resolution_error'


class ConfigurationError(LinkDumpError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
