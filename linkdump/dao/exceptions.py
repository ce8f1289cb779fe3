from linkdump.exceptions import LinkDumpError


class DAOError(LinkDumpError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class DumpUnavailableError(DAOError):
    """Raised when a dump can't be served to a reader.

    Readers see one "unavailable" outcome. Subclasses keep the cause apart for diagnostics.
    """

    error_code = 'dao:dump_unavailable_error'


class DumpNotFoundError(DumpUnavailableError):
    """Raised when no dump was ever stored under a slug."""

    error_code = 'dao:dump_not_found_error'


class DumpExpiredError(DumpUnavailableError):
    """Raised when a dump exists but its deadline has passed."""

    error_code = 'dao:dump_expired_error'


class DumpAlreadyExistsError(DAOError):
    """Raised when inserting a dump under a slug that is already taken."""

    error_code = 'dao:dump_already_exists_error'


class RateLimitedError(DAOError):
    """Raised when a client publishes more often than the rate limit allows."""

    error_code = 'dao:rate_limited_error'

    def __init__(self, message: str = '', retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'


class MalformedRecordError(DataStoreError):
    """Raised when a stored record can't be decoded."""

    error_code = 'dao:malformed_record_error'
