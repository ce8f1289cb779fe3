"""Abstract base class for per-client write rate limiting.

Every client identity owns a sliding window of recent admitted writes. A write
is admitted while fewer than `max_writes` writes were admitted within the
trailing `window_seconds`.

Example:
    >>> limiter = RateLimitMemoryDAO(max_writes=3, window_seconds=60)
    >>> [limiter.admit('203.0.113.7', now=t0) for _ in range(4)]
    [True, True, True, False]
    >>> limiter.admit('203.0.113.7', now=t0 + timedelta(seconds=61))
    True
"""

from abc import ABC, abstractmethod
from datetime import datetime

from linkdump.constants import RateLimit


class RateLimitBaseDAO(ABC):
    """Interface for per-client sliding window rate limiters.

    Methods:
        admit(client_id: str, now: datetime, **kwargs) -> bool:
            Atomically purge the client's stale timestamps, compare the
            remaining count against the limit, and record `now` if admitted.
            Raises DataStoreError on connection failure.

        retry_after(client_id: str, now: datetime, **kwargs) -> int:
            Seconds until the client may publish again (0 if it may now).

    NOTE:
        - Implementations must make admit() atomic per client identity: two
          concurrent calls must never both take the last free slot.
    """

    def __init__(self, max_writes: int = RateLimit.MAX_WRITES, window_seconds: int = RateLimit.WINDOW_SECONDS):
        if max_writes < 1:
            raise ValueError(f'max_writes must be a positive integer (given value: {max_writes}).')
        if window_seconds < 1:
            raise ValueError(f'window_seconds must be a positive integer (given value: {window_seconds}).')

        self.max_writes = max_writes
        self.window_seconds = window_seconds

    @abstractmethod
    def admit(self, client_id: str, now: datetime, **kwargs) -> bool:
        """Admit or reject one write by a client.

        Args:
            client_id (str):
                Opaque client identity (e.g. network address).

            now (datetime):
                Time of the write attempt.

        Returns:
            bool: True if the write is admitted (and recorded), False otherwise.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def retry_after(self, client_id: str, now: datetime, **kwargs) -> int:
        """Return whole seconds until the client's oldest write leaves the window."""
        pass
