"""In-process implementation of RateLimitBaseDAO.

Every client identity gets its own window (a deque of admitted timestamps) and
its own lock, so admission for one client never waits on another. The registry
lock is only held long enough to look up or create a client's window.

Windows whose every timestamp has left the trailing window are dropped from the
registry at most once per `window_seconds`, so identities seen once do not pile
up. A dropped window is marked retired; a writer that raced with the drop
re-fetches a fresh window instead of recording into the orphan.
"""

import bisect
import math
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from beartype import beartype

from linkdump.constants import RateLimit
from linkdump.dao.base import RateLimitBaseDAO


@dataclass
class _Window:
    lock: threading.Lock = field(default_factory=threading.Lock)
    timestamps: deque[datetime] = field(default_factory=deque)
    retired: bool = False

    def purge(self, cutoff: datetime) -> None:
        while self.timestamps and self.timestamps[0] < cutoff:
            self.timestamps.popleft()

    def is_stale(self, cutoff: datetime) -> bool:
        return not self.timestamps or self.timestamps[-1] < cutoff


class RateLimitMemoryDAO(RateLimitBaseDAO):
    def __init__(self, max_writes: int = RateLimit.MAX_WRITES, window_seconds: int = RateLimit.WINDOW_SECONDS):
        super().__init__(max_writes=max_writes, window_seconds=window_seconds)
        self._windows: dict[str, _Window] = {}
        self._registry_lock = threading.Lock()
        self._next_prune: datetime | None = None

    def _window(self, client_id: str, now: datetime) -> _Window:
        with self._registry_lock:
            if self._next_prune is None or now >= self._next_prune:
                self._prune(now)
            return self._windows.setdefault(client_id, _Window())

    def _prune(self, now: datetime) -> None:
        # Registry lock is held. Busy windows are skipped, never waited on.
        cutoff = now - timedelta(seconds=self.window_seconds)
        for client_id, window in list(self._windows.items()):
            if not window.lock.acquire(blocking=False):
                continue
            try:
                if window.is_stale(cutoff):
                    window.retired = True
                    del self._windows[client_id]
            finally:
                window.lock.release()
        self._next_prune = now + timedelta(seconds=self.window_seconds)

    @beartype
    def admit(self, client_id: str, now: datetime, **kwargs) -> bool:
        while True:
            window = self._window(client_id, now)
            with window.lock:
                if window.retired:
                    continue
                window.purge(now - timedelta(seconds=self.window_seconds))
                if len(window.timestamps) >= self.max_writes:
                    return False
                bisect.insort(window.timestamps, now)
                return True

    @beartype
    def retry_after(self, client_id: str, now: datetime, **kwargs) -> int:
        with self._registry_lock:
            window = self._windows.get(client_id)
        if window is None:
            return 0

        with window.lock:
            window.purge(now - timedelta(seconds=self.window_seconds))
            if len(window.timestamps) < self.max_writes:
                return 0
            oldest = window.timestamps[0]
        return math.floor((oldest + timedelta(seconds=self.window_seconds) - now).total_seconds()) + 1

    def __len__(self) -> int:
        """Number of client windows currently tracked."""
        with self._registry_lock:
            return len(self._windows)
