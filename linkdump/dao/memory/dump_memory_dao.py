"""In-process implementation of DumpBaseDAO.

Dumps live in a dict guarded by a lock. The lock is only held for a single
lookup, insert, or sweep, never across I/O. Records are stored encoded so that
every read goes through the same codec as the Redis backend.
"""

import threading
from datetime import datetime

from beartype import beartype

from linkdump.models import DumpModel
from linkdump.dao.base import DumpBaseDAO
from linkdump.dao.exceptions import DumpAlreadyExistsError, DumpNotFoundError
from linkdump.types import DumpRecord
from linkdump.utils.codec import dump_to_record, dump_from_record


class DumpMemoryDAO(DumpBaseDAO):
    def __init__(self):
        self._records: dict[str, DumpRecord] = {}
        self._lock = threading.Lock()

    @beartype
    def insert(self, dump: DumpModel, **kwargs) -> 'DumpMemoryDAO':
        record = dump_to_record(dump)
        with self._lock:
            stored = self._records.setdefault(dump.slug, record)
        if stored is not record:
            raise DumpAlreadyExistsError(f"Dump with slug '{dump.slug}' already exists.")
        return self

    @beartype
    def get(self, slug: str, **kwargs) -> DumpModel:
        with self._lock:
            record = self._records.get(slug)
        if record is None:
            raise DumpNotFoundError(f"Dump with slug '{slug}' not found.")
        return dump_from_record(record)

    @beartype
    def sweep(self, now: datetime, **kwargs) -> int:
        with self._lock:
            expired = [
                slug
                for slug, record in self._records.items()
                if record['expires_at'] is not None and now > datetime.fromisoformat(record['expires_at'])
            ]
            for slug in expired:
                del self._records[slug]
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)
