"""Abstract base class for dump data access objects (DAOs).

This class establishes a consistent contract for all dump DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-process memory).

Responsibilities:
    - Provide an interface for inserting and retrieving DumpModel objects.
    - Guarantee that an insert never overwrites an existing slug.
    - Standardize error handling across multiple data store implementations.

NOTE:
    A DAO returns whatever it physically holds, including dumps whose deadline
    has passed. Deciding whether a dump is still visible is up to DumpStore.

Example:
    >>> dao = DumpRedisDAO(...)
    >>> dao.insert(dump)
    >>> dao.get('V1StGXR8_Z').items
    (HeaderItem(level=1, text='Reading list'), ...)
"""

from abc import ABC, abstractmethod
from datetime import datetime

from linkdump.models import DumpModel


class DumpBaseDAO(ABC):
    """Interface for dump data access objects (DAOs).

    Methods:
        insert(dump: DumpModel, **kwargs) -> DumpBaseDAO:
            Insert a new dump. Atomic insert-if-absent on the slug.
            Raises DumpAlreadyExistsError if the slug is taken.
            Raises DataStoreError on connection or write failure.

        get(slug: str, **kwargs) -> DumpModel:
            Retrieve a dump by slug, expired or not.
            Raises DumpNotFoundError if nothing is stored under the slug.
            Raises DataStoreError on connection or read failure.

        sweep(now: datetime, **kwargs) -> int:
            Physically remove dumps whose deadline has passed.
    """

    @abstractmethod
    def insert(self, dump: DumpModel, **kwargs) -> 'DumpBaseDAO':
        """Insert a new dump into the data store.

        Args:
            dump (DumpModel):
                The dump to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            DumpBaseDAO: self (for method chaining)

        Raises:
            DumpAlreadyExistsError:
                If a dump with the same slug already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, slug: str, **kwargs) -> DumpModel:
        """Retrieve a dump from the data store by its slug.

        Args:
            slug (str):
                The slug of the dump to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            DumpModel: The stored dump.

        Raises:
            DumpNotFoundError:
                If no dump with the given slug exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    def sweep(self, now: datetime, **kwargs) -> int:
        """Physically remove expired dumps and return how many were removed.

        Backends with native key expiry have nothing to do here.
        """
        return 0
