"""Data Access Object (DAO) implementation for managing dumps in Redis

This module provides a Redis-based implementation of DumpBaseDAO.

Responsibilities:
    - Insert and retrieve dumps from Redis;
    - Never overwrite an existing slug;
    - Let Redis physically drop dumps some time after their deadline.

Storage layout:
    <prefix>:dumps:<slug>  ->  JSON dump record (see linkdump.utils.codec)

Expiring dumps are kept for TTL.RETENTION_GRACE seconds past their deadline,
so a late reader is told "expired" rather than "not found". Dumps that never
expire have no TTL.

Example:
    >>> dao = DumpRedisDAO(prefix="linkdump:dev")
    >>> dao.insert(dump)
    <DumpRedisDAO>
    >>> dao.get("V1StGXR8_Z").expires_at
    datetime.datetime(2025, 10, 15, 0, 10, tzinfo=datetime.timezone.utc)
"""

from beartype import beartype

from linkdump.constants import TTL
from linkdump.models import DumpModel
from linkdump.dao.base import DumpBaseDAO
from linkdump.dao.redis.mixins import RedisClientMixin
from linkdump.dao.redis.helpers import handle_redis_connection_error
from linkdump.dao.exceptions import DumpAlreadyExistsError, DumpNotFoundError, MalformedRecordError
from linkdump.utils.codec import serialize_dump, deserialize_dump


class DumpRedisDAO(RedisClientMixin, DumpBaseDAO):
    """Redis-based Data Access Object (DAO) for managing dumps

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, dump: DumpModel, **kwargs) -> 'DumpRedisDAO':
        """Insert a dump into Redis

        The slug is reserved with a single SET NX, so two concurrent inserts
        under the same slug can't both succeed:

            (lambda 1): SET <app>:dumps:<slug> <record> NX  => OK
            (lambda 2): SET <app>:dumps:<slug> <record> NX  => nil (DumpAlreadyExistsError)

        Raises:
            DumpAlreadyExistsError:
                If a dump with the same slug already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        exat = None
        if dump.expires_at is not None:
            exat = int(dump.expires_at.timestamp()) + TTL.RETENTION_GRACE

        created = self.redis.set(self.keys.dump_key(dump.slug), serialize_dump(dump), nx=True, exat=exat)
        if not created:
            raise DumpAlreadyExistsError(f"Dump with slug '{dump.slug}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, slug: str, **kwargs) -> DumpModel:
        """Retrieve a stored dump by slug

        Raises:
            DumpNotFoundError:
                If the dump does not exist in Redis.
            MalformedRecordError:
                If the stored record can't be decoded.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        try:
            payload = self.redis.get(self.keys.dump_key(slug))
            if isinstance(payload, bytes):
                payload = payload.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedRecordError(f"Dump record with slug '{slug}' is not valid UTF-8.") from e

        if payload is None:
            raise DumpNotFoundError(f"Dump with slug '{slug}' not found.")
        return deserialize_dump(payload)
