"""Redis-backed sliding window rate limiter

Each client owns a sorted set of admitted write timestamps:

    <prefix>:ratelimit:<xxh64(client id)>  ->  ZSET { <member>: <unix timestamp> }

Admission runs as one Lua script, so purge, count, and record happen in a
single atomic step on the Redis server. Without it, two concurrent writes from
the same client could both read a count of N-1 and both be admitted:

    (lambda 1): ZCARD => 2
    (lambda 2): ZCARD => 2
    (lambda 1): ZADD  => 3 writes
    (lambda 2): ZADD  => 4 writes (limit exceeded)

The key expires one window after the last admitted write.
"""

import math
import secrets
from datetime import datetime

from beartype import beartype

from linkdump.constants import RateLimit
from linkdump.dao.base import RateLimitBaseDAO
from linkdump.dao.redis.mixins import RedisClientMixin
from linkdump.dao.redis.helpers import handle_redis_connection_error


# KEYS[1]  client window
# ARGV[1]  cutoff (timestamps strictly older are purged)
# ARGV[2]  now
# ARGV[3]  max writes
# ARGV[4]  unique member for this write
# ARGV[5]  window seconds
ADMIT_SCRIPT = """
redis.call('ZREMRANGEBYSCORE', KEYS[1], '-inf', '(' .. ARGV[1])
if redis.call('ZCARD', KEYS[1]) < tonumber(ARGV[3]) then
    redis.call('ZADD', KEYS[1], ARGV[2], ARGV[4])
    redis.call('EXPIRE', KEYS[1], ARGV[5])
    return 1
end
return 0
"""


class RateLimitRedisDAO(RedisClientMixin, RateLimitBaseDAO):
    """Redis-based per-client rate limiter.

    Example:
        >>> limiter = RateLimitRedisDAO(redis_host='localhost', prefix='linkdump:dev')
        >>> limiter.admit('203.0.113.7', now=datetime.now(UTC))
        True
    """

    def __init__(self, max_writes: int = RateLimit.MAX_WRITES, window_seconds: int = RateLimit.WINDOW_SECONDS, **kwargs):
        RateLimitBaseDAO.__init__(self, max_writes=max_writes, window_seconds=window_seconds)
        RedisClientMixin.__init__(self, **kwargs)
        self._admit_script = self.redis.register_script(ADMIT_SCRIPT)

    @handle_redis_connection_error
    @beartype
    def admit(self, client_id: str, now: datetime, **kwargs) -> bool:
        key = self.keys.rate_limit_key(client_id)
        now_ts = now.timestamp()
        member = f'{now_ts:.6f}:{secrets.token_hex(4)}'

        admitted = self._admit_script(
            keys=[key],
            args=[repr(now_ts - self.window_seconds), repr(now_ts), self.max_writes, member, self.window_seconds],
        )
        return int(admitted) == 1

    @handle_redis_connection_error
    @beartype
    def retry_after(self, client_id: str, now: datetime, **kwargs) -> int:
        key = self.keys.rate_limit_key(client_id)
        now_ts = now.timestamp()

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(key, '-inf', f'({now_ts - self.window_seconds!r}')
            pipe.zcard(key)
            pipe.zrange(key, 0, 0, withscores=True)
            _, count, oldest = pipe.execute()

        if count < self.max_writes or not oldest:
            return 0
        _, oldest_ts = oldest[0]
        return math.floor(oldest_ts + self.window_seconds - now_ts) + 1
