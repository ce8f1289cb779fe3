from linkdump.dao.redis.redis_key_schema import RedisKeySchema
from linkdump.dao.redis.mixins import RedisClientMixin
from linkdump.dao.redis.dump_redis_dao import DumpRedisDAO
from linkdump.dao.redis.rate_limit_redis_dao import RateLimitRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'DumpRedisDAO',
    'RateLimitRedisDAO',
]
