from linkdump.dao.memory.dump_memory_dao import DumpMemoryDAO
from linkdump.dao.memory.rate_limit_memory_dao import RateLimitMemoryDAO


__all__ = [
    'DumpMemoryDAO',
    'RateLimitMemoryDAO',
]
