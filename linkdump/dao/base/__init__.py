from linkdump.dao.base.dump_base_dao import DumpBaseDAO
from linkdump.dao.base.rate_limit_base_dao import RateLimitBaseDAO


__all__ = [
    'DumpBaseDAO',
    'RateLimitBaseDAO',
]
