import functools
from collections.abc import Callable

import xxhash


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing dumps and rate limit windows.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkdump:prod" or "linkdump:dev".

    Client identities are hashed so raw addresses never appear in key names.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def dump_key(self, slug: str) -> str:
        return f'dumps:{slug}'

    @prefix_key
    def rate_limit_key(self, client_id: str) -> str:
        return f'ratelimit:{xxhash.xxh64_hexdigest(client_id)}'
