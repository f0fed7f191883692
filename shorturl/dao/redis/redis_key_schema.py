import functools
from collections.abc import Callable

from shorturl.utils.shortener import partition_of


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing short link records.

    Records are routed into a partition ('upper', 'lower', 'digit') derived from the
    first symbol of the short code, so a key can be built before anything about the
    code is known.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shorturl:prod" or "shorturl:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_sequences_key(self, short_code: str) -> str:
        """HASH: collision ordinal -> original URL"""
        return f'links:{partition_of(short_code)}:{short_code}:sequences'

    @prefix_key
    def link_urls_key(self, short_code: str) -> str:
        """HASH: original URL -> collision ordinal"""
        return f'links:{partition_of(short_code)}:{short_code}:urls'
