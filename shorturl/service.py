"""Short link creation and resolution

Functions:
    create(ctx, original_url) -> str
        Encode a URL and allocate its collision ordinal in the store
    resolve(ctx, presented_code) -> str | None
        Resolve a presented short code through the cache, then the store

Classes:
    ShortenerContext
        Store and cache DAOs shared by all requests of a process

Example:
    >>> ctx = ShortenerContext.from_config({'redis': {'host': '127.0.0.1', 'port': 6379, 'db': 0}})
    >>> code = create(ctx, 'https://example.com/blog/article-123')
    >>> resolve(ctx, code)
    'https://example.com/blog/article-123'

NOTE:
    - URLs sharing a fingerprint get ordinals 0, 1, 2... in insertion order. The returned
      code carries the ordinal in its last symbol, so every stored URL can be resolved.
    - The cache is a read-through optimization only. When it fails, reads go
      straight to the store.
"""

import logging
from dataclasses import dataclass
from typing import Self

from botocore.exceptions import BotoCoreError, ClientError

from shorturl.dao.base import ShortLinkBaseDAO
from shorturl.dao.cache import ShortLinkCacheDAO
from shorturl.dao.redis import ShortLinkRedisDAO
from shorturl.dao.exceptions import CacheError, ShortLinkNotFoundError
from shorturl.exceptions import ConfigurationError
from shorturl.types import LambdaConfiguration
from shorturl.utils.config import app_prefix
from shorturl.utils.shortener import encode, decode, with_sequence


logger = logging.getLogger(__name__)

# Raised while resolving ElastiCache endpoint and credentials (SSM, Secrets Manager) or connecting to it
CACHE_SETUP_ERRORS = (CacheError, ConfigurationError, BotoCoreError, ClientError, ValueError)


@dataclass(frozen=True)
class ShortenerContext:
    store: ShortLinkBaseDAO
    cache: ShortLinkCacheDAO | None = None

    @classmethod
    def from_config(cls, config: LambdaConfiguration) -> Self:
        """Build the store and cache DAOs from a lambda configuration section

        Args:
            config (LambdaConfiguration):
                Output of load_config(), e.g. {'redis': {'host': ..., 'port': ..., 'db': ...}}.

        Returns:
            ShortenerContext: context with pooled Redis clients.

        Raises:
            DataStoreError:
                If the store is unreachable.

        NOTE: An unreachable or misconfigured cache is not fatal. The context is built
              without one and all reads go to the store.
        """
        redis_config = config['redis']
        store = ShortLinkRedisDAO(**{f'redis_{k}': v for k, v in redis_config.items()}, prefix=app_prefix())

        try:
            cache = ShortLinkCacheDAO(prefix=app_prefix(), redis_config=redis_config)
        except CACHE_SETUP_ERRORS:
            logger.warning('Cache unavailable. Serving reads from the data store only.', exc_info=True)
            cache = None

        return cls(store=store, cache=cache)


def create(ctx: ShortenerContext, original_url: str) -> str:
    """Create (or look up) the short code of an original URL

    Steps:
        - Fingerprint the URL into a 6-symbol canonical code
        - Store the URL under the next free collision ordinal of that code
          (returns the existing ordinal if the URL was stored before)
        - Embed the ordinal into the last symbol of the code

    Raises:
        ParameterError:
            If the URL is empty.
        ShortCodeOverflowError:
            If 16 different URLs already share the fingerprint.
        DataStoreError:
            If the store is unavailable.

    Example:
        >>> create(ctx, 'https://example.com') == create(ctx, 'https://example.com')
        True
    """
    short_code = encode(original_url)
    record = ctx.store.insert(short_code, original_url)
    return with_sequence(short_code, record.sequence)


def resolve(ctx: ShortenerContext, presented_code: str) -> str | None:
    """Resolve a presented short code into its original URL

    Steps:
        - Split the code into (canonical code, collision ordinal)
        - Cache HIT: return the cached URL
        - Cache MISS: read the store and populate the cache

    Returns:
        str | None: the original URL, or None if the code was never issued.

    Raises:
        ParameterError:
            If the code is empty or malformed.
        DataStoreError:
            If the store is unavailable.
    """
    short_code, sequence = decode(presented_code)

    original_url = _cache_get(ctx, short_code, sequence)
    if original_url is not None:
        logger.debug('Cache hit.', extra={'short_code': short_code, 'sequence': sequence})
        return original_url
    logger.debug('Cache miss.', extra={'short_code': short_code, 'sequence': sequence})

    try:
        record = ctx.store.get(short_code, sequence)
    except ShortLinkNotFoundError:
        return None

    _cache_put(ctx, short_code, sequence, record.original_url)
    return record.original_url


def _cache_get(ctx: ShortenerContext, short_code: str, sequence: int) -> str | None:
    if ctx.cache is None:
        return None
    try:
        return ctx.cache.get(short_code, sequence)
    except CacheError:
        logger.warning('Cache read failed. Falling back to the data store.', exc_info=True, extra={'short_code': short_code})
        return None


def _cache_put(ctx: ShortenerContext, short_code: str, sequence: int, original_url: str) -> None:
    if ctx.cache is None:
        return
    try:
        ctx.cache.put(short_code, sequence, original_url)
    except CacheError:
        logger.warning('Cache write failed.', exc_info=True, extra={'short_code': short_code})
