"""DAO for caching resolved short links in Redis (ElastiCache)

Cache-aside entries live under '<prefix>:<canonical short code>:<ordinal>' with a
short fixed TTL. The cache is never authoritative: entries are written only by the
read path after a store hit, and a miss simply means "ask the store".

Classes:
    ShortLinkCacheDAO:
        Concrete cache DAO. Uses ElastiCacheClientMixin to initialize the Redis
        client (AWS/LocalStack aware) and CacheKeySchema for key generation.

Example:
    >>> dao = ShortLinkCacheDAO(prefix="shorturl:dev")
    >>> dao.get('Ab3xQw', 0) is None
    True
    >>> dao.put('Ab3xQw', 0, 'https://example.com')
    >>> dao.get('Ab3xQw', 0)
    'https://example.com'
"""

from beartype import beartype

from shorturl.constants import TTL
from shorturl.dao.cache.mixins import ElastiCacheClientMixin
from shorturl.dao.cache.helpers import handle_cache_connection_error


class ShortLinkCacheDAO(ElastiCacheClientMixin):
    """Redis-backed cache DAO for resolved short links

    Methods:
        get(short_code: str, sequence: int) -> str | None:
            Cached original URL, or None on miss.
            Raises CacheError on connectivity issues.

        put(short_code: str, sequence: int, original_url: str, ttl: int = TTL.SHORT_LINK_CACHE) -> None:
            Cache an original URL with an expiry.
            Raises CacheError on connectivity issues.
    """

    @handle_cache_connection_error
    @beartype
    def get(self, short_code: str, sequence: int) -> str | None:
        return self.redis.get(self.keys.short_link_key(short_code, sequence))

    @handle_cache_connection_error
    @beartype
    def put(self, short_code: str, sequence: int, original_url: str, ttl: int = TTL.SHORT_LINK_CACHE) -> None:
        """Cache an original URL for a canonical short code and ordinal

        Concurrent readers may populate the same key; the last write wins with an
        identical value.
        """
        self.redis.set(self.keys.short_link_key(short_code, sequence), original_url, ex=ttl)
