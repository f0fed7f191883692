from shorturl.dao.cache.cache_key_schema import CacheKeySchema
from shorturl.dao.cache.mixins import ElastiCacheClientMixin
from shorturl.dao.cache.short_link_cache_dao import ShortLinkCacheDAO

__all__ = [
    'CacheKeySchema',
    'ElastiCacheClientMixin',
    'ShortLinkCacheDAO',
]
