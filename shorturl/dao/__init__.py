from shorturl.dao.base import ShortLinkBaseDAO
from shorturl.dao.redis import ShortLinkRedisDAO
from shorturl.dao.cache import ShortLinkCacheDAO


__all__ = [
    'ShortLinkBaseDAO',
    'ShortLinkRedisDAO',
    'ShortLinkCacheDAO',
]
