import redis

from shorturl.dao.exceptions import CacheError
from shorturl.dao.redis.helpers import translate_redis_errors


__all__ = ['handle_cache_connection_error']


# Like handle_redis_connection_error, but raises CacheError for any Redis error
# (including server-side rejections such as OOM or READONLY replicas)
handle_cache_connection_error = translate_redis_errors(CacheError, 'cache', errors=(redis.exceptions.RedisError,))
