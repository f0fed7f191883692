from shorturl.dao.redis.redis_key_schema import RedisKeySchema
from shorturl.dao.redis.short_link_redis_dao import ShortLinkRedisDAO
from shorturl.dao.redis.mixins import RedisClientMixin, build_redis_client


__all__ = [
    'RedisKeySchema',
    'ShortLinkRedisDAO',
    'RedisClientMixin',
    'build_redis_client',
]
