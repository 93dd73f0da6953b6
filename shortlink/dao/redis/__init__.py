from shortlink.dao.redis.redis_key_schema import RedisKeySchema
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.alias_redis_dao import AliasRedisDAO
from shortlink.dao.redis.rate_window_redis_dao import RateWindowRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'AliasRedisDAO',
    'RateWindowRedisDAO',
]
