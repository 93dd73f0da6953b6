from shortlink.dao.cache.cache_key_schema import CacheKeySchema
from shortlink.dao.cache.mixins import ElastiCacheClientMixin
from shortlink.dao.cache.resolution_cache_dao import ResolutionCacheDAO

__all__ = [
    'CacheKeySchema',
    'ElastiCacheClientMixin',
    'ResolutionCacheDAO',
]
