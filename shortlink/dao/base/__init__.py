from shortlink.dao.base.alias_base_dao import AliasBaseDAO
from shortlink.dao.base.rate_window_base_dao import RateWindowBaseDAO
from shortlink.dao.base.resolution_cache_base_dao import ResolutionCacheBaseDAO


__all__ = [
    'AliasBaseDAO',
    'RateWindowBaseDAO',
    'ResolutionCacheBaseDAO',
]
