"""DAO for caching alias resolutions in Redis (ElastiCache)

This module provides a cache-aside lookup of UrlRecords in front of an alias
store. Writers never update the cache; they invalidate it right after saving.

Responsibilities:
    - Serve alias -> UrlRecord lookups from ElastiCache
    - On cache-miss, read the alias store and populate the cache
    - Cache absent aliases under a short TTL (negative caching)
    - Invalidate cache entries on request (write-side invalidation)

Key layout:
    cache:<prefix>:links:<alias>  -> UrlRecord JSON document, the absence marker or the invalidation marker

Example:
    >>> store = AliasRedisDAO(prefix="shortlink:dev")
    >>> cache = ResolutionCacheDAO(store=store, prefix="shortlink:dev")

    >>> cache.get("abc12")          # MISS: loads from the store, then caches
    UrlRecord(alias='abc12', ...)
    >>> cache.get("abc12")          # HIT
    UrlRecord(alias='abc12', ...)
    >>> cache.invalidate("abc12")
"""

import json
import logging

from beartype import beartype

from shortlink.constants import TTL
from shortlink.models import UrlRecord
from shortlink.dao.base import AliasBaseDAO, ResolutionCacheBaseDAO
from shortlink.dao.cache.mixins import ElastiCacheClientMixin
from shortlink.dao.redis.helpers import handle_redis_connection_error


logger = logging.getLogger(__name__)

# Stored in place of a record when the alias store has nothing for the alias
MISSING = '__missing__'
# Left by invalidate; keeps absence markers of in-flight readers out until it expires
INVALIDATED = '__invalidated__'


class ResolutionCacheDAO(ElastiCacheClientMixin, ResolutionCacheBaseDAO):
    """Redis-backed cache-aside resolver for UrlRecords

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with ElastiCache.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.
        store (AliasBaseDAO):
            Source of truth consulted on cache misses.

    Methods:
        get(alias: str) -> UrlRecord | None:
            Cached lookup; loads from the store and caches on a miss.

        invalidate(alias: str) -> None:
            Replace the cache entry of an alias with a short-lived invalidation marker.

        Both methods raise DataStoreError on connectivity issues with ElastiCache.
    """

    def __init__(
        self,
        store: AliasBaseDAO,
        ttl: int = TTL.HOT,
        negative_ttl: int = TTL.NEGATIVE,
        **kwargs,
    ):
        """Initialize the resolution cache

        Args:
            store (AliasBaseDAO):
                Alias store read on cache misses.
            ttl (int):
                Seconds a resolved record stays cached. Defaults to TTL.HOT.
            negative_ttl (int):
                Seconds an absent alias stays cached. Defaults to TTL.NEGATIVE.
            **kwargs:
                Forwarded to ElastiCacheClientMixin (prefix, redis_client, ...).
        """
        super().__init__(**kwargs)
        self.store = store
        self.ttl = ttl
        self.negative_ttl = negative_ttl

    @handle_redis_connection_error
    @beartype
    def get(self, alias: str) -> UrlRecord | None:
        """Resolve an alias through the cache

        Steps:
            - Try "cache:<prefix>:links:<alias>".
            - On CACHE HIT, decode the record (or None for the absence marker).
            - On CACHE MISS or a fresh invalidation, read the alias store and cache the result.

        NOTE: A reader that missed before a save can finish after the writer's
              invalidation:

              (reader): GET cache:<app>:links:<alias>   => nil
              (reader): alias store GET                 => nil
              (writer): alias store SET, then invalidate
              (reader): cache absence marker            => new alias reads as NotFound

              Absence markers are therefore written with SET NX, and invalidate
              leaves an INVALIDATED marker (instead of deleting the key) that a
              late absence marker can't overwrite. Records are immutable, so
              caching a found record always replaces whatever is there.

        Returns:
            UrlRecord | None: the resolved record, None if the alias doesn't exist.

        Raises:
            DataStoreError:
                If ElastiCache or the alias store is unreachable.
        """
        key = self.keys.link_key(alias)

        cached = self.redis.get(key)
        if cached is not None and cached != INVALIDATED:
            logger.debug('Resolution cache HIT.', extra={'alias': alias})
            return None if cached == MISSING else UrlRecord.from_dict(json.loads(cached))

        logger.debug('Resolution cache MISS. Loading from alias store.', extra={'alias': alias})
        record = self.store.get(alias)
        if record is not None:
            self.redis.set(key, json.dumps(record.as_dict()), ex=self.ttl)
        elif cached is None:
            self.redis.set(key, MISSING, ex=self.negative_ttl, nx=True)
        return record

    @handle_redis_connection_error
    @beartype
    def invalidate(self, alias: str) -> None:
        self.redis.set(self.keys.link_key(alias), INVALIDATED, ex=self.negative_ttl)
        logger.debug('Resolution cache entry invalidated.', extra={'alias': alias})
