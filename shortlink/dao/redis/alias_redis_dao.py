"""Data Access Object (DAO) implementation for managing aliases in Redis

This module provides a Redis-based implementation of AliasBaseDAO for saving,
resolving and click-logging UrlRecord instances.

Responsibilities:
    - Save and retrieve UrlRecords from Redis;
    - Enforce alias uniqueness with an atomic SET NX;
    - Maintain an append-only click log per alias;
    - Raise appropriate DAO exceptions.

Redis layout:
    <prefix>:links:<alias>          -> UrlRecord JSON document (string, no TTL)
    <prefix>:links:<alias>:clicks   -> ClickEvent JSON documents (list)

Example:
    >>> from shortlink.models import UrlRecord
    >>> from shortlink.dao.redis import AliasRedisDAO

    >>> dao = AliasRedisDAO(prefix="app:dev")

    >>> record = UrlRecord(
    ...     alias="abc12",
    ...     long_url="https://example.com/page",
    ...     created_at=datetime.now(UTC),
    ... )
    >>> dao.save(record)
    UrlRecord(alias='abc12', ...)

    >>> dao.get("abc12").long_url
    'https://example.com/page'

    >>> dao.append(ClickEvent(alias="abc12", clicked_at=datetime.now(UTC)))
    >>> dao.count_clicks("abc12")
    1
"""

import json

from beartype import beartype

from shortlink.models import UrlRecord, ClickEvent
from shortlink.dao.base import AliasBaseDAO
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_connection_error
from shortlink.dao.exceptions import AliasAlreadyExistsError


class AliasRedisDAO(RedisClientMixin, AliasBaseDAO):
    """Redis-based Data Access Object (DAO) for alias -> UrlRecord mappings

    This class implements the AliasBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        exists(alias: str, **kwargs) -> bool
        get(alias: str, **kwargs) -> UrlRecord | None
        save(record: UrlRecord, **kwargs) -> UrlRecord
            Raises AliasAlreadyExistsError when the alias is already stored.
        append(click: ClickEvent, **kwargs) -> None
        count_clicks(alias: str, **kwargs) -> int

        All methods raise DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def exists(self, alias: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_record_key(alias)))

    @handle_redis_connection_error
    @beartype
    def get(self, alias: str, **kwargs) -> UrlRecord | None:
        """Retrieve a stored UrlRecord by alias

        Returns:
            UrlRecord | None:
                The decoded record, or None if nothing is stored under the alias.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        document = self.redis.get(self.keys.link_record_key(alias))
        if document is None:
            return None
        return UrlRecord.from_dict(json.loads(document))

    @handle_redis_connection_error
    @beartype
    def save(self, record: UrlRecord, **kwargs) -> UrlRecord:
        """Save a new UrlRecord into Redis

        NOTE: the caller may have checked exists() beforehand, but two concurrent
              creators can both pass that check for the same alias:

              (lambda 1): exists('promo')  => False
              (lambda 2): exists('promo')  => False
              (lambda 1): SET <app>:links:promo <record> NX  => OK
              (lambda 2): SET <app>:links:promo <record> NX  => nil

              SET NX makes Redis the authority on uniqueness, so the second
              save fails instead of overwriting the first record.

        Args:
            record (UrlRecord):
                Record to persist. Its alias is pre-populated.

        Returns:
            UrlRecord: the saved record

        Raises:
            AliasAlreadyExistsError:
                If a record with the same alias already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        key = self.keys.link_record_key(record.alias)
        created = self.redis.set(key, json.dumps(record.as_dict()), nx=True)
        if not created:
            raise AliasAlreadyExistsError(f"Alias '{record.alias}' already exists.")
        return record

    @handle_redis_connection_error
    @beartype
    def append(self, click: ClickEvent, **kwargs) -> None:
        self.redis.rpush(self.keys.link_clicks_key(click.alias), json.dumps(click.as_dict()))

    @handle_redis_connection_error
    @beartype
    def count_clicks(self, alias: str, **kwargs) -> int:
        return int(self.redis.llen(self.keys.link_clicks_key(alias)))
