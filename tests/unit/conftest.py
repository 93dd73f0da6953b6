import threading
import time
from datetime import datetime, UTC

import pytest

from shortlink.models import UrlRecord, ClickEvent
from shortlink.dao.base import AliasBaseDAO, RateWindowBaseDAO, ResolutionCacheBaseDAO
from shortlink.dao.exceptions import AliasAlreadyExistsError, DataStoreError


class InMemoryAliasDAO(AliasBaseDAO):
    """Dict-backed alias store with the same uniqueness rule as the Redis DAO."""

    def __init__(self):
        self.records: dict[str, UrlRecord] = {}
        self.clicks: dict[str, list[ClickEvent]] = {}

    def exists(self, alias, **kwargs):
        return alias in self.records

    def get(self, alias, **kwargs):
        return self.records.get(alias)

    def save(self, record, **kwargs):
        if record.alias in self.records:
            raise AliasAlreadyExistsError(f"Alias '{record.alias}' already exists.")
        self.records[record.alias] = record
        return record

    def append(self, click, **kwargs):
        self.clicks.setdefault(click.alias, []).append(click)

    def count_clicks(self, alias, **kwargs):
        return len(self.clicks.get(alias, []))


class InMemoryResolutionCache(ResolutionCacheBaseDAO):
    """Cache-aside resolver that remembers hits and misses like the ElastiCache DAO."""

    def __init__(self, store: AliasBaseDAO):
        self.store = store
        self.entries: dict[str, UrlRecord | None] = {}

    def get(self, alias):
        if alias not in self.entries:
            self.entries[alias] = self.store.get(alias)
        return self.entries[alias]

    def invalidate(self, alias):
        self.entries.pop(alias, None)


class InMemoryRateWindowDAO(RateWindowBaseDAO):
    """Counter store without expiry; tests open new windows by clearing it.

    `consume` holds a lock for the whole check-and-increment, like Redis running
    a script, and yields the thread between read and write so that unserialized
    callers would interleave.
    """

    def __init__(self, unreachable: bool = False):
        self.counts: dict[str, int] = {}
        self.ttls: dict[str, int] = {}
        self.unreachable = unreachable
        self.calls = 0
        self._lock = threading.Lock()

    def consume(self, client_id, limit, window_seconds, **kwargs):
        if self.unreachable:
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")

        with self._lock:
            self.calls += 1
            current = self.counts.get(client_id, 0)
            if current >= limit:
                return False, current
            time.sleep(0)
            self.counts[client_id] = current + 1
            if current == 0:
                self.ttls[client_id] = window_seconds
            return True, current


@pytest.fixture
def store() -> InMemoryAliasDAO:
    return InMemoryAliasDAO()


@pytest.fixture
def cache(store) -> InMemoryResolutionCache:
    return InMemoryResolutionCache(store)


@pytest.fixture
def counter() -> InMemoryRateWindowDAO:
    return InMemoryRateWindowDAO()


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 10, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def unreachable_counter() -> InMemoryRateWindowDAO:
    return InMemoryRateWindowDAO(unreachable=True)


@pytest.fixture
def lambda_env(monkeypatch) -> None:
    """Run handlers as deployed: unexpected errors become 500 responses."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.setenv('APP_NAME', 'shortlink')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
