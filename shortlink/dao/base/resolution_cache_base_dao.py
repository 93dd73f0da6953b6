"""Abstract base class for alias resolution caches.

A resolution cache sits in front of an AliasBaseDAO (cache-aside). Reads
populate it on a miss; writers must call `invalidate` right after saving a
record so that the next read observes the fresh record.
"""

from abc import ABC, abstractmethod

from shortlink.models import UrlRecord


class ResolutionCacheBaseDAO(ABC):
    """Interface for alias -> UrlRecord lookup caches.

    Methods:
        get(alias: str) -> UrlRecord | None:
            Return the cached record, loading it from the alias store on a miss.
            Returns None if the alias does not resolve.

        invalidate(alias: str) -> None:
            Remove any cached entry (including a cached absence) for the alias.

        Both methods raise DataStoreError when the cache is unreachable.
    """

    @abstractmethod
    def get(self, alias: str) -> UrlRecord | None:
        pass

    @abstractmethod
    def invalidate(self, alias: str) -> None:
        pass
