"""Abstract base class for fixed-window request counter DAOs.

A rate window is a per-client integer counter living in a shared store. It
expires on its own once the window elapses; an absent counter counts as 0.
"""

from abc import ABC, abstractmethod


class RateWindowBaseDAO(ABC):
    """Interface for per-client request counters shared across service instances.

    Methods:
        consume(client_id: str, limit: int, window_seconds: int, **kwargs) -> tuple[bool, int]:
            In ONE atomic store operation: read the live count, and when it is
            below `limit` increment it, making sure the window key expires after
            `window_seconds`. Returns (admitted, pre-increment count).
            A full window is left untouched and reported as (False, count).
            Raises DataStoreError when the store is unreachable.
    """

    @abstractmethod
    def consume(self, client_id: str, limit: int, window_seconds: int, **kwargs) -> tuple[bool, int]:
        pass
