"""Abstract base class for alias data access objects (DAOs).

This class establishes a consistent contract for all alias store implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Provide an interface for saving and retrieving UrlRecord objects.
    - Enforce alias uniqueness at the data store level.
    - Keep an append-only log of ClickEvent objects per alias.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlink.models import UrlRecord
        >>> from shortlink.dao.redis import AliasRedisDAO

        >>> dao = AliasRedisDAO(...)

        >>> record = UrlRecord(
        ...     alias="a1b2c",
        ...     long_url="https://example.com/blog/article-123",
        ...     created_at=datetime.now(UTC),
        ... )
        >>> dao.save(record)

        >>> dao.get("a1b2c").long_url
        'https://example.com/blog/article-123'

        >>> dao.get("missing")
        None
"""

from abc import ABC, abstractmethod

from shortlink.models import UrlRecord, ClickEvent


class AliasBaseDAO(ABC):
    """Interface for alias store data access objects (DAOs).

    Methods:
        exists(alias: str, **kwargs) -> bool:
            Check whether a record is stored under the alias.

        get(alias: str, **kwargs) -> UrlRecord | None:
            Retrieve a record by alias. Returns None if not found.

        save(record: UrlRecord, **kwargs) -> UrlRecord:
            Persist a new record.
            Raises AliasAlreadyExistsError if the alias is already taken.

        append(click: ClickEvent, **kwargs) -> None:
            Append a click event to the alias' click log.

        count_clicks(alias: str, **kwargs) -> int:
            Return the number of click events logged for the alias.

        All methods raise DataStoreError on connection or read/write failure.

    NOTE:
        - `exists` followed by `save` is NOT atomic. Implementations must reject
          a duplicate `save` on their own, since two creators can both pass the
          existence check for the same alias.
        - Records are never deleted. Expiry is judged at read time.
    """

    @abstractmethod
    def exists(self, alias: str, **kwargs) -> bool:
        """Check whether a record with the given alias exists.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, alias: str, **kwargs) -> UrlRecord | None:
        """Retrieve a UrlRecord from the data store by its alias.

        Args:
            alias (str):
                The alias of the UrlRecord to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecord | None: The UrlRecord instance if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def save(self, record: UrlRecord, **kwargs) -> UrlRecord:
        """Save a new UrlRecord into the data store.

        Args:
            record (UrlRecord):
                The UrlRecord instance to be saved. The alias is pre-populated.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecord: the saved record

        Raises:
            AliasAlreadyExistsError:
                If a UrlRecord with the same alias already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def append(self, click: ClickEvent, **kwargs) -> None:
        """Append a ClickEvent to the click log of its alias.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count_clicks(self, alias: str, **kwargs) -> int:
        """Count ClickEvents logged for an alias (0 if none).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
