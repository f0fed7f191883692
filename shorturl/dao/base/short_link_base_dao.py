"""Abstract base class for short link data access objects (DAOs).

This class establishes a consistent contract for all short link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Allocate collision ordinals for (short code, original URL) pairs.
    - Retrieve ShortLinkRecord objects by (short code, ordinal).
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shorturl.dao.redis import ShortLinkRedisDAO

        >>> dao = ShortLinkRedisDAO(...)

        >>> record = dao.insert('Ab3xQw', 'https://example.com/blog/article-123')
        >>> record.sequence
        0

        >>> dao.get('Ab3xQw', 0).original_url
        'https://example.com/blog/article-123'
"""

from abc import ABC, abstractmethod

from shorturl.models import ShortLinkRecord


class ShortLinkBaseDAO(ABC):
    """Interface for short link data access objects (DAOs).

    Methods:
        insert(short_code: str, original_url: str, **kwargs) -> ShortLinkRecord:
            Store the URL under the next free ordinal of the short code, or return
            the existing record if the URL is already stored under that code.
            Raises ShortCodeOverflowError if all 16 ordinals are taken.
            Raises DataStoreError on connection or write failure.

        get(short_code: str, sequence: int, **kwargs) -> ShortLinkRecord:
            Retrieve a record by canonical short code and ordinal.
            Raises ShortLinkNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations must route every operation by the
        partition of the short code and allocate ordinals atomically per code.

    NOTE:
        - Records are append-only. The DAO does not provide an interface to
          update or delete entries.
    """

    @abstractmethod
    def insert(self, short_code: str, original_url: str, **kwargs) -> ShortLinkRecord:
        """Insert an original URL under a short code

        Args:
            short_code (str):
                Canonical short code (ordinal bits cleared).

            original_url (str):
                The URL to be stored.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkRecord: the newly created or the already existing record.

        Raises:
            ShortCodeOverflowError:
                If 16 different URLs are already stored under the short code.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, short_code: str, sequence: int, **kwargs) -> ShortLinkRecord:
        """Retrieve a record by its canonical short code and collision ordinal

        Args:
            short_code (str):
                Canonical short code.

            sequence (int):
                Collision ordinal in range 0-15.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkRecord: the stored record.

        Raises:
            ShortLinkNotFoundError:
                If no record exists for (short_code, sequence).

            DataStoreError:
                If there is an error in the data store.
        """
        pass
