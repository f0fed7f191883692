"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortLinkNotFoundError:
        Raised when no short link record matches a (short code, sequence) lookup.

    ShortCodeOverflowError:
        Raised when all 16 collision ordinals of a short code are taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, pool exhaustion, etc.).

    CacheError:
        Raised when the cache is unreachable or its connection pool is exhausted.

Example:
    >>> from shorturl.dao.exceptions import ShortCodeOverflowError
    >>> raise ShortCodeOverflowError('https://example.com/17th-collision')
    Traceback (most recent call last):
        ...
    shorturl.dao.exceptions.ShortCodeOverflowError: hash collision: https://example.com/17th-collision
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortLinkNotFoundError(DAOError):
    """Exception raised when a short link record is not found in the data store."""

    error_code = 'dao:short_link_not_found'


class ShortCodeOverflowError(DAOError):
    """Exception raised when a fingerprint has exhausted its 16 collision ordinals.

    Permanent for this URL: retrying yields the same fingerprint and the same full slot range.

    Attributes:
        original_url (str): The URL that could not be assigned an ordinal.
    """

    error_code = 'dao:short_code_overflow'

    def __init__(self, original_url: str):
        super().__init__(f'hash collision: {original_url}')
        self.original_url = original_url


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, pool exhaustion, etc.
    """

    error_code = 'dao:data_store_error'


class CacheError(DAOError):
    """Exception raised when the cache is unavailable or its connection pool is exhausted."""

    error_code = 'dao:cache_error'
