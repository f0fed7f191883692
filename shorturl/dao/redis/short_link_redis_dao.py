"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of ShortLinkBaseDAO. Each canonical
short code owns two hashes inside the partition namespace of its first symbol:

    <prefix>:links:<partition>:<code>:sequences   (ordinal -> original URL)
    <prefix>:links:<partition>:<code>:urls        (original URL -> ordinal)

Responsibilities:
    - Allocate collision ordinals atomically per short code;
    - Keep inserts idempotent per (short code, original URL);
    - Retrieve records by (short code, ordinal);
    - Raise appropriate DAO exceptions on overflow and connectivity issues.

Classes:
    ShortLinkRedisDAO:
        DAO for storing and retrieving ShortLinkRecord in a Redis datastore.

Example:
    >>> from shorturl.dao.redis import ShortLinkRedisDAO

    >>> dao = ShortLinkRedisDAO(prefix="shorturl:dev")

    >>> dao.insert('Ab3xQw', 'https://example.com/page')
    ShortLinkRecord(short_code='Ab3xQw', original_url='https://example.com/page', sequence=0)

    >>> dao.insert('Ab3xQw', 'https://example.com/other-page').sequence
    1

    >>> dao.get('Ab3xQw', 1).original_url
    'https://example.com/other-page'
"""

import logging

import redis
from beartype import beartype

from shorturl.constants import Fingerprint, MAX_TRANSACTION_RETRIES
from shorturl.models import ShortLinkRecord
from shorturl.dao.base import ShortLinkBaseDAO
from shorturl.dao.redis.mixins import RedisClientMixin
from shorturl.dao.redis.helpers import handle_redis_connection_error
from shorturl.dao.exceptions import DataStoreError, ShortCodeOverflowError, ShortLinkNotFoundError


logger = logging.getLogger(__name__)


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short link records

    This class implements the ShortLinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating partitioned, namespaced Redis keys.

    Methods:
        insert(short_code: str, original_url: str, **kwargs) -> ShortLinkRecord:
            Store a URL under the next free ordinal of a short code (idempotent).
            Raises ShortCodeOverflowError when 16 URLs already share the short code.
            Raises DataStoreError on connectivity issues or exhausted transaction retries.

        get(short_code: str, sequence: int, **kwargs) -> ShortLinkRecord:
            Retrieve the record stored under (short code, ordinal).
            Raises ShortLinkNotFoundError when it doesn't exist.

        find(short_code: str, original_url: str, **kwargs) -> ShortLinkRecord | None:
            Retrieve the record of a URL under a short code, if any.

        count(short_code: str, **kwargs) -> int:
            Number of records stored under a short code.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, short_code: str, original_url: str, **kwargs) -> ShortLinkRecord:
        """Insert an original URL under a short code

        The ordinal is allocated within an optimistic Redis transaction:

            WATCH  <sequences key> <urls key>
            HGET   <urls key> <original url>          -> existing ordinal? return it
            HLEN   <sequences key>                    -> next ordinal (0-15)
            MULTI
            HSET   <sequences key> <ordinal> <original url>
            HSET   <urls key> <original url> <ordinal>
            EXEC                                      -> WatchError? re-read and retry

        Args:
            short_code (str):
                Canonical short code (ordinal bits cleared).
            original_url (str):
                URL to store.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkRecord:
                The new record, or the existing one if the URL is already stored.

        Raises:
            ShortCodeOverflowError:
                If 16 different URLs are already stored under the short code.
            DataStoreError:
                If a Redis connection issue occurs, or if concurrent writers kept
                invalidating the transaction MAX_TRANSACTION_RETRIES times in a row.

        Example:
            >>> dao.insert('Ab3xQw', 'https://example.com')
            ShortLinkRecord(short_code='Ab3xQw', original_url='https://example.com', sequence=0)
        """
        sequences_key = self.keys.link_sequences_key(short_code)
        urls_key = self.keys.link_urls_key(short_code)

        # NOTE: Without WATCH two concurrent inserts of different URLs could both
        #       read HLEN == n and both write ordinal n:
        #
        #       (lambda 1): HLEN <sequences key> => n
        #       (lambda 2): HLEN <sequences key> => n
        #       (lambda 1): HSET <sequences key> n <url 1>
        #       (lambda 2): HSET <sequences key> n <url 2>   => <url 1> is lost
        #
        #       With WATCH, the EXEC of (lambda 2) fails and it retries with n + 1.
        for attempt in range(MAX_TRANSACTION_RETRIES):
            with self.redis.pipeline(transaction=True) as pipe:
                try:
                    pipe.watch(sequences_key, urls_key)

                    existing = pipe.hget(urls_key, original_url)
                    if existing is not None:
                        logger.debug('URL already stored under short code %s.', short_code, extra={'sequence': int(existing)})
                        return ShortLinkRecord(short_code=short_code, original_url=original_url, sequence=int(existing))

                    sequence = int(pipe.hlen(sequences_key))
                    if sequence >= Fingerprint.MAX_COLLISIONS:
                        raise ShortCodeOverflowError(original_url)

                    pipe.multi()
                    pipe.hset(sequences_key, sequence, original_url)
                    pipe.hset(urls_key, original_url, sequence)
                    pipe.execute()
                except redis.exceptions.WatchError:
                    logger.debug('Concurrent write on short code %s. Retrying.', short_code, extra={'attempt': attempt + 1})
                    continue

            logger.debug('Allocated ordinal for short code %s.', short_code, extra={'sequence': sequence})
            return ShortLinkRecord(short_code=short_code, original_url=original_url, sequence=sequence)

        raise DataStoreError(f"Couldn't allocate an ordinal for short code '{short_code}' after {MAX_TRANSACTION_RETRIES} attempts.")

    @handle_redis_connection_error
    @beartype
    def get(self, short_code: str, sequence: int, **kwargs) -> ShortLinkRecord:
        """Retrieve a stored record by canonical short code and ordinal

        Args:
            short_code (str):
                Canonical short code.
            sequence (int):
                Collision ordinal.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkRecord:
                The retrieved record.

        Raises:
            ShortLinkNotFoundError:
                If nothing is stored under (short_code, sequence).
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('Ab3xQw', 0)
            ShortLinkRecord(short_code='Ab3xQw', original_url='https://example.com', sequence=0)
        """
        original_url = self.redis.hget(self.keys.link_sequences_key(short_code), sequence)
        if original_url is None:
            raise ShortLinkNotFoundError(f"Short link with code '{short_code}' and sequence {sequence} not found.")

        return ShortLinkRecord(short_code=short_code, original_url=original_url, sequence=sequence)
