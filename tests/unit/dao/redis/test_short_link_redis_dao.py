"""Unit tests for the ShortLinkRedisDAO

Test coverage includes:

1. Insertion behavior
   - New URLs get the next free ordinal inside a WATCH/MULTI/EXEC transaction.
   - Already stored URLs return their existing record (idempotent).
   - A 17th distinct URL raises ShortCodeOverflowError.
   - Concurrent writers (WatchError) trigger a bounded retry.
   - Ensures invalid types raise BeartypeCallHintParamViolation.
   - Confirms Redis connection errors raise DataStoreError.

2. Retrieval behavior
   - Ensures fetching stored (code, ordinal) pairs returns a ShortLinkRecord.
   - Confirms missing pairs raise ShortLinkNotFoundError.
   - Confirms Redis connection errors raise DataStoreError.
"""

import re
from unittest.mock import call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from shorturl.constants import MAX_TRANSACTION_RETRIES
from shorturl.models import ShortLinkRecord
from shorturl.dao.exceptions import DataStoreError, ShortCodeOverflowError, ShortLinkNotFoundError
from shorturl.dao.redis import ShortLinkRedisDAO


SEQUENCES_KEY = 'testapp:test:links:upper:Ab3xQw:sequences'
URLS_KEY = 'testapp:test:links:upper:Ab3xQw:urls'


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao(redis_client, app_prefix):
    """Create a ShortLinkRedisDAO instance with a mocked Redis client."""
    return ShortLinkRedisDAO(redis_client=redis_client, prefix=app_prefix)


# -------------------------------
# 1. Insertion behavior
# -------------------------------


def test_insert_new_url(dao, redis_client):
    """Ensure the first URL of a code gets ordinal 0 and both hashes are written atomically."""
    record = dao.insert('Ab3xQw', 'https://example.com/test')

    assert record == ShortLinkRecord(short_code='Ab3xQw', original_url='https://example.com/test', sequence=0)
    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.watch.assert_called_once_with(SEQUENCES_KEY, URLS_KEY)
    redis_client.hget.assert_called_once_with(URLS_KEY, 'https://example.com/test')
    redis_client.hlen.assert_called_once_with(SEQUENCES_KEY)
    redis_client.multi.assert_called_once()
    redis_client.hset.assert_has_calls(
        [
            call(SEQUENCES_KEY, 0, 'https://example.com/test'),
            call(URLS_KEY, 'https://example.com/test', 0),
        ],
        any_order=False,
    )
    redis_client.execute.assert_called_once()


def test_insert_colliding_url_gets_next_ordinal(dao, redis_client):
    """Ensure a new URL sharing the fingerprint gets ordinal == number of stored records."""
    redis_client.hlen.return_value = 5

    record = dao.insert('Ab3xQw', 'https://example.com/sixth')

    assert record.sequence == 5
    redis_client.hset.assert_has_calls(
        [
            call(SEQUENCES_KEY, 5, 'https://example.com/sixth'),
            call(URLS_KEY, 'https://example.com/sixth', 5),
        ]
    )


def test_insert_existing_url_is_idempotent(dao, redis_client):
    """Ensure resubmitting a stored URL returns its record without writing."""
    redis_client.hget.return_value = '3'

    record = dao.insert('Ab3xQw', 'https://example.com/again')

    assert record == ShortLinkRecord(short_code='Ab3xQw', original_url='https://example.com/again', sequence=3)
    redis_client.multi.assert_not_called()
    redis_client.hset.assert_not_called()
    redis_client.execute.assert_not_called()


def test_insert_overflow(dao, redis_client):
    """Ensure a 17th distinct URL raises ShortCodeOverflowError carrying the URL."""
    redis_client.hlen.return_value = 16

    with pytest.raises(ShortCodeOverflowError, match=re.escape('hash collision: https://example.com/17th')) as exc_info:
        dao.insert('Ab3xQw', 'https://example.com/17th')

    assert exc_info.value.original_url == 'https://example.com/17th'
    redis_client.hset.assert_not_called()


def test_insert_existing_url_when_full(dao, redis_client):
    """Ensure stored URLs stay idempotent even when all ordinals are taken."""
    redis_client.hget.return_value = '15'
    redis_client.hlen.return_value = 16

    record = dao.insert('Ab3xQw', 'https://example.com/16th')

    assert record.sequence == 15


def test_insert_retries_on_concurrent_write(dao, redis_client):
    """Ensure a WatchError re-reads the code's records and retries with the next ordinal."""
    redis_client.hlen.side_effect = [0, 1]
    redis_client.execute.side_effect = [redis.exceptions.WatchError('changed'), [1, 1]]

    record = dao.insert('Ab3xQw', 'https://example.com/racer')

    assert record.sequence == 1
    assert redis_client.watch.call_count == 2
    assert redis_client.hset.call_args_list[-2:] == [
        call(SEQUENCES_KEY, 1, 'https://example.com/racer'),
        call(URLS_KEY, 'https://example.com/racer', 1),
    ]


def test_insert_retries_exhausted(dao, redis_client):
    """Ensure endless contention raises DataStoreError after MAX_TRANSACTION_RETRIES attempts."""
    redis_client.execute.side_effect = redis.exceptions.WatchError('changed')

    with pytest.raises(DataStoreError, match="Couldn't allocate an ordinal for short code 'Ab3xQw'"):
        dao.insert('Ab3xQw', 'https://example.com/contended')

    assert redis_client.watch.call_count == MAX_TRANSACTION_RETRIES


@pytest.mark.parametrize(
    'short_code, original_url',
    [
        (123, 'https://example.com'),
        ('Ab3xQw', None),
        (None, None),
    ],
)
def test_insert_with_invalid_type(dao, short_code, original_url):
    """Ensure inserting invalid types raises a Beartype error."""
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.insert(short_code, original_url)


def test_insert_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during insert raise DataStoreError."""
    redis_client.watch.side_effect = redis.exceptions.ConnectionError('Connection error')
    redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.insert('Ab3xQw', 'https://example.com/failure')


def test_insert_with_exhausted_pool(dao, redis_client):
    """Ensure an exhausted connection pool surfaces as DataStoreError."""
    redis_client.pipeline.side_effect = redis.exceptions.ConnectionError('No connection available.')

    with pytest.raises(DataStoreError):
        dao.insert('Ab3xQw', 'https://example.com/failure')


# -------------------------------
# 2. Retrieval behavior
# -------------------------------


def test_get_short_link(dao, redis_client):
    """Ensure fetching a stored (code, ordinal) pair returns its record."""
    redis_client.hget.return_value = 'https://example.com/found'

    record = dao.get('Ab3xQw', 2)

    assert record == ShortLinkRecord(short_code='Ab3xQw', original_url='https://example.com/found', sequence=2)
    redis_client.hget.assert_called_once_with(SEQUENCES_KEY, 2)


def test_get_short_link_not_found(dao, redis_client):
    """Ensure missing pairs raise ShortLinkNotFoundError."""
    redis_client.hget.return_value = None

    with pytest.raises(ShortLinkNotFoundError, match=re.escape("Short link with code 'Ab3xQw' and sequence 4 not found.")):
        dao.get('Ab3xQw', 4)


def test_get_short_link_with_invalid_type(dao):
    """Ensure invalid parameter types raise a Beartype error."""
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.get('Ab3xQw', '0')


def test_get_short_link_with_redis_timeout(dao, redis_client):
    """Ensure socket timeouts during get raise DataStoreError."""
    redis_client.hget.side_effect = redis.exceptions.TimeoutError('Timeout reading from socket')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        dao.get('Ab3xQw', 0)


def test_get_routes_by_partition(dao, redis_client):
    """Ensure lookups read only the partition of the code's first symbol."""
    redis_client.hget.return_value = 'https://example.com/digit'

    dao.get('7b3xQw', 0)

    redis_client.hget.assert_called_once_with('testapp:test:links:digit:7b3xQw:sequences', 0)
