import pytest
from pytest import MonkeyPatch

from shorturl.constants import ENV, Fingerprint
from shorturl.models import ShortLinkRecord
from shorturl.dao.base import ShortLinkBaseDAO
from shorturl.dao.exceptions import CacheError, ShortCodeOverflowError, ShortLinkNotFoundError
from shorturl.utils.shortener import partition_of


class InMemoryShortLinkDAO(ShortLinkBaseDAO):
    """Store double keeping records per (partition, short code)."""

    def __init__(self):
        self.partitions = {}
        self.get_calls = 0

    def _urls(self, short_code: str) -> list[str]:
        return self.partitions.setdefault(partition_of(short_code), {}).setdefault(short_code, [])

    def insert(self, short_code, original_url, **kwargs):
        urls = self._urls(short_code)
        if original_url in urls:
            return ShortLinkRecord(short_code=short_code, original_url=original_url, sequence=urls.index(original_url))
        if len(urls) >= Fingerprint.MAX_COLLISIONS:
            raise ShortCodeOverflowError(original_url)
        urls.append(original_url)
        return ShortLinkRecord(short_code=short_code, original_url=original_url, sequence=len(urls) - 1)

    def get(self, short_code, sequence, **kwargs):
        self.get_calls += 1
        urls = self._urls(short_code)
        if sequence >= len(urls):
            raise ShortLinkNotFoundError(f"Short link with code '{short_code}' and sequence {sequence} not found.")
        return ShortLinkRecord(short_code=short_code, original_url=urls[sequence], sequence=sequence)

    def count(self, short_code, **kwargs):
        return len(self._urls(short_code))


class InMemoryCacheDAO:
    """Cache double; `broken = True` makes every call raise CacheError."""

    def __init__(self):
        self.entries = {}
        self.broken = False

    def get(self, short_code, sequence):
        if self.broken:
            raise CacheError("Can't connect to cache at cache.test:6379/0.")
        return self.entries.get(f'{short_code}:{sequence}')

    def put(self, short_code, sequence, original_url, ttl=10):
        if self.broken:
            raise CacheError("Can't connect to cache at cache.test:6379/0.")
        self.entries[f'{short_code}:{sequence}'] = original_url


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: MonkeyPatch) -> None:
    """Run every test as a deployed (non-local) lambda without ElastiCache settings."""
    monkeypatch.setenv(ENV.App.APP_ENV, 'test')
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    monkeypatch.delenv(ENV.App.APP_NAME, raising=False)
    for name in ENV.ElastiCache:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def memory_store() -> InMemoryShortLinkDAO:
    return InMemoryShortLinkDAO()


@pytest.fixture
def memory_cache() -> InMemoryCacheDAO:
    return InMemoryCacheDAO()
