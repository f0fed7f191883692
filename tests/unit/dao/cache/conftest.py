import json
from unittest.mock import MagicMock

import pytest
import redis
from pytest import MonkeyPatch

from shorturl.constants import ENV


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def elasticache_env(monkeypatch: MonkeyPatch) -> None:
    """Point the cache at an ElastiCache cluster described in SSM / Secrets Manager."""
    monkeypatch.setenv(ENV.ElastiCache.HOST_PARAM, '/test/elasticache/host')
    monkeypatch.setenv(ENV.ElastiCache.PORT_PARAM, '/test/elasticache/port')
    monkeypatch.setenv(ENV.ElastiCache.DB_PARAM, '/test/elasticache/db')
    monkeypatch.setenv(ENV.ElastiCache.USER_PARAM, '/test/elasticache/user')
    monkeypatch.setenv(ENV.ElastiCache.SECRET, 'test/elasticache/credentials')


@pytest.fixture
def ssm_client() -> MagicMock:
    """Mock an SSM client returning host/port/db/user."""
    client = MagicMock(spec=['get_parameter'])

    def _get_parameter(Name):  # noqa: N803
        if Name.endswith('/host'):
            return {'Parameter': {'Value': 'cache.internal'}}
        if Name.endswith('/port'):
            return {'Parameter': {'Value': '6380'}}
        if Name.endswith('/db'):
            return {'Parameter': {'Value': '5'}}
        if Name.endswith('/user'):
            return {'Parameter': {'Value': 'user_from_ssm'}}
        raise KeyError('Unknown parameter')

    client.get_parameter.side_effect = _get_parameter
    return client


@pytest.fixture
def secrets_client() -> MagicMock:
    """Mock a Secrets Manager client returning username/password."""
    client = MagicMock(spec=['get_secret_value'])
    client.get_secret_value.return_value = {'SecretString': json.dumps({'username': 'user_from_secret', 'password': 'p'})}
    return client


@pytest.fixture
def redis_client() -> redis.Redis:
    """Provide a reusable redis client mock with a successful ping."""
    client = MagicMock(spec=redis.Redis)
    client.ping.return_value = True
    client.get.return_value = None
    client.connection_pool = MagicMock()
    client.connection_pool.connection_kwargs = {'host': 'cache.internal', 'port': 6380, 'db': 5}
    return client
