"""Cache mixin providing AWS-resolved ElastiCache client initialization.

Responsibilities:
    - Initialize a TLS-enabled, pooled Redis client targeting AWS ElastiCache.
    - Resolve connection parameters from AWS SSM Parameter Store.
    - Resolve credentials from AWS Secrets Manager.
    - Fall back to the store's Redis settings when ElastiCache isn't configured.
    - Delegate healthcheck to RedisClientMixin (raising CacheError).

Classes:
    - ElastiCacheClientMixin: Base mixin to inject AWS-resolved client setup
      (TLS + AUTH) and reuse RedisClientMixin's healthcheck.

Functions:
    - elasticache_configured() -> bool: True when the ELASTICACHE_* parameter names are set.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortLinkCacheDAO(ElastiCacheClientMixin):
        ...     pass
        ...
        >>> dao = ShortLinkCacheDAO(prefix="shorturl:dev")
        >>> dao._heatlhcheck()
        True

Environment variables (paths/names to resolve at runtime):
    - ELASTICACHE_HOST_PARAM  : SSM parameter path for Redis host
    - ELASTICACHE_PORT_PARAM  : SSM parameter path for Redis port
    - ELASTICACHE_DB_PARAM    : SSM parameter path for Redis DB index
    - ELASTICACHE_USER_PARAM  : SSM parameter path for Redis username (optional)
    - ELASTICACHE_SECRET      : Secrets Manager name for {"username": "...", "password": "..."}
    - LOCALSTACK_ENDPOINT     : LocalStack endpoint URL for local development
"""

import json
import os
from typing import Any, Optional

import boto3
import redis
from botocore.exceptions import BotoCoreError, ClientError

from shorturl.constants import ENV, LOCAL_REDIS_CONFIG
from shorturl.dao.cache.cache_key_schema import CacheKeySchema
from shorturl.dao.exceptions import CacheError
from shorturl.dao.redis.mixins import RedisClientMixin, build_redis_client
from shorturl.types import RedisConfiguration, SSMClient, SecretsManagerClient
from shorturl.utils.helpers import require_environment
from shorturl.utils.runtime import running_locally


def elasticache_configured() -> bool:
    """Check whether the SSM parameter names of an ElastiCache cluster are set"""
    required = (ENV.ElastiCache.HOST_PARAM, ENV.ElastiCache.PORT_PARAM, ENV.ElastiCache.DB_PARAM)
    return all(os.environ.get(name) for name in required)


def _aws_client_kwargs() -> dict[str, Any]:
    # fmt: off
    return {
        'endpoint_url': os.environ.get(ENV.LocalStack.ENDPOINT, 'http://localhost:4566'),
    } if running_locally() else {}
    # fmt: on


class ElastiCacheClientMixin(RedisClientMixin):
    """Mixin ElastiCache client setup using AWS SSM/Secrets with TLS by default.

    This mixin resolves connection parameters from SSM and credentials from
    Secrets Manager, constructs a pooled Redis client (TLS in AWS; plain in local),
    and passes it to the parent RedisClientMixin for the healthcheck.

    When the ELASTICACHE_* variables are absent, the cache shares the Redis
    server of the store, described by `redis_config` (or the local defaults).

    Attributes:
        redis (redis.Redis):
            Active Redis client instance.

        keys (CacheKeySchema):
            Helper class for generating namespaced cache keys.

    Args:
        prefix (Optional[str]):
            Namespace prefix for all cache keys, e.g. 'app:env'.
        redis_client (Optional[redis.Redis]):
            Pre-initialized Redis client (useful in tests). Skips all resolution.
        redis_config (Optional[dict]):
            Store Redis settings (host, port, db, pool options) used when
            ElastiCache isn't configured.
        ssm_client (Optional[SSMClient]):
            Optional boto3 SSM client to reuse (useful in tests).
            If None, a new client is created (points to LocalStack in local mode).
        secrets_client (Optional[SecretsManagerClient]):
            Optional boto3 Secrets Manager client to reuse (useful in tests).
            If None, a new client is created (points to LocalStack in local mode).
        redis_decode_responses (bool):
            If True, decodes Redis responses. Defaults to True.
        tls_verify (bool):
            If True, require certificate verification (ssl_cert_reqs='required').
        ca_bundle_path (Optional[str]):
            Optional path to a CA bundle file for certificate verification.

    Raises:
        MissingEnvironmentVariableError:
            If ELASTICACHE_SECRET is missing while ElastiCache is configured.
        ValueError:
            If SSM values are malformed (e.g., non-integer port/db) or the secret payload
            is invalid JSON.
        botocore.exceptions.BotoCoreError / ClientError:
            On AWS API failures while reading SSM or Secrets Manager.
        CacheError:
            If the Redis healthcheck fails after initialization.
    """

    connection_error = CacheError
    backend_label = 'cache'

    def __init__(
        self,
        prefix: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        redis_config: Optional[RedisConfiguration] = None,
        ssm_client: Optional[SSMClient] = None,
        secrets_client: Optional[SecretsManagerClient] = None,
        redis_decode_responses: bool = True,
        tls_verify: bool = False,
        ca_bundle_path: Optional[str] = None,
    ):
        if redis_client is None and elasticache_configured():
            # Resolve runtime settings from AWS (or LocalStack in local mode)
            host, port, db, user_from_ssm = self._resolve_ssm_params(ssm_client)
            username, password = self._resolve_secret(secrets_client)
            username = username or user_from_ssm  # prefer secret, fallback to SSM, or None

            client_kwargs = dict(
                host=host,
                port=port,
                db=db,
                username=username,
                password=password,
                decode_responses=redis_decode_responses,
            )

            # ElastiCache requires TLS when AuthToken is enabled; local Redis runs without TLS
            if not running_locally():
                client_kwargs.update(
                    ssl=True,
                    ssl_cert_reqs='required' if tls_verify else None,
                )
                if tls_verify and ca_bundle_path:
                    client_kwargs['ssl_ca_certs'] = ca_bundle_path

            redis_client = build_redis_client(**client_kwargs)
        elif redis_client is None:
            redis_client = build_redis_client(**{
                **(redis_config or LOCAL_REDIS_CONFIG),
                'decode_responses': redis_decode_responses,
            })

        # Delegate to base mixin: sets self.redis and runs healthcheck
        super().__init__(redis_client=redis_client, prefix=prefix)
        self.keys = CacheKeySchema(prefix=prefix)

    @staticmethod
    @require_environment(ENV.ElastiCache.HOST_PARAM, ENV.ElastiCache.PORT_PARAM, ENV.ElastiCache.DB_PARAM)
    def _resolve_ssm_params(ssm_client: Optional[SSMClient]) -> tuple[str, int, int, Optional[str]]:
        """Resolve host, port, db, and optional username from SSM Parameter Store.

        Returns:
            Tuple[str, int, int, Optional[str]]:
                (host, port, db, user_from_ssm_or_none)

        Raises:
            MissingEnvironmentVariableError:
                If mandatory environment variables are missing.
            botocore.exceptions.BotoCoreError / ClientError:
                On AWS SSM API failures.
            ValueError:
                If SSM responses are malformed or port/db cannot be cast to int.
        """
        host_param = os.environ[ENV.ElastiCache.HOST_PARAM]
        port_param = os.environ[ENV.ElastiCache.PORT_PARAM]
        db_param = os.environ[ENV.ElastiCache.DB_PARAM]
        user_param = os.environ.get(ENV.ElastiCache.USER_PARAM)  # optional

        ssm = ssm_client or boto3.client('ssm', **_aws_client_kwargs())

        try:
            host = ssm.get_parameter(Name=host_param)['Parameter']['Value']
            port_str = ssm.get_parameter(Name=port_param)['Parameter']['Value']
            db_str = ssm.get_parameter(Name=db_param)['Parameter']['Value']
            user = None
            if user_param:
                user = ssm.get_parameter(Name=user_param)['Parameter']['Value']
        except (BotoCoreError, ClientError):
            raise
        except KeyError as e:
            raise ValueError('Malformed SSM get_parameter response') from e

        try:
            port = int(port_str)
            db = int(db_str)
        except (TypeError, ValueError) as e:
            raise ValueError(f'Invalid ElastiCache port/db values: port={port_str!r} db={db_str!r}') from e

        return host, port, db, user

    @staticmethod
    @require_environment(ENV.ElastiCache.SECRET)
    def _resolve_secret(secrets_client: Optional[SecretsManagerClient]) -> tuple[Optional[str], Optional[str]]:
        """Resolve optional username and password from Secrets Manager.

        The secret is expected to be a JSON object with fields:
            - "username": optional string (commonly None for ElastiCache token auth)
            - "password": the AuthToken (may be empty for LocalStack / local Redis)

        Returns:
            Tuple[Optional[str], Optional[str]]:
                (username_or_none, password_or_none)

        Raises:
            MissingEnvironmentVariableError:
                If ELASTICACHE_SECRET environment variable is missing.
            botocore.exceptions.BotoCoreError / ClientError:
                On AWS Secrets Manager API failures.
            ValueError:
                If the secret payload is not valid JSON, or the password is missing outside local mode.
        """
        secret_name = os.environ[ENV.ElastiCache.SECRET]
        sm = secrets_client or boto3.client('secretsmanager', **_aws_client_kwargs())

        try:
            raw = sm.get_secret_value(SecretId=secret_name).get('SecretString')
            payload = json.loads(raw or '{}')
        except (BotoCoreError, ClientError):
            raise
        except json.JSONDecodeError as e:
            raise ValueError('Invalid JSON in ElastiCache secret payload') from e

        username = payload.get('username')  # optional
        password = payload.get('password')

        if not password and not running_locally():
            raise ValueError('ElastiCache secret must contain a non-empty "password" field')

        return username, password or None
