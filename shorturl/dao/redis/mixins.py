"""Redis mixin providing shared client initialization and connectivity checks.

Responsibilities:
    - Initialize a Redis client on top of a bounded, blocking connection pool
    - Healthcheck Redis client

Classes:
    - RedisClientMixin: Base mixin to inject Redis key management, client setup & healthcheck.

Functions:
    - build_redis_client(...) -> redis.Redis: pooled client with create/wait/recycle timeouts.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
        ...     pass
        ...
        >>> dao = ShortLinkRedisDAO(prefix="myapp:prod")
        >>> dao._heatlhcheck()
        True
"""

from typing import Any, Optional

import redis

from shorturl.constants import RedisPool
from shorturl.dao.redis.redis_key_schema import RedisKeySchema
from shorturl.dao.exceptions import DAOError, DataStoreError


def build_redis_client(
    host: str = 'localhost',
    port: int = 6379,
    db: int = 0,
    decode_responses: bool = True,
    username: Optional[str] = None,
    password: Optional[str] = None,
    max_connections: int = RedisPool.MAX_CONNECTIONS,
    create_timeout: float = RedisPool.CREATE_TIMEOUT,
    wait_timeout: float = RedisPool.WAIT_TIMEOUT,
    recycle_timeout: float = RedisPool.RECYCLE_TIMEOUT,
    ssl: bool = False,
    **connection_kwargs: Any,
) -> redis.Redis:
    """Create a Redis client backed by a bounded blocking connection pool

    Timeouts:
        create_timeout:  seconds allowed to open a new connection (socket_connect_timeout)
        wait_timeout:    seconds a caller waits for a free pooled connection before
                         redis.exceptions.ConnectionError("No connection available.")
        recycle_timeout: idle seconds after which a pooled connection is health checked
                         before reuse (health_check_interval)

    Extra keyword arguments (e.g. ssl_cert_reqs, ssl_ca_certs) are forwarded to each connection.

    Example:
        >>> client = build_redis_client(host='127.0.0.1', max_connections=10)
        >>> client.connection_pool.max_connections
        10
    """
    if ssl:
        connection_kwargs['connection_class'] = redis.SSLConnection

    pool = redis.BlockingConnectionPool(
        host=host,
        port=int(port),
        db=int(db),
        username=username,
        password=password,
        decode_responses=decode_responses,
        max_connections=int(max_connections),
        timeout=float(wait_timeout),
        socket_connect_timeout=float(create_timeout),
        health_check_interval=float(recycle_timeout),
        **connection_kwargs,
    )
    return redis.Redis(connection_pool=pool)


class RedisClientMixin:
    """Mixin Redis client setup and health check for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis):
            Active Redis client instance used by subclasses.

        keys (RedisKeySchema):
            Helper class for generating namespaced Redis key names.

    Methods:
        _heatlhcheck(raise_error: bool = True) -> bool:
            Ping Redis to verify connectivity.
            Optionally raise a DataStoreError if unreachable.
    """

    # Raised by the healthcheck when the server is unreachable
    connection_error: type[DAOError] = DataStoreError
    backend_label = 'Redis'

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_max_connections: Optional[int] = RedisPool.MAX_CONNECTIONS,
        redis_create_timeout: Optional[float] = RedisPool.CREATE_TIMEOUT,
        redis_wait_timeout: Optional[float] = RedisPool.WAIT_TIMEOUT,
        redis_recycle_timeout: Optional[float] = RedisPool.RECYCLE_TIMEOUT,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Initialize a Redis-based DAO for short link management

        The option is given to either use an existing Redis client instance or
        create one via the appropriate Redis connection parameters.

        Args:
            redis_host (Optional[str]):
                Hostname of the Redis server. Defaults to 'localhost'.

            redis_port (Optional[int]):
                Redis server port. Defaults to 6379.

            redis_db (Optional[int]):
                Redis database index. Defaults to 0.

            redis_decode_responses (Optional[bool]):
                If True, decodes Redis responses. Defaults to True.

            redis_username (Optional[str]):
                Username for Redis authentication (if required).

            redis_password (Optional[str]):
                Password for Redis authentication (if required).

            redis_max_connections (Optional[int]):
                Size of the connection pool.

            redis_create_timeout, redis_wait_timeout, redis_recycle_timeout (Optional[float]):
                Pool timeouts in seconds (see build_redis_client).

            redis_client (Optional[redis.Redis]):
                Pre-initialized Redis client. If None, a new client is created.

            prefix (Optional[str]):
                Namespace prefix for all Redis keys, e.g. 'app:env'.

        Raises:
            DataStoreError:
                If Redis healthcheck fails (connectivity issues).
        """
        if redis_client is None:
            redis_client = build_redis_client(
                host=redis_host,
                port=redis_port,
                db=redis_db,
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                max_connections=redis_max_connections,
                create_timeout=redis_create_timeout,
                wait_timeout=redis_wait_timeout,
                recycle_timeout=redis_recycle_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._heatlhcheck()

    def _heatlhcheck(self, raise_error: bool = True) -> bool:
        """PING Redis to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if Redis is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If Redis connection cannot be established and raise_error=True.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if raise_error:
                info = self.redis.connection_pool.connection_kwargs
                redis_host = info.get('host')
                redis_port = info.get('port')
                redis_db = info.get('db')
                raise self.connection_error(
                    f"Can't connect to {self.backend_label} at {redis_host}:{redis_port}/{redis_db}. Check the provided configuration parameters."
                ) from e
            return False
        else:
            return True
