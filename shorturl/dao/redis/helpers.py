import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from shorturl.dao.exceptions import DAOError, DataStoreError


__all__ = ['handle_redis_connection_error', 'translate_redis_errors']

F = TypeVar('F', bound=Callable[..., Any])

# Raised by redis-py for unreachable servers, socket timeouts, and exhausted blocking pools
REDIS_CONNECTIVITY_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def translate_redis_errors(
    error_class: type[DAOError],
    label: str,
    errors: tuple[type[Exception], ...] = REDIS_CONNECTIVITY_ERRORS,
) -> Callable[[F], F]:
    """Build a decorator that converts Redis errors into a DAO error

    Args:
        error_class (type[DAOError]):
            DAO exception raised in place of the Redis error.
        label (str):
            Human readable name of the backend, used in the error message.
        errors (tuple[type[Exception], ...]):
            Redis exceptions to translate. Defaults to connectivity errors only.

    Returns:
        Callable[[F], F]: decorator for DAO methods whose instance exposes `self.redis`.
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except errors as e:
                info = self.redis.connection_pool.connection_kwargs
                redis_host = info.get('host')
                redis_port = info.get('port')
                redis_db = info.get('db')
                if isinstance(e, REDIS_CONNECTIVITY_ERRORS):
                    raise error_class(f"Can't connect to {label} at {redis_host}:{redis_port}/{redis_db}.") from e
                raise error_class(f"{label} at {redis_host}:{redis_port}/{redis_db} rejected the command: {e}") from e

        return wrapper

    return decorator


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.ConnectionError
            (unreachable server or exhausted connection pool) or redis.exceptions.TimeoutError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def count(self, short_code):
        ...     return self.redis.hlen(short_code)
    """
    return translate_redis_errors(DataStoreError, 'Redis')(method)
