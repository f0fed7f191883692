"""Helper utilities for AWS lambda functions.

Functions:
    query_parameter(event, name) -> str | None
        Extract a query string parameter from an API Gateway event
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn any unexpected handler exception into a 500 response
"""

import os
import functools
import logging
from typing import Any
from collections.abc import Callable

from shorturl.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from shorturl.exceptions import MissingEnvironmentVariableError
from shorturl.types import LambdaEvent, LambdaResponse
from shorturl.utils.responses import response_500
from shorturl.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def query_parameter(event: LambdaEvent, name: str) -> str | None:
    """Extract a query string parameter from an API Gateway event

    API Gateway sends `queryStringParameters: null` when the request has no query
    string, hence the `or {}`.

    Example:
        >>> query_parameter({'queryStringParameters': {'short_url': 'Ab3xQw'}}, 'short_url')
        'Ab3xQw'
        >>> query_parameter({'queryStringParameters': None}, 'short_url') is None
        True
    """
    return (event.get('queryStringParameters') or {}).get(name)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable[[LambdaEvent, Any], LambdaResponse]) -> Callable[[LambdaEvent, Any], LambdaResponse]:
    """Decorator: respond with 500 instead of crashing the Lambda runtime

    When running locally the original exception is re-raised, so SAM prints the traceback.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: Any) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
