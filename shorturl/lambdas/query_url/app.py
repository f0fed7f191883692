import functools
import logging
from typing import Any

from shorturl.service import ShortenerContext, resolve
from shorturl.dao.exceptions import DataStoreError
from shorturl.exceptions import ParameterError
from shorturl.types import LambdaEvent, LambdaResponse
from shorturl.utils import load_config, query_parameter
from shorturl.utils.helpers import guarantee_500_response
from shorturl.utils.responses import response_200, response_400, response_500
from shorturl.lambdas.query_url.constants import (
    MISSING_SHORT_URL,
    MALFORMED_SHORT_URL,
    SHORT_URL_NOT_FOUND,
    DATA_STORE_UNAVAILABLE,
    QUERY_SUCCESS,
)


logger = logging.getLogger(__name__)


@functools.cache
def shortener_context() -> ShortenerContext:
    """Store/cache DAOs, built on the first request of the Lambda container"""
    return ShortenerContext.from_config(load_config('query_url'))


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: Any) -> LambdaResponse:
    """Handle incoming API Gateway requests to resolve short codes

    This Lambda handler follows this procedure to resolve short codes:
    - Step 1: Extract short code from query string
    - Step 2: Resolve the code through the cache, then the data store (via service)
    - Step 3: Respond with the original URL (empty string if the code was never issued)

    HTTP responses:
        200: Lookup performed
            original_url: resolved URL, or "" when unknown
        400: Bad client request
            message: missing or malformed 'short_url' query parameter
        500: Internal server error
            message: data store unavailable

    Example:
        >>> event = {'queryStringParameters': {'short_url': 'Ab3xQw'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['original_url']
        'https://example.com'
    """
    # 1- Extract short code from query string
    short_code = query_parameter(event, 'short_url')
    if not short_code:
        logger.info("Missing 'short_url' query parameter. Responding with 400.", extra={'event': MISSING_SHORT_URL})
        return response_400(message="missing 'short_url' query parameter", error_code=MISSING_SHORT_URL)

    # 2- Resolve short code (via service)
    try:
        original_url = resolve(shortener_context(), short_code)
    except ParameterError as e:
        logger.info(
            'Malformed short code. Responding with 400.',
            extra={'short_code': short_code, 'event': MALFORMED_SHORT_URL},
        )
        return response_400(message=str(e), error_code=MALFORMED_SHORT_URL)
    except DataStoreError:
        logger.exception('Data store unavailable. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(message='data store unavailable', error_code=DATA_STORE_UNAVAILABLE)

    # 3- Respond with original URL
    if original_url is None:
        logger.info(
            'Short code not found. Responding with 200.',
            extra={'short_code': short_code, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_200({'original_url': ''})

    logger.info(
        'Resolved short code. Responding with 200.',
        extra={'short_code': short_code, 'event': QUERY_SUCCESS},
    )
    return response_200({'original_url': original_url})
