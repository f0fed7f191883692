import base64
import functools
import json
import logging
from typing import Any

from shorturl.service import ShortenerContext, create
from shorturl.dao.exceptions import DataStoreError, ShortCodeOverflowError
from shorturl.exceptions import ParameterError
from shorturl.types import LambdaEvent, LambdaResponse
from shorturl.utils import load_config
from shorturl.utils.helpers import guarantee_500_response
from shorturl.utils.responses import response_200, response_400, response_500
from shorturl.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_ORIGINAL_URL,
    INVALID_ORIGINAL_URL,
    SHORT_CODE_OVERFLOW,
    DATA_STORE_UNAVAILABLE,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


@functools.cache
def shortener_context() -> ShortenerContext:
    """Store/cache DAOs, built on the first request of the Lambda container"""
    return ShortenerContext.from_config(load_config('shorten_url'))


def request_body(event: LambdaEvent) -> Any:
    body = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body).decode('utf-8')
    return json.loads(body)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: Any) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract original URL from request body
    - Step 2: Encode the URL and allocate its collision ordinal (via service)
    - Step 3: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            short_url: short code of the original URL
        400: Bad client request
            message: indicate cause of bad request (invalid JSON, missing or non-encodable original_url)
        500: Internal server error
            message: data store unavailable or fingerprint collision overflow
            error_code: machine readable cause
            original_url: rejected URL (collision overflow only)

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"original_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> len(json.loads(response['body'])['short_url'])
        6
    """
    # 1- Extract original URL from request body
    try:
        body = request_body(event)
    except ValueError:  # JSONDecodeError, bad base64 or bad UTF-8
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    if not isinstance(body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    original_url = body.get('original_url')
    if not isinstance(original_url, str) or not original_url:
        logger.info("Missing 'original_url' in JSON body. Responding with 400.", extra={'event': MISSING_ORIGINAL_URL})
        return response_400(message="missing 'original_url' in JSON body", error_code=MISSING_ORIGINAL_URL)

    # 2- Encode URL and store it (via service)
    try:
        short_code = create(shortener_context(), original_url)
    except ParameterError as e:
        logger.info('Invalid original URL. Responding with 400.', extra={'event': INVALID_ORIGINAL_URL})
        return response_400(message=str(e), error_code=INVALID_ORIGINAL_URL)
    except ShortCodeOverflowError as e:
        logger.info(
            'All collision ordinals taken for the URL fingerprint. Responding with 500.',
            extra={'original_url': e.original_url, 'event': SHORT_CODE_OVERFLOW},
        )
        return response_500(message=str(e), error_code=SHORT_CODE_OVERFLOW, original_url=e.original_url)
    except DataStoreError:
        logger.exception('Data store unavailable. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(message='data store unavailable', error_code=DATA_STORE_UNAVAILABLE)

    # 3- Return successful response to user
    logger.info(
        'Shortened URL. Responding with 200.',
        extra={'short_code': short_code, 'event': SHORTEN_SUCCESS},
    )
    return response_200({'short_url': short_code})
