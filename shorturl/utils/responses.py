"""API Gateway (Lambda Proxy) response builders

Every response carries open CORS headers: the service accepts any origin and method.
"""

import json
from typing import Any

from shorturl.types import HttpHeaders, LambdaResponse


CORS_HEADERS: HttpHeaders = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': '*',
    'Access-Control-Allow-Methods': '*',
}


def _response(status_code: int, body: str, content_type: str = 'application/json') -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': content_type, **CORS_HEADERS},
        'body': body,
    }


def response_200(payload: dict[str, Any]) -> LambdaResponse:
    return _response(200, json.dumps(payload))


def response_text_200(text: str) -> LambdaResponse:
    return _response(200, text, content_type='text/plain')


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['error_code'] = error_code
    return _response(400, json.dumps(body))


def response_500(message: str | None = None, error_code: str | None = None, **details: Any) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['error_code'] = error_code
    body.update(details)
    return _response(500, json.dumps(body))
