from typing import cast

import pytest

from shorturl.types import LambdaEvent
from shorturl.lambdas.healthcheck import app


def test_lambda_handler() -> None:
    response = app.lambda_handler(cast(LambdaEvent, {'httpMethod': 'GET', 'path': '/'}), None)

    assert response['statusCode'] == 200
    assert response['body'] == 'OK'
    assert response['headers']['Content-Type'] == 'text/plain'
    assert response['headers']['Access-Control-Allow-Origin'] == '*'


@pytest.mark.parametrize('method', ['GET', 'HEAD', 'POST'])
def test_lambda_handler_ignores_request(method: str) -> None:
    response = app.lambda_handler(cast(LambdaEvent, {'httpMethod': method, 'body': 'garbage'}), None)

    assert response['body'] == 'OK'
