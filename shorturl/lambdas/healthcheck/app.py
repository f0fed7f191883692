from typing import Any

from shorturl.types import LambdaEvent, LambdaResponse
from shorturl.utils.helpers import guarantee_500_response
from shorturl.utils.responses import response_text_200


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: Any) -> LambdaResponse:
    """Liveness probe for `GET /`. Touches no backend.

    Example:
        >>> lambda_handler({}, None)['body']
        'OK'
    """
    return response_text_200('OK')
