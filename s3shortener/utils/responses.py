"""API Gateway (Lambda Proxy) response builders shared by the lambda handlers."""

import json
from typing import Any

from s3shortener.types import HttpHeaders, LambdaResponse


def json_response(status_code: int, body: dict[str, Any], headers: HttpHeaders | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(body),
    }


def error_response(
    status_code: int,
    base: str,
    message: str | None = None,
    error_code: str | None = None,
    headers: HttpHeaders | None = None,
) -> LambdaResponse:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return json_response(status_code, body, headers=headers)


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(400, 'Bad Request', message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(404, 'Not Found', message, error_code)


def response_409(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(409, 'Conflict', message, error_code)


def response_410(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(410, 'Gone', message, error_code)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(500, 'Internal Server Error', message, error_code)


def response_503(*, retry_after: int, message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(503, 'Service Unavailable', message, error_code, headers={'Retry-After': str(retry_after)})


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }
