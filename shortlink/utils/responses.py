"""API Gateway (Lambda proxy) response builders.

Every response carries CORS headers. Error responses share one body shape:

    {"message": "<Reason Phrase> (<detail>)", "errorCode": "<ERROR_CODE>"}
"""

import json
from typing import Any

from shortlink.types import LambdaResponse, HttpHeaders


# TODO: restrict Access-Control-Allow-Origin to the frontend domain once it has one
CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Authorization,Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def json_response(status_code: int, body: dict[str, Any], headers: HttpHeaders | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'application/json',
            **CORS_HEADERS,
            **(headers or {}),
        },
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
    return json_response(status_code, body, headers)


def response_200(body: dict[str, Any], headers: HttpHeaders | None = None) -> LambdaResponse:
    return json_response(200, body, headers)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {
            'Location': location,
            **CORS_HEADERS,
        },
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None, headers: HttpHeaders | None = None) -> LambdaResponse:
    return error_response(400, 'Bad Request', message, error_code, headers)


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(404, 'Not Found', message, error_code)


def response_409(message: str | None = None, error_code: str | None = None, headers: HttpHeaders | None = None) -> LambdaResponse:
    return error_response(409, 'Conflict', message, error_code, headers)


def response_410(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(410, 'Gone', message, error_code)


def response_429(
    *,
    retry_after: int,
    message: str | None = None,
    error_code: str | None = None,
    headers: HttpHeaders | None = None,
) -> LambdaResponse:
    body = {'message': message or 'Too Many Requests'}
    if error_code:
        body['errorCode'] = error_code
    return json_response(429, body, {**(headers or {}), 'Retry-After': str(retry_after)})


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return error_response(500, 'Internal Server Error', message, error_code)
