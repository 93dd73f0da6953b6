"""Unit tests for the shorten_url AWS Lambda handler.

Verify that the Lambda correctly handles incoming API Gateway events,
interacts with the service layer, and returns proper HTTP responses in both
success and error scenarios.

Test coverage includes:

1. Successful shortening
   - Generated and custom aliases return HTTP 200 with short URL and rate-limit headers.
   - Requested expirations and creator identity are stored.

2. Bad requests
   - Invalid JSON, missing longUrl, bad expiresAt and malformed links return HTTP 400.

3. Alias conflicts
   - Taken aliases return HTTP 409 and leave the existing record untouched.

4. Rate limiting
   - Requests past the window quota return HTTP 429 with Retry-After.
   - An unreachable counter store admits requests without rate-limit headers.

5. Configuration and unexpected errors
   - Bad configuration and unreachable alias stores return HTTP 500.

Fixtures:
    - `event`: valid API Gateway event for POST /v1/shorten.
    - `context`: mock AWS Lambda context object.
    - `config`: AppConfig section of the shorten_url lambda.
    - `_patch_lambda_dependencies`: autouse fixture that monkeypatches app dependencies
                                    (config, DAOs and alias generator).
"""

import json
from datetime import datetime, UTC

import pytest

from shortlink.lambdas.shorten_url import app
from shortlink.exceptions import BadConfigurationError
from shortlink.dao.exceptions import DataStoreError


# -------------------------------
# Fixtures
# -------------------------------


def _event(body: dict | str) -> dict:
    return {
        'body': body if isinstance(body, str) else json.dumps(body),
        'resource': '/v1/shorten',
        'httpMethod': 'POST',
        'path': '/v1/shorten',
        'headers': {'User-Agent': 'pytest', 'X-Forwarded-For': '203.0.113.7, 10.0.0.1'},
        'requestContext': {
            'resourcePath': '/v1/shorten',
            'httpMethod': 'POST',
            'domainName': 'sho.rt',
            'stage': 'test',
            'identity': {'sourceIp': '10.0.0.1'},
        },
    }


@pytest.fixture()
def event():
    return _event({'longUrl': 'https://example.com/blog/chuck-norris-is-awesome'})


@pytest.fixture()
def context():
    class _Context:
        function_name = 'shorten_url'

    return _Context()


@pytest.fixture()
def config():
    return {
        'redis': {'host': 'redis.test', 'port': 6379, 'db': 0},
        'settings': {'max_requests': 3, 'window_seconds': 60},
    }


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(monkeypatch, lambda_env, config, store, cache, counter):
    monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
    monkeypatch.setattr(app, 'generate_alias', lambda *a, **kw: 'abc12')
    monkeypatch.setattr(app, 'AliasRedisDAO', lambda *a, **kw: store)
    monkeypatch.setattr(app, 'ResolutionCacheDAO', lambda *a, **kw: cache)
    monkeypatch.setattr(app, 'RateWindowRedisDAO', lambda *a, **kw: counter)


# -------------------------------
# 1. Successful shortening
# -------------------------------


def test_lambda_handler(event, context, store):
    """Ensure Lambda shortens URLs with a generated alias."""
    long_url = 'https://example.com/blog/chuck-norris-is-awesome'

    response = app.lambda_handler(event, context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 200
    assert body == {'shortUrl': 'https://sho.rt/abc12', 'alias': 'abc12', 'longUrl': long_url}
    assert response['headers']['X-RateLimit-Limit'] == '3'
    assert response['headers']['X-RateLimit-Remaining'] == '2'
    assert response['headers']['X-RateLimit-Window'] == '60'

    record = store.records['abc12']
    assert record.long_url == long_url
    assert record.created_by_ip == '203.0.113.7'
    assert not record.custom


def test_lambda_handler_with_custom_alias_and_expiration(context, store):
    event = _event({'longUrl': 'https://example.com/sale', 'customAlias': 'summer-sale', 'expiresAt': '2030-01-01T00:00:00'})

    response = app.lambda_handler(event, context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 200
    assert body['alias'] == 'summer-sale'
    assert body['shortUrl'] == 'https://sho.rt/summer-sale'
    assert store.records['summer-sale'].custom
    assert store.records['summer-sale'].expires_at == datetime(2030, 1, 1, tzinfo=UTC)


def test_lambda_handler_with_base64_body(context):
    event = _event('eyJsb25nVXJsIjogImh0dHBzOi8vZXhhbXBsZS5jb20ifQ==')  # {"longUrl": "https://example.com"}
    event['isBase64Encoded'] = True

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 200
    assert json.loads(response['body'])['longUrl'] == 'https://example.com'


# -------------------------------
# 2. Bad requests
# -------------------------------


@pytest.mark.parametrize(
    'body, error_code, message',
    [
        ('{"invalid_json": true', 'INVALID_JSON', 'Bad Request (invalid JSON body)'),
        ('["https://example.com"]', 'INVALID_JSON', 'Bad Request (invalid JSON body)'),
        ({'url': 'https://example.com'}, 'MISSING_LONG_URL', "Bad Request (missing 'longUrl' in JSON body)"),
        (
            {'longUrl': 'https://example.com', 'expiresAt': 'next tuesday'},
            'INVALID_EXPIRES_AT',
            "Bad Request ('expiresAt' must be an ISO-8601 timestamp)",
        ),
        ({'longUrl': 'https://example.com', 'customAlias': 42}, 'INVALID_LINK', "Bad Request ('customAlias' must be a string)"),
    ],
)
def test_lambda_handler_with_bad_request(context, store, body, error_code, message):
    response = app.lambda_handler(_event(body), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body == {'message': message, 'errorCode': error_code}
    assert response['headers']['X-RateLimit-Remaining'] == '2'
    assert store.records == {}


def test_lambda_handler_with_malformed_custom_alias(context):
    response = app.lambda_handler(_event({'longUrl': 'https://example.com', 'customAlias': 'not/allowed'}), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body['errorCode'] == 'INVALID_LINK'
    assert body['message'].startswith('Bad Request (Custom alias must be')


# -------------------------------
# 3. Alias conflicts
# -------------------------------


def test_lambda_handler_with_taken_custom_alias(context, store):
    app.lambda_handler(_event({'longUrl': 'https://example.com/first', 'customAlias': 'promo'}), context)

    response = app.lambda_handler(_event({'longUrl': 'https://example.com/second', 'customAlias': 'promo'}), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 409
    assert body == {'message': 'Conflict (alias already used)', 'errorCode': 'ALIAS_CONFLICT'}
    assert store.records['promo'].long_url == 'https://example.com/first'


def test_lambda_handler_with_generated_alias_collision(event, context):
    app.lambda_handler(event, context)

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 409


# -------------------------------
# 4. Rate limiting
# -------------------------------


def test_lambda_handler_with_rate_limit_exceeded(event, context, counter):
    responses = [app.lambda_handler(event, context) for _ in range(4)]

    assert [r['statusCode'] for r in responses[:3]] == [200, 409, 409]  # same generated alias
    assert [r['headers']['X-RateLimit-Remaining'] for r in responses] == ['2', '1', '0', '0']

    denied = responses[3]
    assert denied['statusCode'] == 429
    assert denied['headers']['Retry-After'] == '60'
    assert json.loads(denied['body']) == {
        'message': 'Rate limit exceeded. Try again in 60 seconds.',
        'errorCode': 'RATE_LIMIT_EXCEEDED',
    }
    assert counter.counts == {'203.0.113.7': 3}


def test_lambda_handler_tracks_clients_independently(context):
    for _ in range(3):
        app.lambda_handler(_event({'longUrl': 'https://example.com'}), context)

    other_client = _event({'longUrl': 'https://example.com', 'customAlias': 'mine'})
    other_client['headers'] = {'X-Real-IP': '198.51.100.4'}
    response = app.lambda_handler(other_client, context)

    assert response['statusCode'] == 200
    assert response['headers']['X-RateLimit-Remaining'] == '2'


def test_lambda_handler_fails_open_without_counter_store(monkeypatch, event, context, unreachable_counter):
    monkeypatch.setattr(app, 'RateWindowRedisDAO', lambda *a, **kw: unreachable_counter)

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 200
    assert not any(name.startswith('X-RateLimit') for name in response['headers'])


# -------------------------------
# 5. Configuration and unexpected errors
# -------------------------------


def test_lambda_handler_with_bad_configuration(monkeypatch, event, context):
    def _load_config(*args, **kwargs):
        raise BadConfigurationError('boom')

    monkeypatch.setattr(app, 'load_config', _load_config)

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['message'] == 'Internal Server Error'


def test_lambda_handler_with_bad_settings(config, event, context):
    config['settings']['max_requests'] = 0

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 500


def test_lambda_handler_with_unreachable_alias_store(monkeypatch, event, context):
    def _alias_dao(*args, **kwargs):
        raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    monkeypatch.setattr(app, 'AliasRedisDAO', _alias_dao)

    response = app.lambda_handler(event, context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body == {'message': 'Internal Server Error', 'errorCode': 'UNKNOWN_INTERNAL_SERVER_ERROR'}
