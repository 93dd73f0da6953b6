import base64
import json
import logging
from datetime import datetime, UTC

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.exceptions import ConfigurationError, AliasConflictError, InvalidLinkError
from shortlink.dao.redis import AliasRedisDAO, RateWindowRedisDAO
from shortlink.dao.cache import ResolutionCacheDAO
from shortlink.services import AdmissionController, ShorteningService, client_identity
from shortlink.utils import load_config, service_settings, app_prefix, get_short_url, source_ip, generate_alias
from shortlink.utils.helpers import guarantee_500_response
from shortlink.utils.responses import response_200, response_400, response_409, response_429, response_500
from shortlink.lambdas.shorten_url.constants import (
    INVALID_JSON,
    MISSING_LONG_URL,
    INVALID_EXPIRES_AT,
    INVALID_LINK,
    ALIAS_CONFLICT,
    RATE_LIMIT_EXCEEDED,
    CONFIGURATION_ERROR,
    SHORT_URL_CREATED,
)


logger = logging.getLogger(__name__)


def parse_body(event: LambdaEvent) -> dict:
    """Decode the JSON request body (raises ValueError if it isn't a JSON object)."""
    raw = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        raw = base64.b64decode(raw).decode('utf-8')
    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError('JSON body must be an object')
    return body


def parse_expires_at(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f'expiresAt must be an ISO-8601 string (given type: {type(value)})')
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Admission check against the client's fixed rate-limit window
    - Step 2: Extract longUrl, customAlias and expiresAt from request body
    - Step 3: Allocate alias and store the mapping (via ShorteningService)
    - Step 4: Respond to client with 200 success

    HTTP responses (all carry X-RateLimit-* headers when the admission check ran):
        200: Successful URL shortening
            shortUrl: newly generated short url
            alias: allocated alias
            longUrl: original url (provided in request)
        400: Bad client request
            message: invalid JSON, missing longUrl, bad expiresAt or malformed link
        409: Conflict
            message: alias already used (custom or generated)
        429: Too many link creation requests in the current window
            headers:
                Retry-After: window length in seconds
        500: Internal server error
            message: indicate the server experienced an internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"longUrl": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['shortUrl']
        'http://localhost:3000/q3ZxA'
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
        settings = service_settings(app_config)
    except ConfigurationError:
        logger.exception(
            'Failed to load AppConfig for shorten URL function. Responding with 500.',
            extra={'event': CONFIGURATION_ERROR},
        )
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Admission check (fails open when the counter store is unreachable)
    client_id = client_identity(event.get('headers'), source_ip(event))
    admission = AdmissionController(
        RateWindowRedisDAO(**redis_config, prefix=app_prefix(), healthcheck=False),
        max_requests=settings.max_requests,
        window_seconds=settings.window_seconds,
    )
    decision = admission.admit(client_id)
    rate_headers = decision.headers()
    if not decision.allowed:
        logger.info(
            'Client exceeded link creation rate limit. Responding with 429.',
            extra={'clientId': client_id, 'event': RATE_LIMIT_EXCEEDED},
        )
        return response_429(
            retry_after=settings.window_seconds,
            message=f'Rate limit exceeded. Try again in {settings.window_seconds} seconds.',
            error_code=RATE_LIMIT_EXCEEDED,
            headers=rate_headers,
        )

    # 2- Extract request parameters from body
    try:
        request_body = parse_body(event)
    except (ValueError, UnicodeDecodeError):
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON, headers=rate_headers)

    long_url = request_body.get('longUrl')
    if not long_url:
        logger.info("Missing 'longUrl' in body. Responding with 400.", extra={'event': MISSING_LONG_URL})
        return response_400(message="missing 'longUrl' in JSON body", error_code=MISSING_LONG_URL, headers=rate_headers)

    try:
        expires_at = parse_expires_at(request_body.get('expiresAt'))
    except ValueError:
        logger.info("Invalid 'expiresAt' in body. Responding with 400.", extra={'event': INVALID_EXPIRES_AT})
        return response_400(
            message="'expiresAt' must be an ISO-8601 timestamp",
            error_code=INVALID_EXPIRES_AT,
            headers=rate_headers,
        )

    custom_alias = request_body.get('customAlias')
    if custom_alias is not None and not isinstance(custom_alias, str):
        return response_400(message="'customAlias' must be a string", error_code=INVALID_LINK, headers=rate_headers)

    # 3- Allocate alias and store the mapping
    alias_dao = AliasRedisDAO(**redis_config, prefix=app_prefix())
    cache_dao = ResolutionCacheDAO(store=alias_dao, prefix=app_prefix(), ttl=settings.cache_ttl_seconds)
    service = ShorteningService(alias_dao, cache_dao, settings, alias_generator=generate_alias)

    try:
        record = service.create_short_url(
            long_url=long_url,
            custom_alias=custom_alias,
            creator_ip=client_id,
            expires_at=expires_at,
        )
    except InvalidLinkError as e:
        logger.info('Malformed link request. Responding with 400.', extra={'event': INVALID_LINK, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_LINK, headers=rate_headers)
    except AliasConflictError:
        logger.info(
            'Alias already used. Responding with 409.',
            extra={'alias': custom_alias, 'event': ALIAS_CONFLICT},
        )
        return response_409(message='alias already used', error_code=ALIAS_CONFLICT, headers=rate_headers)

    # 4- Return successful response to client
    short_url = get_short_url(record.alias, event)
    logger.info(
        'Short URL created. Responding with 200.',
        extra={'alias': record.alias, 'custom': record.custom, 'event': SHORT_URL_CREATED},
    )
    return response_200(
        {
            'shortUrl': short_url,
            'alias': record.alias,
            'longUrl': record.long_url,
        },
        headers=rate_headers,
    )
