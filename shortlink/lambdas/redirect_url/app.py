import logging

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.exceptions import ConfigurationError, LinkNotFoundError, LinkGoneError
from shortlink.dao.redis import AliasRedisDAO
from shortlink.dao.cache import ResolutionCacheDAO
from shortlink.services import ShorteningService, client_identity
from shortlink.utils import load_config, service_settings, app_prefix, get_short_url, get_header, source_ip
from shortlink.utils.helpers import guarantee_500_response
from shortlink.utils.responses import response_302, response_400, response_404, response_410, response_500
from shortlink.lambdas.redirect_url.constants import (
    MISSING_ALIAS,
    ALIAS_NOT_FOUND,
    ALIAS_GONE,
    CONFIGURATION_ERROR,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract alias from request path
    - Step 2: Resolve alias through the resolution cache
    - Step 3: Check the link is still active and not expired
    - Step 4: Record the click and redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing alias in path parameters
        404: Not found
            message: alias doesn't exist
        410: Gone
            message: URL expired or inactive
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'alias': 'q3ZxA'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
        settings = service_settings(app_config)
    except ConfigurationError:
        logger.exception(
            'Failed to load AppConfig for redirect URL function. Responding with 500.',
            extra={'event': CONFIGURATION_ERROR},
        )
        return response_500()
    else:
        logger.debug('Assuming Redis as the backend database for aliases')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract alias from request's path
    alias = (event.get('pathParameters') or {}).get('alias')
    if not alias:
        logger.info('Missing "alias" in path. Responding with 400.', extra={'event': MISSING_ALIAS})
        return response_400(message="missing 'alias' in path", error_code=MISSING_ALIAS)
    logger.debug('Client requested short URL %s.', get_short_url(alias, event))

    alias_dao = AliasRedisDAO(**redis_config, prefix=app_prefix())
    cache_dao = ResolutionCacheDAO(store=alias_dao, prefix=app_prefix(), ttl=settings.cache_ttl_seconds)
    service = ShorteningService(alias_dao, cache_dao, settings)

    # 2, 3, 4- Resolve, validate and record click
    try:
        record = service.resolve_redirect(
            alias,
            ip=client_identity(event.get('headers'), source_ip(event)),
            user_agent=get_header(event, 'User-Agent'),
            referrer=get_header(event, 'Referer'),
        )
    except LinkNotFoundError:
        logger.info(
            'Alias not found. Responding with 404.',
            extra={'alias': alias, 'event': ALIAS_NOT_FOUND},
        )
        return response_404(message=f"short url {get_short_url(alias, event)} doesn't exist", error_code=ALIAS_NOT_FOUND)
    except LinkGoneError as e:
        logger.info(
            'Alias expired or inactive. Responding with 410.',
            extra={'alias': alias, 'event': ALIAS_GONE, 'reason': str(e)},
        )
        return response_410(message='URL expired or inactive', error_code=ALIAS_GONE)

    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'alias': alias, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=record.long_url)
