import logging

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.exceptions import ConfigurationError
from shortlink.dao.redis import AliasRedisDAO
from shortlink.dao.cache import ResolutionCacheDAO
from shortlink.services import ShorteningService
from shortlink.utils import load_config, service_settings, app_prefix
from shortlink.utils.helpers import guarantee_500_response
from shortlink.utils.responses import response_200, response_400, response_404, response_500
from shortlink.lambdas.url_info.constants import MISSING_ALIAS, ALIAS_NOT_FOUND, CONFIGURATION_ERROR, INFO_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Describe a short link: metadata plus total clicks

    Expired or inactive links are still described; only unknown aliases yield 404.

    HTTP responses:
        200: alias, longUrl, createdAt, expiresAt, active, clicks, custom
        400: missing alias in path parameters
        404: alias doesn't exist
        500: internal server error
    """
    try:
        app_config = load_config('url_info')
        settings = service_settings(app_config)
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for URL info function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    alias = (event.get('pathParameters') or {}).get('alias')
    if not alias:
        logger.info('Missing "alias" in path. Responding with 400.', extra={'event': MISSING_ALIAS})
        return response_400(message="missing 'alias' in path", error_code=MISSING_ALIAS)

    alias_dao = AliasRedisDAO(**redis_config, prefix=app_prefix())
    cache_dao = ResolutionCacheDAO(store=alias_dao, prefix=app_prefix(), ttl=settings.cache_ttl_seconds)
    service = ShorteningService(alias_dao, cache_dao, settings)

    record = service.find_by_alias(alias)
    if record is None:
        logger.info('Alias not found. Responding with 404.', extra={'alias': alias, 'event': ALIAS_NOT_FOUND})
        return response_404(message=f"alias '{alias}' doesn't exist", error_code=ALIAS_NOT_FOUND)

    logger.info('Describing alias. Responding with 200.', extra={'alias': alias, 'event': INFO_SUCCESS})
    return response_200(
        {
            'alias': record.alias,
            'longUrl': record.long_url,
            'createdAt': record.created_at.isoformat(),
            'expiresAt': record.expires_at.isoformat() if record.expires_at else None,
            'active': record.active,
            'clicks': service.get_click_count(alias),
            'custom': record.custom,
        }
    )
