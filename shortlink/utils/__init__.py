from shortlink.utils.config import app_env, app_name, project_root, app_prefix, load_config, service_settings, ServiceSettings
from shortlink.utils.helpers import base_url, get_short_url, get_header, source_ip, require_environment, guarantee_500_response
from shortlink.utils.shortener import generate_alias
from shortlink.utils.logging import initialize_logging


__all__ = [
    'generate_alias',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'service_settings',
    'ServiceSettings',
    'base_url',
    'get_short_url',
    'get_header',
    'source_ip',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
