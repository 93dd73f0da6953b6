"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`) and deployed to the
corresponding environment.

The configuration JSON follows this structure:

    {
        "active_backend": "redis",
        "build": "2025.11.02-1",
        "configs": {
            "shorten_url": {
                "redis": { "host": ..., "port": ..., "db": ... },
                "settings": {
                    "window_seconds": 60,
                    "max_requests": 10,
                    "default_expiration_days": 365,
                    "alias_length": 5,
                    "cache_ttl_seconds": 3600
                }
            },
            "redirect_url": { ... },
            "url_info": { ... },
            "click_analytics": { ... }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this AppConfig
document and turns the `settings` block into a ServiceSettings instance.

Typical usage inside a Lambda handler:
    >>> from shortlink.utils.config import load_config, service_settings
    >>> config = load_config('shorten_url')
    >>> config['redis']['host']
    'redis-15501.host.docker.internal'
    >>> service_settings(config).max_requests
    10
"""

import os
import json
import functools
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Callable

import boto3

from shortlink.types import AppConfig, LambdaConfiguration
from shortlink.constants import ENV, TTL, Defaults
from shortlink.exceptions import BadConfigurationError
from shortlink.utils.helpers import require_environment
from shortlink.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.path.dirname(__file__)))


def app_prefix() -> str | None:
    """Return the DAO key prefix as <app name>:<app env>, or None if APP_NAME is not set."""
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _lambda_section(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Pick the active backend's config and the settings block for one Lambda."""
    try:
        backend = document['active_backend']
        section = document['configs'][lambda_name]
        return {backend: section[backend], 'settings': section.get('settings', {})}
    except KeyError as e:
        raise BadConfigurationError(f"AppConfig document has no '{e.args[0]}' entry for lambda '{lambda_name}'.") from e


def _sam_load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local
          AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://appconfig-agent:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        data = _lambda_section(document, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return data

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       : AppConfig Application ID
        APPCONFIG_ENV_ID       : AppConfig Environment ID
        APPCONFIG_PROFILE_ID   : AppConfig Configuration Profile ID

    Returns:
        LambdaConfiguration: {"<backend>": {...}, "settings": {...}}

    Raises:
        MissingEnvironmentVariableError:
            If any of the AppConfig identifiers is missing.
        BadConfigurationError:
            If the document has no section for this lambda or its backend.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    data = _lambda_section(document, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return data


# fmt: off
@dataclass(frozen=True)
class ServiceSettings:
    window_seconds: int = Defaults.RATE_LIMIT_WINDOW_SECONDS        # Fixed rate-limit window length
    max_requests: int = Defaults.RATE_LIMIT_MAX_REQUESTS            # Admitted creations per window and client
    default_expiration_days: int = Defaults.EXPIRATION_DAYS         # Expiry applied when a request sets none
    alias_length: int = Defaults.ALIAS_LENGTH                       # Length of generated aliases
    cache_ttl_seconds: int = TTL.HOT                                # Resolution cache TTL for found records
# fmt: on


def service_settings(lambda_config: LambdaConfiguration) -> ServiceSettings:
    """Build ServiceSettings from a Lambda's `settings` block, falling back to defaults.

    Raises:
        BadConfigurationError:
            If a setting is not a positive integer (alias_length may not be 0 either).
    """
    raw = lambda_config.get('settings') or {}
    defaults = ServiceSettings()

    values = {}
    for name in ('window_seconds', 'max_requests', 'default_expiration_days', 'alias_length', 'cache_ttl_seconds'):
        value = raw.get(name, getattr(defaults, name))
        try:
            value = int(value)
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f'Setting {name!r} must be an integer (given value: {value!r}).') from e
        if value <= 0:
            raise BadConfigurationError(f'Setting {name!r} must be positive (given value: {value}).')
        values[name] = value

    return ServiceSettings(**values)
