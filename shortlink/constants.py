import string
from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Resolution cache entries for existing links (1 hour in seconds)
    HOT = 3_600  # 60 * 60
    # Cached "alias does not exist" markers
    NEGATIVE = 60


class Defaults:
    """Default service settings (overridable through AppConfig)."""

    RATE_LIMIT_WINDOW_SECONDS = 60
    RATE_LIMIT_MAX_REQUESTS = 10
    EXPIRATION_DAYS = 365
    ALIAS_LENGTH = 5


class Limits:
    """Hard input limits."""

    LONG_URL_MAX_LENGTH = 2048
    CUSTOM_ALIAS_MAX_LENGTH = 64


# Base62 alphabet used for generated aliases: [0-9a-zA-Z]
ALIAS_ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
# Custom aliases additionally allow '-' and '_'
CUSTOM_ALIAS_PATTERN = rf'^[0-9A-Za-z_-]{{1,{Limits.CUSTOM_ALIAS_MAX_LENGTH}}}$'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class ElastiCache(StrEnum):
        # SSM parameter paths for ElastiCache connection details
        HOST_PARAM = 'ELASTICACHE_HOST_PARAM'
        PORT_PARAM = 'ELASTICACHE_PORT_PARAM'
        DB_PARAM = 'ELASTICACHE_DB_PARAM'
        USER_PARAM = 'ELASTICACHE_USER_PARAM'
        # Secrets Manager name holding credentials JSON: {"username": "...", "password": "..."}
        SECRET = 'ELASTICACHE_SECRET'  # noqa: S105

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
