# Error codes
INVALID_JSON = 'INVALID_JSON'
MISSING_LONG_URL = 'MISSING_LONG_URL'
INVALID_EXPIRES_AT = 'INVALID_EXPIRES_AT'
INVALID_LINK = 'INVALID_LINK'
ALIAS_CONFLICT = 'ALIAS_CONFLICT'
RATE_LIMIT_EXCEEDED = 'RATE_LIMIT_EXCEEDED'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'

# Success codes
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
