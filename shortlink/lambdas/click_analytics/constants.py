# Error codes
MISSING_ALIAS = 'MISSING_ALIAS'
ALIAS_NOT_FOUND = 'ALIAS_NOT_FOUND'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'

# Success codes
ANALYTICS_SUCCESS = 'ANALYTICS_SUCCESS'
