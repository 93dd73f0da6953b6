# Error codes
MISSING_ALIAS = 'MISSING_ALIAS'
ALIAS_NOT_FOUND = 'ALIAS_NOT_FOUND'
ALIAS_GONE = 'ALIAS_GONE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'

# Success codes
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
