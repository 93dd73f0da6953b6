class ShortlinkError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortlink_error'


class ConfigurationError(ShortlinkError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class LinkError(ShortlinkError):
    """Base exception for short link lifecycle errors."""

    error_code = 'link:link_error'


class InvalidLinkError(LinkError):
    """Raised when a long URL or custom alias is malformed."""

    error_code = 'link:invalid_link_error'


class AliasConflictError(LinkError):
    """Raised when a requested custom alias is already taken."""

    error_code = 'link:alias_conflict_error'


class LinkNotFoundError(LinkError):
    """Raised when no link resolves for an alias."""

    error_code = 'link:link_not_found_error'


class LinkGoneError(LinkError):
    """Raised when a link exists but is inactive or expired."""

    error_code = 'link:link_gone_error'
