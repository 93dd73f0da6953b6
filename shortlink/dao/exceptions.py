from shortlink.exceptions import ShortlinkError


class DAOError(ShortlinkError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class AliasAlreadyExistsError(DAOError):
    """Raised when saving a UrlRecord whose alias already exists in the data store."""

    error_code = 'dao:alias_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'
