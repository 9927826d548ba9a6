"""Exception definitions for appform"""


class AppFormException(Exception):
    """Base exception for all appform errors.

    All custom exceptions in appform inherit from this class. Use this as a
    catch-all for appform-specific errors when you don't need to handle
    specific exception types.
    """

    pass


class ConfigException(AppFormException):
    """Raised when settings validation or loading fails.

    Use this exception when:
    - The settings file cannot be found
    - The TOML syntax is invalid
    - Settings validation fails (missing required fields, invalid values)
    """

    pass


class DocumentError(AppFormException):
    """Raised when app configuration text cannot be parsed into a document.

    Use this exception when:
    - The JSON syntax is invalid
    - The JSON root is not an object
    """

    pass


class PathError(AppFormException):
    """Raised by strict path parsing when a path expression is malformed."""

    pass


class SchemaError(AppFormException):
    """Raised when a UI schema document is malformed or fails validation."""

    pass


class ClientError(AppFormException):
    """Raised when HTTP 4XX client errors occur and should not be retried.

    This exception is distinct from transient 5xx errors or network issues.
    """

    pass


class ServerError(AppFormException):
    """Raised when the DNS server answers with a non-ok status envelope."""

    pass


class AuthenticationError(ServerError):
    pass
