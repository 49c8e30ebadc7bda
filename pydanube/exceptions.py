"""Exceptions raised by the DanubeData client."""

from typing import Optional


class DanubeError(Exception):
    """Base exception for all pydanube errors."""


class DanubeConfigError(DanubeError):
    """Raised when required configuration is missing or invalid."""


class DanubeNotLinkedError(DanubeConfigError):
    """Raised when the current directory is not linked to a static site."""

    def __init__(self, message: str = "No project linked. Run `danube link` first."):
        super().__init__(message)


class DanubePackagingError(DanubeError):
    """Raised when a directory cannot be packaged for deployment."""


class DanubeAPIError(DanubeError):
    """Raised when the DanubeData API returns an error.

    Attributes:
        status_code: HTTP status code of the failed response (if any)
        errors: Field validation errors returned by the API, keyed by field
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[dict[str, list[str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}


class DanubeAuthenticationError(DanubeAPIError):
    """Raised when no valid token is available or the API rejects it."""

    def __init__(
        self,
        message: str = "Not authenticated. Run `danube login` first.",
        status_code: Optional[int] = 401,
    ):
        super().__init__(message, status_code=status_code)


class DanubePermissionError(DanubeAPIError):
    """Raised on 403 responses."""


class DanubeNotFoundError(DanubeAPIError):
    """Raised when a resource does not exist."""


class DanubeRateLimitError(DanubeAPIError):
    """Raised on 429 responses."""


class DanubeNetworkError(DanubeAPIError):
    """Raised when the API cannot be reached."""


class DanubeInvalidResponseError(DanubeAPIError):
    """Raised when the API returns something that is not JSON."""
