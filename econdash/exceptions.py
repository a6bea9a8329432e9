"""Custom exceptions for the econdash package."""

class EconDataAPIError(Exception):
    """Base exception for economic data API errors."""
    pass

class AuthenticationError(EconDataAPIError):
    """Raised when the backend rejects the bearer token (HTTP 401)."""
    pass

class HTTPStatusError(EconDataAPIError):
    """Raised for non-401 HTTP error statuses, surfaced unmodified."""

    def __init__(self, message: str, status_code: int = None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

class NotFoundError(HTTPStatusError):
    """Raised when a requested resource or category is not found."""
    pass

class BadRequestError(HTTPStatusError):
    """Raised when the server rejects a request as malformed (HTTP 400/422)."""
    pass

class InvalidParameterError(EconDataAPIError):
    """Raised when invalid parameters are provided to API calls."""
    pass

class DataParsingError(EconDataAPIError):
    """Raised when there are issues parsing API response data."""
    pass

class TokenStoreError(EconDataAPIError):
    """Raised when the persisted token cannot be read or written."""
    pass

class AggregateFetchError(EconDataAPIError):
    """Raised when any category of a multi-indicator fetch fails."""

    def __init__(self, message: str, failures=None):
        super().__init__(message)
        self.failures = failures or {}
