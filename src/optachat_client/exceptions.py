"""
Exceptions for the OptaChat client.
"""

from typing import Optional, Dict, Any


class OptaChatError(Exception):
    """Base exception of the OptaChat client."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConnectionFailedError(OptaChatError):
    """Backend unreachable (transport error, timeout)."""
    pass


class ResponseFormatError(OptaChatError):
    """Backend payload does not match the expected shape."""
    pass


class APIError(OptaChatError):
    """Backend answered with an error status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(message, details)


class NotFoundError(APIError):
    """Resource not found (404)."""

    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=404, error_type="not_found", details=details)


class ServerError(APIError):
    """Internal server error (5xx)."""

    def __init__(
        self,
        message: str = "Server error",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message, status_code=status_code, error_type="server_error", details=details)


class ValidationError(APIError):
    """Request rejected (400/422)."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 422
    ):
        super().__init__(message, status_code=status_code, error_type="validation_error", details=details)
