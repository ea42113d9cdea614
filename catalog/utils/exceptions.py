"""Custom exceptions for the store catalog client"""

from typing import Optional


class CatalogError(Exception):
    """Base exception for the catalog client.

    ``str(error)`` is always a message that can be shown to the user.
    """
    pass


class ApiError(CatalogError):
    """Error response (status >= 400) from the catalog API"""

    def __init__(self, message: str, status_code: Optional[int] = None, server_message: Optional[str] = None):
        self.status_code = status_code
        # Only set when the response body carried its own "message"
        self.server_message = server_message
        super().__init__(message)


class TransportError(CatalogError):
    """Network failure before any response was received"""
    pass


class AuthError(CatalogError):
    """Login or registration failed"""
    pass


class PermissionDeniedError(CatalogError):
    """Operation not allowed for the current role"""
    pass


class ValidationError(CatalogError):
    """Form input rejected before any request was made"""
    pass


class TokenDecodeError(CatalogError):
    """Fabricated session token could not be decoded"""
    pass


class ConfigError(CatalogError):
    """Configuration error"""
    pass
