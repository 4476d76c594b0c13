"""
Custom exceptions for the Bridge client library.
"""

from typing import Any, Optional


class BridgeClientError(Exception):
    """Base exception for Bridge client errors."""
    pass


class InvalidInputEncodingError(BridgeClientError):
    """Raised when hash input cannot be decoded with the declared encoding."""
    pass


class InvalidArgumentError(BridgeClientError):
    """Raised when a helper receives a malformed argument."""
    pass


class UnsupportedDigestError(BridgeClientError):
    """Raised when the hash backend does not provide a digest algorithm."""
    pass


class SigningFailedError(BridgeClientError):
    """Raised when the configured signer fails to sign a request."""
    pass


class UnsupportedMethodError(BridgeClientError):
    """Raised when a request uses an HTTP method the Bridge API does not accept."""
    pass


class ConfigurationError(BridgeClientError):
    """Raised when client configuration is invalid."""
    pass


class TransportError(BridgeClientError):
    """Raised when the HTTP request itself fails."""
    pass


class APIError(BridgeClientError):
    """Raised when the Bridge answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
