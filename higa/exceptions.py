"""
Custom exceptions for the higa client.

This module defines the exception hierarchy raised by the client. Every
failure of a remote call derives from RequestError so callers can handle
transport, status and decoding failures uniformly.
"""

from typing import Any, Optional


class HigaError(Exception):
    """Base exception for all higa errors."""
    
    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)
    
    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(HigaError):
    """Raised when configuration is invalid or missing."""
    
    def __init__(self, message: str = "Configuration error", details: str = None):
        super().__init__(message, details)


class RequestError(HigaError):
    """Raised when a request to the remote API fails for any reason."""
    
    def __init__(
        self,
        message: str = "Request failed",
        details: str = None,
        method: Optional[str] = None,
        url: Optional[str] = None
    ):
        super().__init__(message, details)
        self.method = method
        self.url = url


class TransportError(RequestError):
    """Raised when the request could not be delivered (connection, timeout)."""
    
    def __init__(self, message: str = "Transport error", details: str = None, **kwargs):
        super().__init__(message, details, **kwargs)


class HTTPStatusError(RequestError):
    """
    Raised when the remote API answers with a non-success status.
    
    The status and the (decoded when possible) body are kept as-is; the
    client never interprets them.
    """
    
    def __init__(self, status: int, body: Any = None, details: str = None, **kwargs):
        super().__init__(f"HTTP {status}", details, **kwargs)
        self.status = status
        self.body = body


class DecodeError(RequestError):
    """Raised when a response body is not valid JSON."""
    
    def __init__(self, message: str = "Malformed response body", details: str = None, **kwargs):
        super().__init__(message, details, **kwargs)
