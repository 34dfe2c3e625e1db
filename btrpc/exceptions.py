"""Exception hierarchy for btrpc.

Every error raised by the client derives from :class:`BTRPCError` so callers
can catch the whole family in one place.
"""

from __future__ import annotations

from typing import Any


class BTRPCError(Exception):
    """Base exception for all btrpc errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize btrpc error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(BTRPCError):
    """Data validation errors."""


class ArgumentValidationError(ValidationError):
    """A required RPC argument was rejected by its validator."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""


class NetworkError(BTRPCError):
    """Network-related errors."""


class TransportError(NetworkError):
    """The HTTP transport could not complete a request."""


class ClientError(TransportError):
    """The daemon answered with an HTTP error status.

    Carries the status code and the raw response headers so that callers
    (and the session renewal handler) can inspect them.
    """

    def __init__(
        self,
        status: int,
        headers: list[tuple[str, str]] | None = None,
        body: bytes = b"",
        message: str | None = None,
    ):
        """Initialize client error."""
        super().__init__(message or f"HTTP {status}", {"status": status})
        self.status = status
        self.headers = list(headers or [])
        self.body = body

    def header(self, name: str) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None


class ProtocolError(BTRPCError):
    """RPC protocol errors."""


class MessageError(ProtocolError):
    """Message parsing/serialization errors."""


class RpcResultError(ProtocolError):
    """The daemon processed the request but reported a failure."""


class UnknownMethodError(ProtocolError):
    """No method descriptor is registered under the requested name."""
