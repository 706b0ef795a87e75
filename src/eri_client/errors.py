"""Custom exceptions for the ERI client."""

from __future__ import annotations

from enum import Enum


class ClientErrorKind(str, Enum):
    """Closed set of failures raised to the caller."""

    INVALID_CONFIGURATION = "invalid_configuration"
    INVALID_CALLBACK = "invalid_callback"
    CALLBACK_FAILED = "callback_failed"
    CLIENT_CLOSED = "client_closed"


class ERIClientError(Exception):
    """Base exception for this project."""

    kind: ClientErrorKind | None = None


class InvalidConfiguration(ERIClientError):
    """Raised when client options are missing or unusable."""

    kind = ClientErrorKind.INVALID_CONFIGURATION


class InvalidCallback(ERIClientError):
    """Raised when a completion handler is not callable."""

    kind = ClientErrorKind.INVALID_CALLBACK


class CallbackError(ERIClientError):
    """Raised when the caller's completion handler fails."""

    kind = ClientErrorKind.CALLBACK_FAILED


class ClientClosed(ERIClientError):
    """Raised when a call is made on a client that was closed."""

    kind = ClientErrorKind.CLIENT_CLOSED


class RequestBodyConsumed(ERIClientError):
    """Raised when a single-use request body is read twice."""
