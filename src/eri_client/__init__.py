"""Client for the ERI email-alternative suggestion service."""

from .client import ERIClient, create
from .config import ClientConfig
from .errors import (
    CallbackError,
    ClientClosed,
    ClientErrorKind,
    ERIClientError,
    InvalidCallback,
    InvalidConfiguration,
    RequestBodyConsumed,
)
from .models import RequestTemplate, ResponseEnvelope

__all__ = [
    "CallbackError",
    "ClientClosed",
    "ClientConfig",
    "ClientErrorKind",
    "ERIClient",
    "ERIClientError",
    "InvalidCallback",
    "InvalidConfiguration",
    "RequestBodyConsumed",
    "RequestTemplate",
    "ResponseEnvelope",
    "create",
]
