"""Protocols and lightweight model types."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from .errors import RequestBodyConsumed

JSON_HEADERS = {"Content-Type": "application/json"}

CLIENT_ERROR_KEY = "clientError"
ERROR_KEY = "error"


class HTTPResponse(Protocol):
    """Contract for the parts of a response the transport reads."""

    status_code: int

    def json(self) -> Any:
        """Decode the body as JSON."""


class HTTPSession(Protocol):
    """Contract for the HTTP session used by the transport."""

    def request(self, method: str, url: str, **kwargs: Any) -> HTTPResponse:
        """Issue one HTTP request."""


class Closable(Protocol):
    """Optional close contract for resources."""

    def close(self) -> None:
        """Release associated resources."""


@dataclass
class RequestTemplate:
    """Request descriptor with a single-use body.

    The defaults describe a JSON POST. ``mode`` and ``cache`` mirror the
    browser fetch options the ERI service is usually called with; ``cache``
    is translated into a ``Cache-Control`` header by the transport.
    """

    method: str = "POST"
    url: str = ""
    headers: dict[str, str] = field(default_factory=lambda: dict(JSON_HEADERS))
    mode: str = "cors"
    cache: str = "default"
    body: bytes | None = None
    _body_used: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def body_used(self) -> bool:
        return self._body_used

    def consume_body(self) -> bytes | None:
        """Return the body once; later reads raise RequestBodyConsumed."""
        if self._body_used:
            raise RequestBodyConsumed(f"body of request to {self.url!r} was already read")
        self._body_used = True
        return self.body

    def clone(self) -> RequestTemplate:
        """Return an independent, unconsumed copy."""
        if self._body_used:
            raise RequestBodyConsumed("cannot clone a request whose body was already read")
        return dataclasses.replace(self, headers=dict(self.headers))

    def replace(self, **changes: Any) -> RequestTemplate:
        """Return a clone with the given fields overridden."""
        copy = self.clone()
        for name, value in changes.items():
            setattr(copy, name, value)
        return copy


class ResponseEnvelope(dict[str, Any]):
    """Normalized result handed to a completion handler.

    Always carries ``clientError`` and ``error``; every other key comes from
    the service's JSON payload.
    """

    @classmethod
    def skeleton(cls) -> ResponseEnvelope:
        return cls({CLIENT_ERROR_KEY: None, ERROR_KEY: None})

    @classmethod
    def merge(cls, payload: Mapping[str, Any]) -> ResponseEnvelope:
        """Overlay payload keys on a fresh skeleton."""
        envelope = cls.skeleton()
        envelope.update(payload)
        return envelope

    @property
    def client_error(self) -> str | None:
        return self.get(CLIENT_ERROR_KEY)

    @property
    def error(self) -> Any:
        return self.get(ERROR_KEY)

    @property
    def ok(self) -> bool:
        return self.client_error is None and self.error is None


Callback = Callable[[ResponseEnvelope], Any]
