"""Runtime configuration model."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .errors import InvalidConfiguration
from .models import RequestTemplate
from .validation import validate_client_options

DEFAULT_USER_AGENT = "ERIClient/1.0 (+python-requests)"
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_WORKERS = 4

ENV_URL = "ERI_URL"
ENV_TIMEOUT = "ERI_TIMEOUT"
ENV_WORKERS = "ERI_WORKERS"


@dataclass(frozen=True)
class ClientConfig:
    """Validated options the client is built from."""

    url: str
    request: RequestTemplate | None = None
    timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    workers: int = DEFAULT_WORKERS

    def __post_init__(self) -> None:
        validate_client_options(
            url=self.url,
            request=self.request,
            timeout=self.timeout,
            workers=self.workers,
        )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> ClientConfig:
        """Build a config from a plain mapping such as ``{"url": ...}``."""
        if not isinstance(options, Mapping) or not options:
            raise InvalidConfiguration("invalid arguments to ERIClient: no options given.")
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise InvalidConfiguration(f"unknown options: {', '.join(unknown)}")
        if "url" not in options:
            raise InvalidConfiguration("url must be a non-empty string.")
        return cls(**options)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a config from ERI_URL, ERI_TIMEOUT and ERI_WORKERS."""
        env = os.environ if environ is None else environ
        url = env.get(ENV_URL, "")
        try:
            timeout = float(env.get(ENV_TIMEOUT, DEFAULT_REQUEST_TIMEOUT))
            workers = int(env.get(ENV_WORKERS, DEFAULT_WORKERS))
        except ValueError as exc:
            raise InvalidConfiguration(f"invalid numeric environment value: {exc}") from exc
        return cls(url=url, timeout=timeout, workers=workers)
