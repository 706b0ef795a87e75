"""Validation and URL helpers."""

from __future__ import annotations

from typing import Any

from .errors import InvalidCallback, InvalidConfiguration


def normalize_url(base: str, path: str) -> str:
    """Join a base URL and an endpoint path, dropping one trailing slash from the base."""
    if len(base) > 1 and base.endswith("/"):
        base = base[:-1]
    return base + path


def validate_callback(callback: Any, operation: str) -> None:
    """Raise InvalidCallback unless the completion handler can be called."""
    if not callable(callback):
        raise InvalidCallback(f"callback to {operation}() isn't a function")


def validate_client_options(
    *,
    url: Any,
    request: Any,
    timeout: Any,
    workers: Any,
) -> None:
    """Validate client options and raise InvalidConfiguration on invalid values."""
    if not isinstance(url, str) or not url:
        raise InvalidConfiguration("url must be a non-empty string.")
    # A request whose body has been read can't be re-used as a template.
    if request is not None and getattr(request, "body_used", False):
        raise InvalidConfiguration("request override has already been consumed.")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise InvalidConfiguration("timeout must be a number of seconds.")
    if timeout <= 0:
        raise InvalidConfiguration("timeout must be > 0.")
    if isinstance(workers, bool) or not isinstance(workers, int):
        raise InvalidConfiguration("workers must be an integer.")
    if workers < 1:
        raise InvalidConfiguration("workers must be >= 1.")
