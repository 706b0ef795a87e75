"""ERI client: the public suggest/autocomplete operations."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from .config import ClientConfig
from .errors import ClientClosed, InvalidConfiguration
from .logging_utils import get_logger
from .models import Callback, Closable, HTTPSession, ResponseEnvelope
from .request_builders import (
    attach_json_body,
    build_autocomplete_request,
    build_suggestion_request,
)
from .transport import Transport, make_session
from .validation import validate_callback


class ERIClient:
    """Convenience client for the ERI web service.

    Typical usage::

        client = create({"url": "https://eri.example.org"})
        client.suggest("john@example.org", print)

    Every call runs in the background and reports through its callback
    exactly once. The envelope always has ``clientError`` and ``error``.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: HTTPSession | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not isinstance(config, ClientConfig):
            raise InvalidConfiguration("invalid arguments to ERIClient: expected ClientConfig.")
        self._config = config
        owned = make_session(config.user_agent) if session is None else None
        self._owned_session: Closable | None = owned
        self._closed = False
        self._executor = ThreadPoolExecutor(
            max_workers=config.workers, thread_name_prefix="eri-client"
        )
        self._transport = Transport(
            session=session or owned,
            executor=self._executor,
            timeout=config.timeout,
            logger=logger or get_logger(),
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    def suggest(self, email: str, callback: Callback) -> Future[ResponseEnvelope]:
        """Ask for alternatives to a possibly mistyped address.

        When the service is reachable the result holds at least one
        alternative: the input itself or something ERI considers worth
        offering instead. Alternatives share an equal score, but their order
        is significant: index 0 is always the most used candidate.
        """
        self._ensure_open()
        validate_callback(callback, "suggest")
        request = attach_json_body(build_suggestion_request(self._config), {"email": email})
        return self._transport.perform(request, callback)

    def autocomplete(self, domain: str, callback: Callback) -> Future[ResponseEnvelope]:
        """Ask for known-good domains that complete the input.

        An empty ERI installation yields an empty list, as do domains below
        the service's popularity threshold.
        """
        self._ensure_open()
        validate_callback(callback, "autocomplete")
        request = attach_json_body(build_autocomplete_request(self._config), {"domain": domain})
        return self._transport.perform(request, callback)

    def close(self) -> None:
        """Wait for in-flight calls, then release the worker pool and owned session.

        Later calls raise ClientClosed. Closing twice is harmless.
        """
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        if self._owned_session is not None:
            self._owned_session.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosed("ERIClient is closed")

    def __enter__(self) -> ERIClient:
        return self

    def __exit__(self, *_exc_info: Any) -> None:
        self.close()


def create(
    config: ClientConfig | Mapping[str, Any] | None,
    *,
    session: HTTPSession | None = None,
    logger: logging.Logger | None = None,
) -> ERIClient:
    """Validate options and return a client; raises InvalidConfiguration."""
    if not isinstance(config, ClientConfig):
        config = ClientConfig.from_mapping(config)
    return ERIClient(config, session=session, logger=logger)
