"""HTTP transport that turns ERI responses into envelopes."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future

from requests import Session
from requests.exceptions import RequestException

from .errors import CallbackError, RequestBodyConsumed
from .models import CLIENT_ERROR_KEY, Callback, HTTPSession, RequestTemplate, ResponseEnvelope

# fetch() cache modes that need an explicit header; "default" sends nothing.
CACHE_CONTROL_BY_MODE = {
    "no-store": "no-store",
    "no-cache": "no-cache",
    "reload": "no-cache",
}


def make_session(user_agent: str) -> Session:
    """Create the requests session shared by one client's calls."""
    session = Session()
    session.headers.update({"User-Agent": user_agent})
    return session


class Transport:
    """Runs requests on an executor and delivers one envelope per request."""

    def __init__(
        self,
        *,
        session: HTTPSession,
        executor: Executor,
        timeout: float,
        logger: logging.Logger,
    ) -> None:
        self._session = session
        self._executor = executor
        self._timeout = timeout
        self._logger = logger

    def perform(self, request: RequestTemplate, callback: Callback) -> Future[ResponseEnvelope]:
        """Issue request in the background and hand the envelope to callback.

        The returned future resolves to the delivered envelope, or fails with
        CallbackError when callback raised.
        """
        if request.body_used:
            raise RequestBodyConsumed(f"request to {request.url!r} was already performed")
        future = self._executor.submit(self._run, request, callback)
        future.add_done_callback(self._report_failure)
        return future

    def _run(self, request: RequestTemplate, callback: Callback) -> ResponseEnvelope:
        envelope = self._exchange(request)
        try:
            callback(envelope)
        except Exception as exc:
            raise CallbackError(f"error in callback: {exc}") from exc
        return envelope

    def _exchange(self, request: RequestTemplate) -> ResponseEnvelope:
        headers = dict(request.headers)
        cache_control = CACHE_CONTROL_BY_MODE.get(request.cache)
        if cache_control and "Cache-Control" not in headers:
            headers["Cache-Control"] = cache_control

        self._logger.debug("%s %s", request.method, request.url)
        try:
            response = self._session.request(
                request.method,
                request.url,
                headers=headers,
                data=request.consume_body(),
                timeout=self._timeout,
            )
        except (RequestException, OSError) as exc:
            self._logger.warning("ERI request to %s failed: %s", request.url, exc)
            return ResponseEnvelope.merge({CLIENT_ERROR_KEY: f"error in request {exc}"})

        try:
            payload = response.json()
        except (ValueError, RecursionError) as exc:  # RecursionError: deeply nested bodies
            self._logger.warning("Undecodable ERI response from %s: %s", request.url, exc)
            return ResponseEnvelope.merge({CLIENT_ERROR_KEY: f"error in response {exc}"})

        if not isinstance(payload, dict):
            reason = f"expected a JSON object, got {type(payload).__name__}"
            self._logger.warning("Unexpected ERI response from %s: %s", request.url, reason)
            return ResponseEnvelope.merge({CLIENT_ERROR_KEY: f"error in response {reason}"})

        self._logger.debug("ERI %s answered with status %s", request.url, response.status_code)
        return ResponseEnvelope.merge(payload)

    def _report_failure(self, future: Future[ResponseEnvelope]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if isinstance(exc, CallbackError):
            self._logger.error("%s", exc, exc_info=exc)
        elif exc is not None:
            self._logger.error("ERI call failed before delivery: %s", exc, exc_info=exc)
