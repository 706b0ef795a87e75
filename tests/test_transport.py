import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest
import requests

from eri_client.errors import CallbackError, RequestBodyConsumed
from eri_client.models import RequestTemplate, ResponseEnvelope
from eri_client.transport import Transport, make_session


class FakeResponse:
    def __init__(self, *, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, raise_error: bool = False) -> None:
        self._response = response
        self._raise_error = raise_error
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if self._raise_error:
            raise requests.ConnectionError("network down")
        assert self._response is not None
        return self._response


@pytest.fixture
def executor() -> Any:
    with ThreadPoolExecutor(max_workers=2) as pool:
        yield pool


def make_transport(session: Any, executor: ThreadPoolExecutor) -> Transport:
    return Transport(
        session=session,
        executor=executor,
        timeout=5.0,
        logger=logging.getLogger("test"),
    )


def suggest_request() -> RequestTemplate:
    return RequestTemplate(url="https://eri.example.org/suggest", body=b'{"email":"a@b.com"}')


def test_perform_merges_payload_into_envelope(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(FakeResponse(payload={"suggestions": ["a@b.com"], "error": None}))
    received: list[ResponseEnvelope] = []

    envelope = make_transport(session, executor).perform(suggest_request(), received.append).result()

    assert received == [{"clientError": None, "error": None, "suggestions": ["a@b.com"]}]
    assert envelope is received[0]
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://eri.example.org/suggest"
    assert call["data"] == b'{"email":"a@b.com"}'
    assert call["timeout"] == 5.0
    assert call["headers"]["Content-Type"] == "application/json"


def test_perform_passes_server_error_through(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(FakeResponse(status_code=400, payload={"error": "Unparsable email"}))
    received: list[ResponseEnvelope] = []

    make_transport(session, executor).perform(suggest_request(), received.append).result()

    assert received == [{"clientError": None, "error": "Unparsable email"}]


def test_perform_reports_transport_failure(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(raise_error=True)
    received: list[ResponseEnvelope] = []

    make_transport(session, executor).perform(suggest_request(), received.append).result()

    assert len(received) == 1
    envelope = received[0]
    assert envelope.error is None
    assert envelope.client_error is not None
    assert envelope.client_error.startswith("error in request")
    assert "network down" in envelope.client_error


def test_perform_reports_undecodable_body(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(FakeResponse(status_code=502, text="<html>Bad gateway</html>"))
    received: list[ResponseEnvelope] = []

    make_transport(session, executor).perform(suggest_request(), received.append).result()

    assert received[0].client_error is not None
    assert received[0].client_error.startswith("error in response")
    assert received[0].error is None


def test_perform_rejects_non_object_payload(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(FakeResponse(payload=["a@b.com"]))
    received: list[ResponseEnvelope] = []

    make_transport(session, executor).perform(suggest_request(), received.append).result()

    assert received[0].client_error == "error in response expected a JSON object, got list"
    assert "0" not in received[0]


def test_perform_translates_cache_mode_into_header(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(FakeResponse(payload={}))
    request = suggest_request().replace(cache="no-store")

    make_transport(session, executor).perform(request, lambda _envelope: None).result()

    assert session.calls[0]["headers"]["Cache-Control"] == "no-store"


def test_perform_default_cache_sends_no_header(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(FakeResponse(payload={}))

    make_transport(session, executor).perform(suggest_request(), lambda _envelope: None).result()

    assert "Cache-Control" not in session.calls[0]["headers"]


def test_perform_consumes_request_body(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(FakeResponse(payload={}))
    request = suggest_request()
    transport = make_transport(session, executor)

    transport.perform(request, lambda _envelope: None).result()

    assert request.body_used is True
    with pytest.raises(RequestBodyConsumed):
        transport.perform(request, lambda _envelope: None)
    assert len(session.calls) == 1


def test_callback_failure_is_raised_not_reported(caplog: pytest.LogCaptureFixture) -> None:
    session = FakeSession(FakeResponse(payload={"suggestions": []}))
    received: list[ResponseEnvelope] = []

    def broken_callback(envelope: ResponseEnvelope) -> None:
        received.append(envelope)
        raise KeyError("alternatives")

    with caplog.at_level(logging.ERROR, logger="test"):
        executor = ThreadPoolExecutor(max_workers=1)
        future = make_transport(session, executor).perform(suggest_request(), broken_callback)
        # shutdown joins the worker, so the failure log has been written
        executor.shutdown(wait=True)
        with pytest.raises(CallbackError) as excinfo:
            future.result()

    assert isinstance(excinfo.value.__cause__, KeyError)
    assert len(received) == 1
    assert received[0].client_error is None
    assert any("error in callback" in record.getMessage() for record in caplog.records)


def test_make_session_sets_user_agent() -> None:
    session = make_session("my-agent")
    assert session.headers["User-Agent"] == "my-agent"


def test_envelope_is_json_serializable(executor: ThreadPoolExecutor) -> None:
    session = FakeSession(FakeResponse(payload={"alternatives": ["a@b.com"]}))
    envelope = make_transport(session, executor).perform(suggest_request(), print).result()
    assert json.loads(json.dumps(envelope)) == {
        "clientError": None,
        "error": None,
        "alternatives": ["a@b.com"],
    }


class RaisingSession:
    def __init__(self, error: Exception) -> None:
        self._error = error
        self.calls = 0

    def request(self, _method: str, _url: str, **_kwargs: Any) -> FakeResponse:
        self.calls += 1
        raise self._error


class RawSession:
    """Returns a real requests.Response with the given body."""

    def __init__(self, content: bytes) -> None:
        self._content = content

    def request(self, _method: str, url: str, **_kwargs: Any) -> requests.Response:
        response = requests.Response()
        response.status_code = 200
        response.url = url
        response.encoding = "utf-8"
        response._content = self._content
        return response


def test_perform_reports_overly_nested_body(executor: ThreadPoolExecutor) -> None:
    depth = 100000
    session = RawSession(b'{"suggestions":' + b"[" * depth + b"]" * depth + b"}")
    received: list[ResponseEnvelope] = []

    make_transport(session, executor).perform(suggest_request(), received.append).result()

    assert len(received) == 1
    assert received[0].client_error is not None
    assert received[0].client_error.startswith("error in response")
    assert received[0].error is None


def test_perform_decodes_real_response(executor: ThreadPoolExecutor) -> None:
    session = RawSession(b'{"suggestions":["a@gmail.com"]}')
    received: list[ResponseEnvelope] = []

    make_transport(session, executor).perform(suggest_request(), received.append).result()

    assert received == [{"clientError": None, "error": None, "suggestions": ["a@gmail.com"]}]


def test_perform_reports_socket_level_failure(executor: ThreadPoolExecutor) -> None:
    session = RaisingSession(OSError("socket exploded"))
    received: list[ResponseEnvelope] = []

    make_transport(session, executor).perform(suggest_request(), received.append).result()

    assert len(received) == 1
    assert received[0].client_error == "error in request socket exploded"
    assert received[0].error is None


def test_unexpected_session_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    session = RaisingSession(RuntimeError("session misconfigured"))
    received: list[ResponseEnvelope] = []

    with caplog.at_level(logging.ERROR, logger="test"):
        executor = ThreadPoolExecutor(max_workers=1)
        future = make_transport(session, executor).perform(suggest_request(), received.append)
        executor.shutdown(wait=True)
        with pytest.raises(RuntimeError, match="session misconfigured"):
            future.result()

    assert received == []
    assert any("failed before delivery" in record.getMessage() for record in caplog.records)
