"""Tests for the Overpass client and the fetch orchestrator."""

import json

import pytest
import requests

from route_pois.core import Config
from route_pois.core.errors import (
    AllEndpointsExhaustedError,
    EndpointError,
    TransientSourceError,
)
from route_pois.overpass import (
    FetchOrchestrator,
    OverpassClient,
    Outcome,
    build_orchestrator,
    classify_failure,
)


class FakeResp:
    def __init__(self, status_code=200, data=None):
        self.status_code = status_code
        self._data = data

    def json(self):
        if isinstance(self._data, Exception):  # force JSON error
            raise self._data
        return self._data

    @property
    def text(self):
        return json.dumps(self._data)


class FakeSession:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def post(self, url, data=None, timeout=None):
        self.calls.append((url, data, timeout))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _scripted_send(script):
    """Build a send callable that replays outcomes per endpoint."""
    calls = []

    def send(endpoint, query):
        calls.append(endpoint)
        outcome = script[endpoint].pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return send, calls


# --- OverpassClient --------------------------------------------------
def test_client_returns_elements_and_posts_form_data():
    session = FakeSession(FakeResp(200, {"elements": [{"type": "node", "id": 1}]}))
    client = OverpassClient(timeout=12, session=session)

    elements = client.post("https://example.test/api", "[out:json];")

    assert elements == [{"type": "node", "id": 1}]
    url, data, timeout = session.calls[0]
    assert url == "https://example.test/api"
    assert data == {"data": "[out:json];"}
    assert timeout == 12


def test_client_missing_elements_is_empty():
    client = OverpassClient(session=FakeSession(FakeResp(200, {})))
    assert client.post("u", "q") == []


@pytest.mark.parametrize("status", [429, 502, 503, 504])
def test_client_retryable_status(status):
    client = OverpassClient(session=FakeSession(FakeResp(status, {})))
    with pytest.raises(TransientSourceError) as exc:
        client.post("u", "q")
    assert exc.value.status_code == status
    assert str(exc.value) == f"retryable:{status}"


@pytest.mark.parametrize("status", [400, 403, 500])
def test_client_non_retryable_status(status):
    client = OverpassClient(session=FakeSession(FakeResp(status, {})))
    with pytest.raises(EndpointError):
        client.post("u", "q")


def test_client_timeout_is_endpoint_error():
    client = OverpassClient(timeout=1, session=FakeSession(requests.Timeout("slow")))
    with pytest.raises(EndpointError, match="timeout"):
        client.post("u", "q")


def test_client_connection_error_is_endpoint_error():
    client = OverpassClient(session=FakeSession(requests.ConnectionError("refused")))
    with pytest.raises(EndpointError):
        client.post("u", "q")


def test_client_invalid_json_is_endpoint_error():
    client = OverpassClient(session=FakeSession(FakeResp(200, ValueError("bad json"))))
    with pytest.raises(EndpointError, match="JSON"):
        client.post("u", "q")


@pytest.mark.parametrize("data", [["not", "an", "object"], "text", None, {"elements": "x"}])
def test_client_non_object_body_is_endpoint_error(data):
    client = OverpassClient(session=FakeSession(FakeResp(200, data)))
    with pytest.raises(EndpointError, match="unexpected"):
        client.post("u", "q")


def test_client_drops_non_object_elements():
    body = {"elements": [None, 3, {"type": "node", "id": 1}]}
    client = OverpassClient(session=FakeSession(FakeResp(200, body)))
    assert client.post("u", "q") == [{"type": "node", "id": 1}]


def test_orchestrator_falls_back_after_unexpected_body():
    sessions = {
        "a": FakeSession(FakeResp(200, ["not", "an", "object"])),
        "b": FakeSession(FakeResp(200, {"elements": [{"type": "node", "id": 2}]})),
    }

    def send(endpoint, query):
        return OverpassClient(session=sessions[endpoint]).post(endpoint, query)

    orchestrator = FetchOrchestrator(["a", "b"], send, sleep=lambda s: None)

    assert orchestrator.fetch("q") == [{"type": "node", "id": 2}]
    assert len(sessions["a"].calls) == 1


# --- FetchOrchestrator -----------------------------------------------
def test_classify_failure():
    assert classify_failure(TransientSourceError(429)) is Outcome.RETRY
    assert classify_failure(EndpointError("boom")) is Outcome.ABORT_ENDPOINT


def test_orchestrator_first_attempt_success():
    send, calls = _scripted_send({"a": [["ok"]], "b": []})
    sleeps = []
    orchestrator = FetchOrchestrator(["a", "b"], send, sleep=sleeps.append)

    assert orchestrator.fetch("q") == ["ok"]
    assert calls == ["a"]
    assert sleeps == []


def test_orchestrator_retries_transient_with_linear_backoff():
    send, calls = _scripted_send({"a": [TransientSourceError(503), ["ok"]]})
    sleeps = []
    orchestrator = FetchOrchestrator(["a"], send, max_retries=2, base_delay=0.4, sleep=sleeps.append)

    assert orchestrator.fetch("q") == ["ok"]
    assert calls == ["a", "a"]
    assert sleeps == [pytest.approx(0.4)]


def test_orchestrator_falls_back_after_retries_exhausted():
    send, calls = _scripted_send({
        "a": [TransientSourceError(429), TransientSourceError(429)],
        "b": [["from b"]],
    })
    sleeps = []
    orchestrator = FetchOrchestrator(["a", "b"], send, max_retries=2, base_delay=0.4, sleep=sleeps.append)

    assert orchestrator.fetch("q") == ["from b"]
    assert calls == ["a", "a", "b"]
    assert sleeps == [pytest.approx(0.4), pytest.approx(0.8)]


def test_orchestrator_non_transient_skips_to_next_endpoint():
    send, calls = _scripted_send({
        "a": [EndpointError("Overpass unavailable (400)")],
        "b": [["from b"]],
    })
    sleeps = []
    orchestrator = FetchOrchestrator(["a", "b"], send, max_retries=3, sleep=sleeps.append)

    assert orchestrator.fetch("q") == ["from b"]
    assert calls == ["a", "b"]
    assert sleeps == []


def test_orchestrator_exhausted_reports_last_failure():
    send, calls = _scripted_send({
        "a": [EndpointError("down")],
        "b": [TransientSourceError(504), TransientSourceError(502)],
    })
    orchestrator = FetchOrchestrator(["a", "b"], send, max_retries=2, sleep=lambda _: None)

    with pytest.raises(AllEndpointsExhaustedError) as exc:
        orchestrator.fetch("q")

    assert exc.value.last_reason == "b#2:retryable:502"
    assert calls == ["a", "b", "b"]


def test_orchestrator_without_endpoints():
    orchestrator = FetchOrchestrator([], lambda e, q: [], sleep=lambda _: None)
    with pytest.raises(AllEndpointsExhaustedError, match="no endpoint"):
        orchestrator.fetch("q")


def test_orchestrator_passes_query_through():
    seen = []

    def send(endpoint, query):
        seen.append(query)
        return []

    FetchOrchestrator(["a"], send).fetch("[out:json];")
    assert seen == ["[out:json];"]


def test_build_orchestrator_uses_config_and_client():
    config = Config()
    config.endpoints = ["https://example.test/api"]
    config.max_retries = 3
    session = FakeSession(FakeResp(200, {"elements": [{"type": "node", "id": 5}]}))

    orchestrator = build_orchestrator(config, OverpassClient(session=session))

    assert orchestrator.fetch("q") == [{"type": "node", "id": 5}]
    assert orchestrator.max_retries == 3
    assert session.calls[0][0] == "https://example.test/api"
