"""Unit tests for AttemptExecutor classification.

The HTTP client port is replaced with an AsyncMock so each test controls
the raw response (or transport exception) of exactly one attempt.
Expected outcomes:
- 2xx -> SUCCESS with a parsed body (text/plain wrapped as {"response": ...})
- 3xx / 4xx / 5xx -> FAIL without body, carrying the real status
- malformed URL -> 400 FAIL, timeouts and I/O errors -> 408 TIMEOUT
- unparseable 2xx body or unexpected error -> 500 FAIL
"""

import pytest
from unittest.mock import AsyncMock, Mock

from adaptive_http.core.exceptions import (
    InvalidRequestUrlError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
)
from adaptive_http.core.managers.attempt_executor import AttemptExecutor
from adaptive_http.core.models.diagnostic_event import DiagnosticEvent
from adaptive_http.core.models.outcome import Outcome
from adaptive_http.core.models.request import HttpResponse, OutboundRequest


URL = "https://api.example.com/risk"


@pytest.fixture
def request_():
    return OutboundRequest(method="GET", uri=URL, headers={"Accept": "application/json"})


@pytest.fixture
def http_client():
    return AsyncMock()


@pytest.fixture
def sink():
    return Mock()


@pytest.fixture
def executor(http_client, sink):
    return AttemptExecutor(http_client, sink)


def respond(http_client, status, text=None, content_type="application/json"):
    http_client.send.return_value = HttpResponse(status=status, content_type=content_type, text=text)


class TestResponseClassification:
    @pytest.mark.asyncio
    async def test_json_body_parsed(self, executor, http_client, request_):
        respond(http_client, 200, '{"a":1}')

        result = await executor.execute(request_)

        assert result.outcome == Outcome.SUCCESS
        assert result.status_code == 200
        assert result.body == {"a": 1}
        http_client.send.assert_awaited_once_with(request_)

    @pytest.mark.asyncio
    async def test_plain_text_wrapped(self, executor, http_client, request_):
        respond(http_client, 200, "hello", content_type="text/plain; charset=utf-8")

        result = await executor.execute(request_)

        assert result.outcome == Outcome.SUCCESS
        assert result.body == {"response": "hello"}

    @pytest.mark.asyncio
    async def test_empty_success_body_is_none(self, executor, http_client, request_):
        respond(http_client, 204, None)

        result = await executor.execute(request_)

        assert result.outcome == Outcome.SUCCESS
        assert result.status_code == 204
        assert result.body is None

    @pytest.mark.asyncio
    async def test_content_type_missing_parses_json(self, executor, http_client, request_):
        respond(http_client, 201, '{"nested": {"ok": true, "items": [1, 2]}}', content_type=None)

        result = await executor.execute(request_)

        assert result.body == {"nested": {"ok": True, "items": [1, 2]}}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, event",
        [
            (301, DiagnosticEvent.redirect),
            (302, DiagnosticEvent.redirect),
            (401, DiagnosticEvent.client_error),
            (404, DiagnosticEvent.client_error),
            (500, DiagnosticEvent.server_error),
            (503, DiagnosticEvent.server_error),
            (102, DiagnosticEvent.server_error),
        ],
    )
    async def test_non_success_statuses_fail_without_body(
        self, executor, http_client, sink, request_, status, event
    ):
        respond(http_client, status, None)

        result = await executor.execute(request_)

        assert result.outcome == Outcome.FAIL
        assert result.status_code == status
        assert result.body is None
        sink.on_event.assert_called_once()
        assert sink.on_event.call_args.args[0] == event


class TestFailureClassification:
    @pytest.mark.asyncio
    async def test_invalid_url(self, executor, http_client, sink, request_):
        http_client.send.side_effect = InvalidRequestUrlError("bad", url=URL)

        result = await executor.execute(request_)

        assert (result.status_code, result.outcome, result.body) == (400, Outcome.FAIL, None)
        assert sink.on_event.call_args.args[0] == DiagnosticEvent.invalid_url

    @pytest.mark.asyncio
    async def test_connect_timeout(self, executor, http_client, sink, request_):
        http_client.send.side_effect = UpstreamTimeoutError("timeout", url=URL)

        result = await executor.execute(request_)

        assert (result.status_code, result.outcome) == (408, Outcome.TIMEOUT)
        assert sink.on_event.call_args.args[0] == DiagnosticEvent.timeout

    @pytest.mark.asyncio
    async def test_other_io_error_is_timeout(self, executor, http_client, request_):
        http_client.send.side_effect = UpstreamConnectionError("reset", url=URL)

        result = await executor.execute(request_)

        assert (result.status_code, result.outcome) == (408, Outcome.TIMEOUT)

    @pytest.mark.asyncio
    async def test_unparseable_json_on_success(self, executor, http_client, sink, request_):
        respond(http_client, 200, "<html>oops</html>", content_type="text/html")

        result = await executor.execute(request_)

        assert (result.status_code, result.outcome, result.body) == (500, Outcome.FAIL, None)
        assert sink.on_event.call_args.args[0] == DiagnosticEvent.parse_error

    @pytest.mark.asyncio
    async def test_json_array_is_a_parse_failure(self, executor, http_client, request_):
        respond(http_client, 200, "[1, 2, 3]")

        result = await executor.execute(request_)

        assert (result.status_code, result.outcome) == (500, Outcome.FAIL)

    @pytest.mark.asyncio
    async def test_unexpected_error(self, executor, http_client, sink, request_):
        http_client.send.side_effect = RuntimeError("boom")

        result = await executor.execute(request_)

        assert (result.status_code, result.outcome) == (500, Outcome.FAIL)
        assert sink.on_event.call_args.args[0] == DiagnosticEvent.unknown_error


class TestDiagnosticsIsolation:
    @pytest.mark.asyncio
    async def test_failing_sink_does_not_change_result(self, http_client, request_):
        sink = Mock()
        sink.on_event.side_effect = RuntimeError("sink down")
        executor = AttemptExecutor(http_client, sink)
        respond(http_client, 200, '{"a":1}')

        result = await executor.execute(request_)

        assert result.outcome == Outcome.SUCCESS
        assert result.body == {"a": 1}

    @pytest.mark.asyncio
    async def test_no_sink(self, http_client, request_):
        executor = AttemptExecutor(http_client)
        respond(http_client, 404)

        result = await executor.execute(request_)

        assert result.outcome == Outcome.FAIL
