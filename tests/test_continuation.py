"""Unit tests for EventHandlerContinuation."""

import pytest
from unittest.mock import AsyncMock, Mock

from adaptive_http.core.exceptions import ContinuationAlreadyResumedError
from adaptive_http.core.managers.continuation import EventHandlerContinuation
from adaptive_http.core.models.outcome import Outcome


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "outcome, handler_name",
    [
        (Outcome.SUCCESS, "onSuccess"),
        (Outcome.FAIL, "onFail"),
        (Outcome.TIMEOUT, "onTimeout"),
    ],
)
async def test_dispatches_to_matching_handler(outcome, handler_name):
    handlers = {"onSuccess": Mock(), "onFail": Mock(), "onTimeout": Mock()}
    continuation = EventHandlerContinuation(handlers)

    await continuation(outcome, {"k": "v"})

    handlers[handler_name].assert_called_once_with({"k": "v"})
    for name, handler in handlers.items():
        if name != handler_name:
            handler.assert_not_called()


@pytest.mark.asyncio
async def test_async_handler_awaited():
    handler = AsyncMock()
    continuation = EventHandlerContinuation({"onFail": handler})

    await continuation(Outcome.FAIL, {})

    handler.assert_awaited_once_with({})


@pytest.mark.asyncio
async def test_missing_handler_ignored():
    continuation = EventHandlerContinuation({"onSuccess": Mock()})

    await continuation(Outcome.TIMEOUT, {})

    assert continuation.resumed is True


@pytest.mark.asyncio
async def test_second_resume_refused():
    handler = Mock()
    continuation = EventHandlerContinuation({"onSuccess": handler})

    await continuation(Outcome.SUCCESS, {})
    with pytest.raises(ContinuationAlreadyResumedError):
        await continuation(Outcome.SUCCESS, {})

    assert handler.call_count == 1


@pytest.mark.asyncio
async def test_handlers_released_after_resume():
    continuation = EventHandlerContinuation({"onSuccess": Mock()})

    await continuation(Outcome.SUCCESS, {})

    assert continuation._handlers is None
