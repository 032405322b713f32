import inspect
import threading
from typing import Any, Callable, Dict, Mapping, Optional

from adaptive_http.core.exceptions import ContinuationAlreadyResumedError
from adaptive_http.core.models.outcome import Outcome
from adaptive_http.core.settings import logger


class EventHandlerContinuation:
    """Resumes the authentication graph through its event handlers.

    The graph supplies a mapping from outcome names (`onSuccess`, `onFail`,
    `onTimeout`) to handlers; the handler matching the terminal outcome
    receives the response body. The handler mapping is released after the
    single permitted resume.
    """

    def __init__(self, event_handlers: Optional[Mapping[str, Callable[..., Any]]] = None):
        self._handlers: Optional[Dict[str, Callable[..., Any]]] = dict(event_handlers or {})
        self._lock = threading.Lock()
        self._resumed = False

    @property
    def resumed(self) -> bool:
        return self._resumed

    async def __call__(self, outcome: Outcome, body: Dict[str, Any]) -> None:
        with self._lock:
            if self._resumed:
                raise ContinuationAlreadyResumedError(
                    f"Continuation already resumed, refusing outcome={outcome}"
                )
            self._resumed = True
            handlers, self._handlers = self._handlers, None

        handler = handlers.get(outcome.value) if handlers else None
        if handler is None:
            logger.debug("[continuation] no handler registered for outcome=%s", outcome.value)
            return

        result = handler(body)
        if inspect.isawaitable(result):
            await result
