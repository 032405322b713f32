from typing import Any, Awaitable, Dict, Protocol

from adaptive_http.core.models.outcome import Outcome


class Continuation(Protocol):
    """Resumption point of the calling workflow.

    Called exactly once per invocation with the terminal outcome and the
    parsed response body (empty when there is none). May return an
    awaitable, which the invocation adapter awaits.
    """

    def __call__(self, outcome: Outcome, body: Dict[str, Any]) -> None | Awaitable[None]:
        ...
