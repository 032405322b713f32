"""Observer protocol for per-attempt diagnostic events.

Sinks receive one event for every classification the attempt executor
makes, plus retry, domain-denied and auth-failed events from the
coordinator and invocation adapter. They are purely observational:
the engine isolates sink failures so they never change an outcome.
"""

from typing import Any, Optional, Protocol

from adaptive_http.core.models.diagnostic_event import DiagnosticEvent


class DiagnosticSink(Protocol):
    """Observer for diagnostic events.

    Sinks should be thread-safe and non-blocking, as they are called from
    many concurrent invocation tasks.
    """

    def on_event(
        self,
        event: DiagnosticEvent,
        endpoint: Optional[str],
        message: str,
        **details: Any,
    ) -> None:
        """Called once per diagnostic event.

        Args:
            event: What happened
            endpoint: Target URL of the invocation (None if unknown)
            message: Human readable result message
            details: Extra parameters such as status_code or attempt
        """
        ...
