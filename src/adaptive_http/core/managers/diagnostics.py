"""Concrete diagnostic sinks.

This module provides the sinks the composition root can plug in:
- NullDiagnosticSink: default, drops everything
- LoggingDiagnosticSink: one structured log line per event
- CompositeDiagnosticSink: fans out to several sinks, isolating failures
"""

import logging
from typing import Any, Iterable, List, Optional

from adaptive_http.core.interfaces.diagnostics import DiagnosticSink
from adaptive_http.core.models.diagnostic_event import DiagnosticEvent, FAILURE_EVENTS


logger = logging.getLogger(__name__)


class NullDiagnosticSink:
    def on_event(
        self,
        event: DiagnosticEvent,
        endpoint: Optional[str],
        message: str,
        **details: Any,
    ) -> None:
        pass


class LoggingDiagnosticSink:
    """Writes each event as a single key=value log line.

    Failure events are logged at `failure_level`, everything else at
    `success_level`, so diagnostic output can be routed separately from the
    engine's own logs by logger name.
    """

    def __init__(
        self,
        logger_name: str = "adaptive_http.diagnostics",
        success_level: int = logging.INFO,
        failure_level: int = logging.WARNING,
    ):
        self._logger = logging.getLogger(logger_name)
        self._success_level = success_level
        self._failure_level = failure_level

    def on_event(
        self,
        event: DiagnosticEvent,
        endpoint: Optional[str],
        message: str,
        **details: Any,
    ) -> None:
        status = "FAILED" if event in FAILURE_EVENTS else "SUCCESS"
        level = self._failure_level if status == "FAILED" else self._success_level
        extra = " ".join(f"{key}={value}" for key, value in sorted(details.items()))
        self._logger.log(
            level,
            "[diagnostic] event=%s result=%s api=%s message=%r %s",
            event.value,
            status,
            endpoint,
            message,
            extra,
        )


class CompositeDiagnosticSink:
    """Notifies every wrapped sink; a failing sink never affects the others."""

    def __init__(self, sinks: Optional[Iterable[DiagnosticSink]] = None):
        self._sinks: List[DiagnosticSink] = list(sinks or [])

    def add(self, sink: DiagnosticSink) -> None:
        self._sinks.append(sink)

    def on_event(
        self,
        event: DiagnosticEvent,
        endpoint: Optional[str],
        message: str,
        **details: Any,
    ) -> None:
        for sink in self._sinks:
            notify(sink, event, endpoint, message, **details)


def notify(
    sink: Optional[DiagnosticSink],
    event: DiagnosticEvent,
    endpoint: Optional[str],
    message: str,
    **details: Any,
) -> None:
    """Deliver an event to `sink`, logging and discarding any sink error."""
    if sink is None:
        return
    try:
        sink.on_event(event, endpoint, message, **details)
    except Exception as exc:
        logger.error(
            f"[diagnostic:error] sink failed sink={type(sink).__name__} "
            f"event={event.value} error={exc}"
        )
