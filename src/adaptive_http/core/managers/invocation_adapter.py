"""InvocationAdapter: runs one HTTP function call as a workflow step.

Responsibilities per invocation:
1. Apply the auth decorator selected by the auth config (if any).
2. Normalize headers (default Accept, drop blank or "null" names).
3. Check the target against the domain allow-list.
4. Drive the retry coordinator.
5. Resume the workflow exactly once with the terminal outcome and body.

`invoke` only schedules the work as an asyncio task and returns it, so the
workflow's event loop is never blocked by the network round trips.
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from typing import Optional, Set

from adaptive_http.core.config import InvocationConfig
from adaptive_http.core.interfaces.auth import AuthDecoratorResolverPort
from adaptive_http.core.interfaces.diagnostics import DiagnosticSink
from adaptive_http.core.interfaces.workflow import Continuation
from adaptive_http.core.logging_config import correlation_id_var
from adaptive_http.core.managers.diagnostics import notify
from adaptive_http.core.managers.domain_guard import DomainGuard
from adaptive_http.core.managers.retry_coordinator import RetryCoordinator
from adaptive_http.core.models.auth_config import AuthConfigModel
from adaptive_http.core.models.diagnostic_event import DiagnosticEvent
from adaptive_http.core.models.outcome import InvocationResult
from adaptive_http.core.models.request import ACCEPT, TYPE_APPLICATION_JSON, OutboundRequest
from adaptive_http.core.settings import logger

NULL_HEADER_NAME = "null"


def normalize_headers(request: OutboundRequest) -> OutboundRequest:
    """Default `Accept: application/json` and drop unusable header names."""
    headers = {
        name: value
        for name, value in request.headers.items()
        if name and name.strip() and name != NULL_HEADER_NAME
    }
    if not any(name.lower() == ACCEPT.lower() for name in headers):
        headers[ACCEPT] = TYPE_APPLICATION_JSON
    return request.model_copy(update={"headers": headers})


class InvocationAdapter:
    """Schedules invocations and delivers their terminal result.

    Attributes:
        config: Immutable engine configuration (retry count, allow-list, timeouts)
    """

    def __init__(
        self,
        retry_coordinator: RetryCoordinator,
        domain_guard: DomainGuard,
        auth_resolver: AuthDecoratorResolverPort,
        config: InvocationConfig,
        diagnostics: Optional[DiagnosticSink] = None,
    ) -> None:
        self._coordinator = retry_coordinator
        self._guard = domain_guard
        self._auth = auth_resolver
        self.config = config
        self._diagnostics = diagnostics
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def invoke(
        self,
        request: OutboundRequest,
        auth_config: Optional[AuthConfigModel],
        on_complete: Continuation,
    ) -> asyncio.Task[InvocationResult]:
        """Register the invocation as a deferred unit of work.

        Must be called from within the running event loop. The returned task
        resolves to the same result that is passed to `on_complete`.
        """
        task = asyncio.create_task(self._run(request, auth_config, on_complete))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(f"[invoke] scheduled method={request.method} url={request.uri} pending={len(self._tasks)}")
        return task

    async def aclose(self) -> None:
        """Wait for every scheduled invocation to deliver its result."""
        if self._tasks:
            logger.info(f"[invoke] waiting for {len(self._tasks)} pending invocation(s)")
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(
        self,
        request: OutboundRequest,
        auth_config: Optional[AuthConfigModel],
        on_complete: Continuation,
    ) -> InvocationResult:
        correlation_id_var.set(uuid.uuid4().hex[:12])
        try:
            result = await self._execute(request, auth_config)
        except Exception as exc:
            logger.exception("[invoke] unexpected error url=%s error=%s", request.uri, exc)
            result = InvocationResult.failed()

        await self._resume(on_complete, result, request.uri)
        return result

    async def _execute(
        self, request: OutboundRequest, auth_config: Optional[AuthConfigModel]
    ) -> InvocationResult:
        if auth_config is not None:
            try:
                decorator = self._auth.resolve(auth_config)
                request = await decorator.apply_auth(request, auth_config)
            except Exception as exc:
                logger.error(
                    "[invoke] error while applying authentication type=%s url=%s error=%s",
                    auth_config.type,
                    request.uri,
                    exc,
                )
                notify(
                    self._diagnostics,
                    DiagnosticEvent.auth_failed,
                    request.uri,
                    "Error while applying authentication to the request.",
                    auth_type=auth_config.type,
                )
                return InvocationResult.failed()

        request = normalize_headers(request)

        if not self._guard.permit(request.uri):
            logger.error(
                "[invoke] request url does not match with the allowed domain list url=%s", request.uri
            )
            notify(
                self._diagnostics,
                DiagnosticEvent.domain_denied,
                request.uri,
                "Request URL does not match with the allowed domain list.",
            )
            return InvocationResult.failed()

        attempt = await self._coordinator.execute_with_policy(request, self.config.retry_count)
        logger.debug(
            f"[invoke] terminal result url={request.uri} status={attempt.status_code} outcome={attempt.outcome}"
        )
        return InvocationResult.from_attempt(attempt)

    async def _resume(self, on_complete: Continuation, result: InvocationResult, endpoint: str) -> None:
        try:
            resumed = on_complete(result.outcome, dict(result.body))
            if inspect.isawaitable(resumed):
                await resumed
        except Exception as exc:
            logger.error(
                f"[invoke] continuation failed outcome={result.outcome} url={endpoint} error={exc}"
            )
