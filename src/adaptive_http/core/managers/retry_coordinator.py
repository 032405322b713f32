"""RetryCoordinator: bounded retry policy around the AttemptExecutor.

Policy for one invocation:
1. One first attempt.
2. Only a first attempt whose status is in [400, 500] (both inclusive)
   enters the retry loop. A TIMEOUT carries the synthetic status 408 and
   is retried like a client error. 3xx and 501+ results are returned as-is.
3. The loop makes up to `max_retries` further attempts and stops at the
   first status in [200, 400), returning that attempt's result.
4. When the loop is exhausted the result is FAIL with no body and the
   status code of the last attempt, whatever that attempt's own outcome
   was. Callers rely on never seeing a stale SUCCESS or TIMEOUT here.

Attempts within one invocation are strictly sequential.
"""

from typing import Optional

from adaptive_http.core.interfaces.diagnostics import DiagnosticSink
from adaptive_http.core.interfaces.retry import RetryPort
from adaptive_http.core.managers.attempt_executor import AttemptExecutor
from adaptive_http.core.managers.diagnostics import notify
from adaptive_http.core.models.diagnostic_event import DiagnosticEvent
from adaptive_http.core.models.outcome import AttemptResult
from adaptive_http.core.models.request import OutboundRequest
from adaptive_http.core.settings import logger


class RetryCoordinator:
    def __init__(
        self,
        executor: AttemptExecutor,
        retry_port: RetryPort,
        diagnostics: Optional[DiagnosticSink] = None,
        wait_initial: Optional[float] = None,
        wait_max: Optional[float] = None,
    ):
        self._executor = executor
        self._retry = retry_port
        self._diagnostics = diagnostics
        self._wait_initial = wait_initial
        self._wait_max = wait_max

    async def execute_with_policy(self, request: OutboundRequest, max_retries: int) -> AttemptResult:
        result = await self._executor.execute(request)
        if not result.is_retry_trigger():
            return result

        logger.error(
            "[retry] error while calling endpoint url=%s status=%s", request.uri, result.status_code
        )
        if max_retries <= 0:
            logger.debug("[retry] retries disabled url=%s", request.uri)
            return AttemptResult.failed(result.status_code)

        async def run_attempt() -> AttemptResult:
            return await self._executor.execute(request)

        return await self._retry.execute(
            run_attempt,
            attempts=max_retries,
            retry_on_result=lambda attempt: not attempt.is_success_or_redirect(),
            on_exhausted=lambda last: self._exhausted(request, last),
            before_attempt=lambda number: self._before_retry(request, number),
            wait_initial=self._wait_initial,
            wait_max=self._wait_max,
        )

    def _before_retry(self, request: OutboundRequest, attempt_number: int) -> None:
        logger.warning(
            "[retry] retrying the request for endpoint url=%s attempt=%s", request.uri, attempt_number
        )
        notify(
            self._diagnostics,
            DiagnosticEvent.retry,
            request.uri,
            "Retrying the request for external api.",
            attempt=attempt_number,
        )

    def _exhausted(self, request: OutboundRequest, last: AttemptResult) -> AttemptResult:
        logger.error(
            "[retry] retries exhausted url=%s last_status=%s last_outcome=%s",
            request.uri,
            last.status_code,
            last.outcome,
        )
        return AttemptResult.failed(last.status_code)
