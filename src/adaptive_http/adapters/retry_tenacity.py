from typing import Any, Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
    wait_none,
)

class TenacityRetryAdapter:
    """Tenacity-based retry adapter implementing RetryPort.

    Retries on the *result* of an async callable rather than on exceptions.
    Backoff is disabled by default (attempts are sent back-to-back); a
    positive `wait_initial` enables exponential backoff capped at `wait_max`.
    Call-time kwargs override the defaults.
    """

    def __init__(self, wait_initial: float = 0.0, wait_max: float = 0.0) -> None:
        self.wait_initial = wait_initial
        self.wait_max = wait_max

    async def execute(
        self,
        func: Callable[[], Awaitable[Any]],
        *,
        attempts: int,
        retry_on_result: Callable[[Any], bool],
        on_exhausted: Optional[Callable[[Any], Any]] = None,
        before_attempt: Optional[Callable[[int], None]] = None,
        wait_initial: Optional[float] = None,
        wait_max: Optional[float] = None,
    ) -> Any:
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")

        wait_initial = self.wait_initial if wait_initial is None else wait_initial
        wait_max = self.wait_max if wait_max is None else wait_max

        def _before(retry_state: RetryCallState) -> None:
            if before_attempt is not None:
                before_attempt(retry_state.attempt_number)

        def _exhausted(retry_state: RetryCallState) -> Any:
            last = retry_state.outcome.result()
            return on_exhausted(last) if on_exhausted is not None else last

        async def _attempt() -> Any:
            # AsyncRetrying awaits only coroutine functions
            return await func()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=self._wait_strategy(wait_initial, wait_max),
            retry=retry_if_result(retry_on_result),
            before=_before,
            retry_error_callback=_exhausted,
        )
        return await retrying(_attempt)

    @staticmethod
    def _wait_strategy(wait_initial: float, wait_max: float):
        if wait_initial <= 0:
            return wait_none()
        return wait_exponential(multiplier=wait_initial, max=max(wait_max, wait_initial))
