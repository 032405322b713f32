from typing import Protocol, Any, Awaitable, Callable, Optional

class RetryPort(Protocol):
    """Abstract result-based retry interface for async operations.

    The callable is invoked until `retry_on_result` returns False for its
    result or `attempts` invocations have been made. The contract keeps the
    core decoupled from a specific library (tenacity/backoff).
    """
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
    ) -> Any:  # pragma: no cover - protocol
        """Execute an async callable with retry-on-result semantics.

        Args:
            func: Async callable returning a result; it must not raise.
            attempts: Maximum number of invocations (>= 1).
            retry_on_result: Predicate deciding whether a result warrants another attempt.
            on_exhausted: Maps the last result when every attempt wanted a retry.
                When omitted the last result is returned unchanged.
            before_attempt: Called with the 1-based attempt number before each invocation.
            wait_initial/wait_max: Optional backoff overrides in seconds.
        Returns:
            The first result that does not warrant a retry, or the mapped last result.
        """
        ...
