"""Service for executing upstream calls with automatic retries.

Implements capped exponential backoff for rate-limited (429) responses.
Every other failure is classified and propagated on the first attempt.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Coroutine, List, Optional

from emporch.domain.errors import ErrorKind, OrchestrationError, UpstreamTransportError
from emporch.domain.events.api_events import (
    ApiCallFailed,
    ApiCallInitiated,
    ApiCallSucceeded,
    DomainEvent,
    RetryScheduled,
)
from emporch.domain.models.common import BackoffPolicy
from emporch.infrastructure.resilience.error_classifier import to_orchestration_error

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 4
DEFAULT_INITIAL_BACKOFF_S = 1.0
DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_MAX_BACKOFF_S = 120.0

EventListener = Callable[[DomainEvent], None]


def _log_event(event: DomainEvent) -> None:
    logger.debug(f"EVENT: {event}")


class ApiRetryService:
    """Handles upstream call execution with rate-limit retries."""

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_backoff_s: float = DEFAULT_INITIAL_BACKOFF_S,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        max_backoff_s: float = DEFAULT_MAX_BACKOFF_S,
        event_listener: Optional[EventListener] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initializes the ApiRetryService.

        Args:
            max_retries: Additional attempts after the first rate-limited one.
            initial_backoff_s: Delay in seconds before the first retry.
            backoff_factor: Multiplier applied to the delay after each retry.
            max_backoff_s: Upper bound for any single delay.
            event_listener: Receives domain events; defaults to debug logging.
            sleep: Coroutine function used to wait between attempts.
        """
        if max_retries < 0:
            raise ValueError("max_retries must not be negative")
        self.max_retries = max_retries
        self.initial_backoff_s = initial_backoff_s
        self.backoff_factor = backoff_factor
        self.max_backoff_s = max_backoff_s
        self.event_listener = event_listener or _log_event
        self._sleep = sleep

        logger.info(
            f"ApiRetryService initialized: max_retries={max_retries}, "
            f"backoff schedule={self.backoff_schedule()}s"
        )

    @classmethod
    def from_policy(cls, policy: BackoffPolicy, **kwargs: Any) -> "ApiRetryService":
        return cls(
            max_retries=policy["max_retries"],
            initial_backoff_s=policy["initial_delay"],
            backoff_factor=policy["factor"],
            max_backoff_s=policy["max_delay"],
            **kwargs,
        )

    def delay_for_retry(self, retry_number: int) -> float:
        """Delay before the given retry (1-based), capped at max_backoff_s."""
        delay = self.initial_backoff_s * (self.backoff_factor ** (retry_number - 1))
        return min(delay, self.max_backoff_s)

    def backoff_schedule(self) -> List[float]:
        return [self.delay_for_retry(n) for n in range(1, self.max_retries + 1)]

    async def execute_with_retry(
        self,
        func: Callable[..., Coroutine[Any, Any, Any]],
        *args: Any,
        endpoint_name: Optional[str] = None,
        error_context: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Executes an async upstream call, retrying while it is rate limited.

        Args:
            func: The async function (upstream call) to execute.
            *args: Positional arguments for the function.
            endpoint_name: Name used in logs and events (defaults to func name).
            error_context: Prefix for the message of the raised error.
            **kwargs: Keyword arguments for the function.

        Returns:
            The result of the function call.

        Raises:
            RateLimitedError: If every attempt was rate limited.
            OrchestrationError: The classified error for any other failure.
        """
        effective_endpoint = endpoint_name or getattr(func, "__name__", "upstream_call")
        total_attempts = self.max_retries + 1

        for attempt in range(1, total_attempts + 1):
            self.event_listener(ApiCallInitiated(endpoint=effective_endpoint, attempt_number=attempt))
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except UpstreamTransportError as e:
                error = to_orchestration_error(e, error_context)
                if error.kind is not ErrorKind.RATE_LIMITED:
                    logger.warning(
                        f"Non-retryable error calling {effective_endpoint} on attempt {attempt}: "
                        f"{error.kind.value} (status={e.status_code})"
                    )
                    self._fail(effective_endpoint, error, attempt)
                    raise error from e

                if attempt == total_attempts:
                    logger.error(
                        f"Max retries ({self.max_retries}) reached for {effective_endpoint}. "
                        f"Still rate limited after {attempt} attempts."
                    )
                    self._fail(effective_endpoint, error, attempt)
                    raise error from e

                delay = self.delay_for_retry(attempt)
                logger.warning(
                    f"Rate limited calling {effective_endpoint} on attempt {attempt}/{total_attempts}. "
                    f"Waiting {delay:.2f}s..."
                )
                self.event_listener(
                    RetryScheduled(endpoint=effective_endpoint, attempt_number=attempt, delay_seconds=delay)
                )
                await self._sleep(delay)
                continue

            latency_ms = (time.perf_counter() - start_time) * 1000
            self.event_listener(
                ApiCallSucceeded(endpoint=effective_endpoint, latency_ms=latency_ms, attempts=attempt)
            )
            return result

    def _fail(self, endpoint: str, error: OrchestrationError, attempts: int) -> None:
        self.event_listener(
            ApiCallFailed(
                endpoint=endpoint,
                error_kind=error.kind.value,
                error_message=error.message,
                attempts=attempts,
                status_code=error.status_code,
            )
        )
