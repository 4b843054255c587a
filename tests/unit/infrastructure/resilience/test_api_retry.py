import asyncio
import logging

import pytest
from unittest.mock import AsyncMock

from emporch.domain.errors import (
    EmployeeNotFoundError,
    InvalidInputError,
    RateLimitedError,
    UnknownUpstreamError,
    UpstreamTransportError,
    UpstreamUnavailableError,
)
from emporch.domain.events.api_events import (
    ApiCallFailed,
    ApiCallInitiated,
    ApiCallSucceeded,
    RetryScheduled,
)
from emporch.infrastructure.resilience.api_retry import ApiRetryService


def rate_limited():
    return UpstreamTransportError(429, "Too Many Requests")


@pytest.mark.asyncio
async def test_success_on_first_attempt(retry_service: ApiRetryService, no_sleep: AsyncMock):
    func = AsyncMock(return_value="ok")

    result = await retry_service.execute_with_retry(func, "arg", endpoint_name="read_all", flag=True)

    assert result == "ok"
    func.assert_awaited_once_with("arg", flag=True)
    no_sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_three_rate_limits_then_success_takes_four_attempts(retry_service, no_sleep):
    func = AsyncMock(side_effect=[rate_limited(), rate_limited(), rate_limited(), "ok"])

    result = await retry_service.execute_with_retry(func, endpoint_name="read_all")

    assert result == "ok"
    assert func.await_count == 4
    assert [c.args[0] for c in no_sleep.await_args_list] == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_five_rate_limits_surface_rate_limited_after_five_attempts(retry_service, no_sleep):
    func = AsyncMock(side_effect=[rate_limited() for _ in range(5)])

    with pytest.raises(RateLimitedError) as exc_info:
        await retry_service.execute_with_retry(func, endpoint_name="read_all", error_context="Listing")

    assert func.await_count == 5
    assert no_sleep.await_count == 4
    assert exc_info.value.status_code == 429
    assert exc_info.value.message.startswith("Listing: RateLimited")
    assert isinstance(exc_info.value.__cause__, UpstreamTransportError)


@pytest.mark.parametrize(
    "status_code, expected_error",
    [
        (404, EmployeeNotFoundError),
        (500, UpstreamUnavailableError),
        (503, UpstreamUnavailableError),
        (None, UnknownUpstreamError),
        (418, UnknownUpstreamError),
    ],
)
@pytest.mark.asyncio
async def test_non_rate_limit_failures_are_not_retried(retry_service, no_sleep, status_code, expected_error):
    func = AsyncMock(side_effect=UpstreamTransportError(status_code, "boom"))

    with pytest.raises(expected_error) as exc_info:
        await retry_service.execute_with_retry(func, endpoint_name="read_one")

    func.assert_awaited_once()
    no_sleep.assert_not_awaited()
    assert exc_info.value.status_code == status_code
    assert exc_info.value.body == "boom"


@pytest.mark.asyncio
async def test_rate_limit_then_other_failure_propagates_other_failure(retry_service):
    func = AsyncMock(side_effect=[rate_limited(), UpstreamTransportError(400, "bad")])

    with pytest.raises(InvalidInputError):
        await retry_service.execute_with_retry(func, endpoint_name="create")

    assert func.await_count == 2


@pytest.mark.asyncio
async def test_unrelated_exceptions_propagate_untouched(retry_service):
    func = AsyncMock(side_effect=KeyError("surprise"))

    with pytest.raises(KeyError):
        await retry_service.execute_with_retry(func, endpoint_name="read_all")
    func.assert_awaited_once()


def test_backoff_schedule_is_exponential_and_capped():
    service = ApiRetryService(max_retries=10, initial_backoff_s=1.0, backoff_factor=2.0, max_backoff_s=120.0)

    assert service.backoff_schedule() == [1.0, 2.0, 4.0, 8.0, 16.0, 32.0, 64.0, 120.0, 120.0, 120.0]


def test_default_policy_matches_documented_values():
    service = ApiRetryService()

    assert service.max_retries == 4
    assert service.backoff_schedule() == [1.0, 2.0, 4.0, 8.0]
    assert service.max_backoff_s == 120.0


def test_from_policy():
    service = ApiRetryService.from_policy(
        {"max_retries": 2, "initial_delay": 0.5, "factor": 3.0, "max_delay": 1.0}
    )

    assert service.max_retries == 2
    assert service.backoff_schedule() == [0.5, 1.0]


def test_negative_max_retries_rejected():
    with pytest.raises(ValueError):
        ApiRetryService(max_retries=-1)


def test_initialization_logs_backoff_schedule(caplog):
    with caplog.at_level(logging.INFO, logger="emporch.infrastructure.resilience.api_retry"):
        ApiRetryService(max_retries=3, initial_backoff_s=1.0, backoff_factor=2.0)

    assert "backoff schedule=[1.0, 2.0, 4.0]s" in caplog.text


@pytest.mark.asyncio
async def test_events_emitted_for_retry_and_success(event_retry_service, recorded_events):
    func = AsyncMock(side_effect=[rate_limited(), "ok"])

    await event_retry_service.execute_with_retry(func, endpoint_name="read_all")

    assert [type(e) for e in recorded_events] == [
        ApiCallInitiated,
        RetryScheduled,
        ApiCallInitiated,
        ApiCallSucceeded,
    ]
    assert recorded_events[1].delay_seconds == 1.0
    assert recorded_events[-1].attempts == 2
    assert recorded_events[-1].endpoint == "read_all"


@pytest.mark.asyncio
async def test_failed_event_carries_error_kind(event_retry_service, recorded_events):
    func = AsyncMock(side_effect=UpstreamTransportError(502, "bad gateway"))

    with pytest.raises(UpstreamUnavailableError):
        await event_retry_service.execute_with_retry(func, endpoint_name="read_one")

    failed = recorded_events[-1]
    assert isinstance(failed, ApiCallFailed)
    assert failed.error_kind == "UpstreamUnavailable"
    assert failed.status_code == 502
    assert failed.attempts == 1


@pytest.mark.asyncio
async def test_cancellation_aborts_pending_backoff():
    func = AsyncMock(side_effect=rate_limited())
    service = ApiRetryService(initial_backoff_s=60.0)

    task = asyncio.create_task(service.execute_with_retry(func, endpoint_name="read_all"))
    for _ in range(5):
        await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    func.assert_awaited_once()
