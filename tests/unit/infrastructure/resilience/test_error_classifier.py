import pytest

from emporch.domain.errors import (
    EmployeeNotFoundError,
    ErrorKind,
    InvalidInputError,
    RateLimitedError,
    UnknownUpstreamError,
    UpstreamTransportError,
    UpstreamUnavailableError,
)
from emporch.infrastructure.resilience.error_classifier import classify_status, to_orchestration_error


@pytest.mark.parametrize(
    "status_code, expected_kind",
    [
        (429, ErrorKind.RATE_LIMITED),
        (404, ErrorKind.NOT_FOUND),
        (400, ErrorKind.INVALID_INPUT),
        (500, ErrorKind.UPSTREAM_UNAVAILABLE),
        (502, ErrorKind.UPSTREAM_UNAVAILABLE),
        (599, ErrorKind.UPSTREAM_UNAVAILABLE),
        (401, ErrorKind.UNKNOWN),
        (409, ErrorKind.UNKNOWN),
        (200, ErrorKind.UNKNOWN),
        (600, ErrorKind.UNKNOWN),
        (None, ErrorKind.UNKNOWN),
    ],
)
def test_classify_status(status_code, expected_kind):
    assert classify_status(status_code) is expected_kind


@pytest.mark.parametrize(
    "status_code, expected_error",
    [
        (429, RateLimitedError),
        (404, EmployeeNotFoundError),
        (400, InvalidInputError),
        (503, UpstreamUnavailableError),
        (None, UnknownUpstreamError),
    ],
)
def test_to_orchestration_error_builds_matching_exception(status_code, expected_error):
    error = to_orchestration_error(UpstreamTransportError(status_code, "raw body"))

    assert type(error) is expected_error
    assert error.status_code == status_code
    assert error.body == "raw body"


def test_context_prefixes_message():
    error = to_orchestration_error(UpstreamTransportError(404, ""), "Failed to fetch employee with ID 7")

    assert error.message == "Failed to fetch employee with ID 7: NotFound: upstream returned status 404"
