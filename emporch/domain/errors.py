"""Error taxonomy for the orchestration layer.

Upstream transport failures are raised as UpstreamTransportError and are
always converted into one of the OrchestrationError subclasses before they
reach a caller of the core services.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """The fixed set of failure kinds a caller can observe."""
    RATE_LIMITED = "RateLimited"
    NOT_FOUND = "NotFound"
    INVALID_INPUT = "InvalidInput"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"
    NO_EMPLOYEES = "NoEmployees"
    UNKNOWN = "Unknown"


class UpstreamTransportError(Exception):
    """Raised by the transport when an upstream call does not yield an envelope.

    Attributes:
        status_code: HTTP status of the response, or None when no response
            was received (connection error, timeout).
        body: Raw response body, or a description of the network failure.
    """

    def __init__(self, status_code: Optional[int], body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Upstream call failed (status={status_code}): {body[:200]}")


class OrchestrationError(Exception):
    """Base class for every failure surfaced by the orchestration core."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class RateLimitedError(OrchestrationError):
    """Upstream kept answering 429 after all retries were spent."""
    kind = ErrorKind.RATE_LIMITED


class EmployeeNotFoundError(OrchestrationError):
    kind = ErrorKind.NOT_FOUND


class InvalidInputError(OrchestrationError):
    kind = ErrorKind.INVALID_INPUT


class UpstreamUnavailableError(OrchestrationError):
    """Upstream answered with a 5xx status."""
    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class NoEmployeesError(OrchestrationError):
    """An aggregate was requested over an empty employee collection."""
    kind = ErrorKind.NO_EMPLOYEES


class UnknownUpstreamError(OrchestrationError):
    kind = ErrorKind.UNKNOWN


ERRORS_BY_KIND = {
    ErrorKind.RATE_LIMITED: RateLimitedError,
    ErrorKind.NOT_FOUND: EmployeeNotFoundError,
    ErrorKind.INVALID_INPUT: InvalidInputError,
    ErrorKind.UPSTREAM_UNAVAILABLE: UpstreamUnavailableError,
    ErrorKind.NO_EMPLOYEES: NoEmployeesError,
    ErrorKind.UNKNOWN: UnknownUpstreamError,
}
