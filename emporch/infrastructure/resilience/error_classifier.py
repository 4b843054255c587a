"""Maps upstream transport failures onto the orchestration error taxonomy.

Pure and stateless: only the status code decides the kind; the body is
carried along for diagnostics but never inspected.
"""

from typing import Optional

from emporch.domain.errors import (
    ERRORS_BY_KIND,
    ErrorKind,
    OrchestrationError,
    UpstreamTransportError,
)


def classify_status(status_code: Optional[int]) -> ErrorKind:
    """Returns the error kind for an upstream HTTP status.

    429 -> RateLimited, 404 -> NotFound, 400 -> InvalidInput,
    5xx -> UpstreamUnavailable, anything else (including no status) -> Unknown.
    """
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code == 400:
        return ErrorKind.INVALID_INPUT
    if status_code is not None and 500 <= status_code <= 599:
        return ErrorKind.UPSTREAM_UNAVAILABLE
    return ErrorKind.UNKNOWN


def to_orchestration_error(failure: UpstreamTransportError, context: Optional[str] = None) -> OrchestrationError:
    """Builds the orchestration exception matching a transport failure.

    Args:
        failure: The transport failure to classify.
        context: Optional description of the operation, used as message prefix.
    """
    kind = classify_status(failure.status_code)
    error_cls = ERRORS_BY_KIND[kind]
    message = f"{kind.value}: upstream returned status {failure.status_code}"
    if context:
        message = f"{context}: {message}"
    return error_cls(message, status_code=failure.status_code, body=failure.body)
