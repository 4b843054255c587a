"""Interface for the upstream employee service.

Defines the contract for the four upstream endpoints. Implementations
perform exactly one round trip per call and carry no retry or
interpretation logic.
"""

import abc
from typing import Any, Dict

from emporch.domain.models.common import EmployeeId, EmployeeName
from emporch.domain.models.employee import UpstreamEnvelope


class EmployeeGateway(abc.ABC):
    """Abstract Base Class for upstream employee service access."""

    @abc.abstractmethod
    async def read_all(self) -> UpstreamEnvelope:
        """Fetches every employee.

        Returns:
            An envelope whose data is a list of employee objects (or None).

        Raises:
            UpstreamTransportError: On any non-2xx status or network failure.
        """
        pass

    @abc.abstractmethod
    async def read_one(self, employee_id: EmployeeId) -> UpstreamEnvelope:
        """Fetches a single employee by its upstream identifier.

        Raises:
            UpstreamTransportError: On any non-2xx status or network failure.
        """
        pass

    @abc.abstractmethod
    async def create(self, payload: Dict[str, Any]) -> UpstreamEnvelope:
        """Creates an employee from a wire-format payload.

        Raises:
            UpstreamTransportError: On any non-2xx status or network failure.
        """
        pass

    @abc.abstractmethod
    async def delete_by_name(self, name: EmployeeName) -> UpstreamEnvelope:
        """Deletes an employee. The upstream keys deletion by display name.

        Raises:
            UpstreamTransportError: On any non-2xx status or network failure.
        """
        pass

    async def aclose(self) -> None:
        """Releases the underlying connection, if any."""
        pass
