"""Delete-by-id on top of an upstream that only deletes by name.

The sequence is resolve (id -> record), delete (by the resolved name) and
reconcile. Between the first two steps another client may delete the same
record; the delete step then reports NotFound, which is recorded as a
DeletionOutcome.RACE and reconciled into success because the record is
gone either way.
"""

import logging
from typing import Awaitable, Callable

from emporch.domain.errors import EmployeeNotFoundError, UnknownUpstreamError
from emporch.domain.interfaces.employee_gateway import EmployeeGateway
from emporch.domain.models.common import EmployeeId, EmployeeName
from emporch.domain.models.employee import (
    DeletionOutcome,
    DeletionRequest,
    DeletionResult,
    EmployeeRecord,
)
from emporch.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)

Resolver = Callable[[EmployeeId], Awaitable[EmployeeRecord]]


class DeleteOrchestrator:
    """Race-tolerant resolve-then-delete state machine."""

    def __init__(self, gateway: EmployeeGateway, api_retry_service: ApiRetryService, resolver: Resolver):
        """
        Args:
            gateway: Upstream gateway used for the delete-by-name call.
            api_retry_service: Retry policy wrapping the delete call.
            resolver: Fetches a record by id, raising EmployeeNotFoundError if absent.
        """
        self.gateway = gateway
        self.api_retry_service = api_retry_service
        self.resolver = resolver

    async def delete(self, request: DeletionRequest) -> EmployeeName:
        """Deletes the employee identified by `request.id`.

        Returns:
            The display name of the deleted employee, as resolved before deletion.

        Raises:
            EmployeeNotFoundError: If no employee has the given id.
            OrchestrationError: For any other failure of either step.
        """
        # 1. resolve
        record = await self.resolver(request.id)
        if not record.name:
            raise UnknownUpstreamError(f"Employee with ID {request.id} has no name and cannot be deleted")
        name = EmployeeName(record.name)
        if request.name and request.name != name:
            logger.warning(f"Delete request name hint '{request.name}' does not match resolved name '{name}'")

        # 2. delete
        result = await self._delete_by_name(request.id, name)

        # 3. reconcile
        if result.outcome is DeletionOutcome.RACE:
            logger.warning(f"Employee {name} was deleted by another request during deletion")
        else:
            logger.info(f"Deleted employee {name} (ID {request.id})")
        return result.name

    async def _delete_by_name(self, employee_id: EmployeeId, name: EmployeeName) -> DeletionResult:
        try:
            await self.api_retry_service.execute_with_retry(
                self.gateway.delete_by_name,
                name,
                endpoint_name="delete_by_name",
                error_context=f"Failed to delete employee with ID {employee_id}",
            )
        except EmployeeNotFoundError:
            return DeletionResult(name=name, outcome=DeletionOutcome.RACE)
        return DeletionResult(name=name, outcome=DeletionOutcome.DELETED)
