"""Application service exposing the employee operations.

Single entry point for callers (the command handler, or any other entry
layer). Every operation goes through the retry service to the upstream
gateway; search and aggregates are composed in memory over list-all.
The service keeps no state between calls apart from the gateway.
"""

import logging
from typing import List

from emporch.core.services import aggregate_engine
from emporch.core.services.delete_orchestrator import DeleteOrchestrator
from emporch.domain.errors import EmployeeNotFoundError, InvalidInputError, UnknownUpstreamError
from emporch.domain.interfaces.employee_gateway import EmployeeGateway
from emporch.domain.models.common import (
    MAX_RECORDS,
    TOP_EARNERS_LIMIT,
    EmployeeId,
    EmployeeName,
)
from emporch.domain.models.employee import CreationInput, DeletionRequest, EmployeeRecord
from emporch.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)


class EmployeeService:
    """Orchestrates upstream calls for the employee use cases."""

    def __init__(
        self,
        gateway: EmployeeGateway,
        api_retry_service: ApiRetryService,
        max_records: int = MAX_RECORDS,
    ):
        """Initializes the EmployeeService.

        Args:
            gateway: The upstream employee service gateway.
            api_retry_service: Retry policy applied to every upstream call.
            max_records: Safety ceiling for a single list-all result.
        """
        self.gateway = gateway
        self.api_retry_service = api_retry_service
        self.max_records = max_records
        self.delete_orchestrator = DeleteOrchestrator(
            gateway=gateway,
            api_retry_service=api_retry_service,
            resolver=self.get_by_id,
        )

    async def list_all(self) -> List[EmployeeRecord]:
        """Fetches every employee, truncated to the safety ceiling."""
        logger.info("Fetching all employees from upstream")
        envelope = await self.api_retry_service.execute_with_retry(
            self.gateway.read_all,
            endpoint_name="read_all",
            error_context="Failed to fetch all employees",
        )
        records = [EmployeeRecord.from_wire(item) for item in envelope.records()]
        return aggregate_engine.truncate_records(records, self.max_records)

    async def search(self, substring: str) -> List[EmployeeRecord]:
        logger.info(f"Fetching employees with the name: {substring}")
        employees = await self.list_all()
        return aggregate_engine.search_by_name(employees, substring)

    async def get_by_id(self, employee_id: EmployeeId) -> EmployeeRecord:
        """Fetches one employee.

        Raises:
            EmployeeNotFoundError: If the upstream has no employee with this id.
        """
        logger.info(f"Fetching employee with ID: {employee_id}")
        not_found_message = f"Employee with ID {employee_id} not found"
        envelope = await self.api_retry_service.execute_with_retry(
            self.gateway.read_one,
            employee_id,
            endpoint_name="read_one",
            error_context=f"Failed to fetch employee with ID {employee_id}",
        )
        records = envelope.records()
        if not records:
            raise EmployeeNotFoundError(not_found_message)
        return EmployeeRecord.from_wire(records[0])

    async def max_salary(self) -> int:
        logger.info("Fetching highest salary of employees")
        employees = await self.list_all()
        return aggregate_engine.max_salary(employees)

    async def top10_names(self) -> List[EmployeeName]:
        logger.info("Fetching top 10 highest earning employee names")
        employees = await self.list_all()
        return aggregate_engine.top_earner_names(employees, TOP_EARNERS_LIMIT)

    async def create(self, employee_input: CreationInput) -> EmployeeRecord:
        """Creates an employee upstream and returns the stored record.

        Raises:
            InvalidInputError: If no payload can be built from the input (e.g. a blank name).
        """
        logger.info(f"Creating new employee: {employee_input}")
        try:
            payload = employee_input.to_payload()
        except ValueError as e:
            raise InvalidInputError(f"Failed to create employee: {e}") from e

        envelope = await self.api_retry_service.execute_with_retry(
            self.gateway.create,
            payload,
            endpoint_name="create",
            error_context="Failed to create employee",
        )
        if envelope.is_empty:
            raise UnknownUpstreamError("Upstream returned no employee for the create request")
        records = envelope.records()
        if not records:
            raise UnknownUpstreamError("Upstream returned a malformed employee for the create request")
        return EmployeeRecord.from_wire(records[0])

    async def delete(self, request: DeletionRequest) -> EmployeeName:
        logger.info(f"Deleting employee: {request}")
        return await self.delete_orchestrator.delete(request)

    async def delete_by_id(self, employee_id: EmployeeId) -> EmployeeName:
        return await self.delete(DeletionRequest(id=employee_id))
