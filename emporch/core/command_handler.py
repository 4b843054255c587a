"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), delegates the work
to the EmployeeService and renders results through the UserInterface.
This is the only layer that catches orchestration errors; it turns each
error kind into a user-facing message and reports success as a bool.
"""

import logging
from typing import Optional

from emporch.core.services.employee_service import EmployeeService
from emporch.domain.errors import ErrorKind, OrchestrationError
from emporch.domain.interfaces.user_interface import UserInterface
from emporch.domain.models.common import EmployeeId, EmployeeName, SearchText
from emporch.domain.models.employee import CreationInput, DeletionRequest

logger = logging.getLogger(__name__)

USER_MESSAGES = {
    ErrorKind.RATE_LIMITED: "Service is rate limited, please try again later.",
    ErrorKind.UPSTREAM_UNAVAILABLE: "Employee service is temporarily unavailable.",
    ErrorKind.INVALID_INPUT: "Invalid employee data provided.",
    ErrorKind.NO_EMPLOYEES: "No employees found.",
}


def user_message(error: OrchestrationError) -> str:
    """Message shown to the user for an orchestration error."""
    if error.kind is ErrorKind.NOT_FOUND:
        return error.message
    if error.kind is ErrorKind.UNKNOWN:
        return f"Unexpected error: {error.message}"
    return USER_MESSAGES[error.kind]


class CommandHandler:
    """Handles incoming commands and delegates to the employee service."""

    def __init__(self, employee_service: EmployeeService, ui: UserInterface):
        self.employee_service = employee_service
        self.ui = ui

    async def handle_list(self, as_json: bool = False) -> bool:
        logger.info("Handling 'list' command")
        try:
            employees = await self.employee_service.list_all()
        except Exception as e:
            return self._report_failure("List employees", e)
        self.ui.display_employees(employees, title="Employees", as_json=as_json)
        return True

    async def handle_search(self, text: str, as_json: bool = False) -> bool:
        logger.info(f"Handling 'search' command with text: {text}")
        try:
            employees = await self.employee_service.search(SearchText(text))
        except Exception as e:
            return self._report_failure("Search", e)
        self.ui.display_employees(employees, title=f"Employees matching '{text}'", as_json=as_json)
        return True

    async def handle_get(self, employee_id: str, as_json: bool = False) -> bool:
        logger.info(f"Handling 'get' command for ID: {employee_id}")
        try:
            employee = await self.employee_service.get_by_id(EmployeeId(employee_id))
        except Exception as e:
            return self._report_failure("Get employee", e)
        self.ui.display_employees([employee], title="Employee", as_json=as_json)
        return True

    async def handle_max_salary(self) -> bool:
        logger.info("Handling 'max-salary' command")
        try:
            salary = await self.employee_service.max_salary()
        except Exception as e:
            return self._report_failure("Highest salary", e)
        self.ui.display_output(salary, title="Highest salary")
        return True

    async def handle_top_earners(self) -> bool:
        logger.info("Handling 'top-earners' command")
        try:
            names = await self.employee_service.top10_names()
        except Exception as e:
            return self._report_failure("Top earners", e)
        self.ui.display_output(names, title="Top 10 highest earning employees")
        return True

    async def handle_create(self, employee_input: CreationInput, as_json: bool = False) -> bool:
        logger.info(f"Handling 'create' command for: {employee_input.name}")
        try:
            employee = await self.employee_service.create(employee_input)
        except Exception as e:
            return self._report_failure("Create employee", e)
        self.ui.display_info(f"Employee '{employee.name}' created with ID {employee.id}.")
        self.ui.display_employees([employee], title="Created", as_json=as_json)
        return True

    async def handle_delete(self, employee_id: str, name_hint: Optional[str] = None) -> bool:
        logger.info(f"Handling 'delete' command for ID: {employee_id}")
        request = DeletionRequest(
            id=EmployeeId(employee_id),
            name=EmployeeName(name_hint) if name_hint else None,
        )
        try:
            deleted_name = await self.employee_service.delete(request)
        except Exception as e:
            return self._report_failure("Delete employee", e)
        if request.name and request.name != deleted_name:
            self.ui.display_warning(f"Employee {employee_id} is '{deleted_name}', not '{request.name}'")
        self.ui.display_output(deleted_name, title="Deleted")
        return True

    def _report_failure(self, action: str, error: Exception) -> bool:
        if isinstance(error, OrchestrationError):
            logger.error(f"{action} failed: {error.kind.value}: {error.message}")
            self.ui.display_error(user_message(error), title=f"{action} failed")
        else:
            logger.error(f"{action} failed unexpectedly: {error}", exc_info=True)
            self.ui.display_error(f"{action} failed: {error}")
        return False
