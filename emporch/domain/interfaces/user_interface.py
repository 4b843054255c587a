"""Interface for interacting with the user (output only).

Defines the contract for displaying employees, aggregates, errors,
warnings and informational messages, allowing different UI
implementations (e.g., rich console, plain logs).
"""

import abc
from typing import Any, Sequence

from emporch.domain.models.employee import EmployeeRecord


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_employees(self, employees: Sequence[EmployeeRecord], **kwargs: Any) -> None:
        """Displays a collection of employees.

        Args:
            employees: The records to render, in order.
            **kwargs: Additional arguments for formatting (e.g., title, as_json).
        """
        pass

    @abc.abstractmethod
    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Displays a plain result value (a salary, a name, a list of names)."""
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        pass
