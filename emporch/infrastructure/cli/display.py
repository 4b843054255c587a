import json
import logging
from typing import Any, Optional, Sequence

from rich.box import HEAVY, ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from emporch.domain.interfaces.user_interface import UserInterface
from emporch.domain.models.employee import EmployeeRecord

logger = logging.getLogger(__name__)


def _cell(value: Any) -> str:
    return "-" if value is None else str(value)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_employees(self, employees: Sequence[EmployeeRecord], **kwargs: Any) -> None:
        """Renders employees as a table, or as raw JSON when as_json=True.

        Args:
            employees: Records to display, in order.
            **kwargs: Additional arguments including:
                - title: Table title (default: "Employees")
                - as_json: Print the upstream wire format instead of a table
        """
        if kwargs.get("as_json"):
            self.console.print_json(json.dumps([e.to_wire() for e in employees]))
            return

        title = kwargs.get("title", "Employees")
        logger.debug(f"display_employees called: title={title}, count={len(employees)}")

        table = Table(title=f"{title} ({len(employees)})", box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Name", style="bold")
        table.add_column("Title")
        table.add_column("Salary", justify="right", style="green")
        table.add_column("Age", justify="right")
        table.add_column("Email", style="cyan")
        for employee in employees:
            table.add_row(
                _cell(employee.id),
                _cell(employee.name),
                _cell(employee.title),
                _cell(f"{employee.salary:,}" if employee.salary is not None else None),
                _cell(employee.age),
                _cell(employee.email),
            )
        self.console.print(table)

    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Displays a single result value, or a numbered list for sequences."""
        title = kwargs.get("title")
        if isinstance(output, (list, tuple)):
            body = Text("\n".join(f"{i}. {item}" for i, item in enumerate(output, start=1)) or "(none)")
        else:
            body = Text(str(output), style="bold")
        if title:
            self.console.print(Panel(body, title=f"[bold]{title}[/bold]", border_style="blue", box=ROUNDED, padding=(0, 1)))
        else:
            self.console.print(body)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title=f"[bold red]{kwargs.get('title', 'Error')}[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.console.print(Text(info_message, style="cyan"))

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        self.console.print(Text(f"Warning: {warning_message}", style="yellow"))
