"""Main entry point for the emporch application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
import sys
from typing import Annotated, Any, Coroutine, Dict, Optional

import typer

# --- Core Layer ---
from emporch.core.command_handler import CommandHandler
from emporch.core.services.employee_service import EmployeeService

# --- Domain Layer ---
from emporch.domain.models.employee import CreationInput

# --- Infrastructure Layer ---
from emporch.infrastructure.cli.display import ConsoleDisplay
from emporch.infrastructure.config.settings import (
    get_backoff_policy,
    get_config,
    get_max_records,
    get_upstream_base_url,
    get_upstream_timeout,
    load_configuration,
    set_config,
)
from emporch.infrastructure.http.upstream_client import UpstreamClient
from emporch.infrastructure.monitoring.logger_setup import parse_log_level, setup_logging
from emporch.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def create_dependencies() -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root. The upstream client is the only
    long-lived connection and is handed to the service explicitly.
    """
    # 1. Load Configuration First, then logging from it
    load_configuration()
    setup_logging(
        log_level=parse_log_level(get_config('logging.level')),
        log_format=get_config('logging.format'),
        log_file=get_config('logging.file'),
        max_bytes=int(get_config('logging.file_max_bytes')),
        backup_count=int(get_config('logging.file_backup_count')),
    )
    logger.info("Initializing application dependencies...")

    dependencies: Dict[str, Any] = {}
    dependencies['ui'] = ConsoleDisplay()

    # 2. Infrastructure adapters
    dependencies['upstream_client'] = UpstreamClient(
        base_url=get_upstream_base_url(),
        timeout_s=get_upstream_timeout(),
    )
    dependencies['api_retry_service'] = ApiRetryService.from_policy(get_backoff_policy())

    # 3. Core services
    dependencies['employee_service'] = EmployeeService(
        gateway=dependencies['upstream_client'],
        api_retry_service=dependencies['api_retry_service'],
        max_records=get_max_records(),
    )
    dependencies['command_handler'] = CommandHandler(
        employee_service=dependencies['employee_service'],
        ui=dependencies['ui'],
    )
    logger.info("All dependencies initialized successfully.")
    return dependencies


_dependencies: Optional[Dict[str, Any]] = None


def get_dependencies() -> Dict[str, Any]:
    global _dependencies
    if _dependencies is None:
        try:
            _dependencies = create_dependencies()
        except Exception as e:
            logger.error(f"Fatal Error during application initialization: {e}", exc_info=True)
            print(f"FATAL ERROR during initialization: {e}", file=sys.stderr)
            raise typer.Exit(code=1)
    return _dependencies


def reset_dependencies() -> None:
    global _dependencies
    _dependencies = None


# --- Typer App Definition ---
app = typer.Typer(
    name="emporch",
    help="emporch: resilient employee operations over the upstream employee service.",
    add_completion=False,
)

# --- Helper for Running Async Commands ---
def run_async(coro: Coroutine[Any, Any, bool]) -> bool:
    """Runs a command coroutine on a fresh event loop, then closes the upstream connection."""
    upstream_client: UpstreamClient = get_dependencies()['upstream_client']

    async def _run() -> bool:
        try:
            return await coro
        finally:
            await upstream_client.aclose()

    return asyncio.run(_run())


def _finish(ok: bool) -> None:
    if not ok:
        raise typer.Exit(code=1)


def _handler() -> CommandHandler:
    return get_dependencies()['command_handler']


# --- CLI Commands ---

JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print the upstream JSON instead of a table.")
]


@app.command(name="list")
def list_command(as_json: JsonOption = False):
    """List all employees."""
    _finish(run_async(_handler().handle_list(as_json=as_json)))


@app.command()
def search(
    text: Annotated[str, typer.Argument(help="Case-insensitive fragment of the employee name.")],
    as_json: JsonOption = False,
):
    """Search employees by name."""
    _finish(run_async(_handler().handle_search(text, as_json=as_json)))


@app.command()
def get(
    employee_id: Annotated[str, typer.Argument(help="Upstream employee ID.")],
    as_json: JsonOption = False,
):
    """Show one employee."""
    _finish(run_async(_handler().handle_get(employee_id, as_json=as_json)))


@app.command(name="max-salary")
def max_salary_command():
    """Show the highest salary among all employees."""
    _finish(run_async(_handler().handle_max_salary()))


@app.command(name="top-earners")
def top_earners_command():
    """Show the names of the 10 highest earning employees."""
    _finish(run_async(_handler().handle_top_earners()))


def _text_field(value: str) -> str:
    """Option callback for free-text employee fields: non-blank, 2 to 100 characters."""
    if not value.strip():
        raise typer.BadParameter("must not be blank")
    if not 2 <= len(value) <= 100:
        raise typer.BadParameter("must be between 2 and 100 characters")
    return value


@app.command()
def create(
    name: Annotated[str, typer.Option("--name", "-n", callback=_text_field, help="Full name.")],
    title: Annotated[str, typer.Option("--title", "-t", callback=_text_field, help="Job title.")],
    salary: Annotated[int, typer.Option("--salary", "-s", min=1, max=10_000_000, help="Yearly salary.")],
    age: Annotated[int, typer.Option("--age", "-a", min=16, max=75, help="Age in years.")],
    as_json: JsonOption = False,
):
    """Create a new employee."""
    employee_input = CreationInput(name=name, title=title, salary=salary, age=age)
    _finish(run_async(_handler().handle_create(employee_input, as_json=as_json)))


@app.command()
def delete(
    employee_id: Annotated[str, typer.Argument(help="Upstream employee ID.")],
    name: Annotated[Optional[str], typer.Option("--name", help="Expected name, checked against the resolved one.")] = None,
):
    """Delete an employee by ID."""
    _finish(run_async(_handler().handle_delete(employee_id, name_hint=name)))


@app.callback()
def main_callback(
    base_url: Annotated[
        Optional[str],
        typer.Option("--base-url", help="Upstream employee endpoint. Overrides configuration.")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
):
    """Global options, applied before dependencies are created."""
    if base_url:
        set_config('upstream.base_url', base_url)
    if verbose:
        set_config('logging.level', 'DEBUG')


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
