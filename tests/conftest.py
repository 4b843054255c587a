import pytest
from typer.testing import CliRunner
from unittest.mock import AsyncMock

from emporch.domain.interfaces.employee_gateway import EmployeeGateway
from emporch.domain.models.employee import EmployeeRecord, UpstreamEnvelope
from emporch.infrastructure.config import settings
from emporch.infrastructure.resilience.api_retry import ApiRetryService
from emporch import main


def wire_employee(employee_id, name, salary, age=30, title="Engineer"):
    """Builds an employee object in the upstream wire format."""
    first, *rest = name.split()
    email = f"{first.lower()}{rest[-1][0].lower() if rest else ''}@company.com"
    return {
        "id": employee_id,
        "employee_name": name,
        "employee_salary": salary,
        "employee_age": age,
        "employee_title": title,
        "employee_email": email,
    }


@pytest.fixture
def sample_wire_employees():
    """The three-employee collection used throughout the scenarios."""
    return [
        wire_employee("1", "John Doe", 50000),
        wire_employee("2", "Jane Smith", 100000),
        wire_employee("3", "Bob Johnson", 75000),
    ]


@pytest.fixture
def sample_employees(sample_wire_employees):
    return [EmployeeRecord.from_wire(item) for item in sample_wire_employees]


@pytest.fixture
def mock_gateway(mocker):
    """Gateway double; each endpoint is an AsyncMock."""
    mock = mocker.MagicMock(spec=EmployeeGateway)
    mock.read_all = mocker.AsyncMock(return_value=UpstreamEnvelope(data=[], status="ok"))
    mock.read_one = mocker.AsyncMock()
    mock.create = mocker.AsyncMock()
    mock.delete_by_name = mocker.AsyncMock(return_value=UpstreamEnvelope(data=True, status="ok"))
    return mock


@pytest.fixture
def no_sleep():
    """Replacement for asyncio.sleep that records the requested delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def retry_service(no_sleep):
    return ApiRetryService(sleep=no_sleep)


@pytest.fixture
def recorded_events():
    return []


@pytest.fixture
def event_retry_service(no_sleep, recorded_events):
    return ApiRetryService(sleep=no_sleep, event_listener=recorded_events.append)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch, tmp_path):
    """Keeps configuration and CLI wiring from leaking between tests."""
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "missing-config.yaml")
    settings.reset_configuration()
    settings.clear_test_config()
    main.reset_dependencies()
    yield
    settings.reset_configuration()
    settings.clear_test_config()
    main.reset_dependencies()


@pytest.fixture
def make_wire_employee():
    return wire_employee
