"""Domain models for employees and the upstream response envelope.

Field names on the wire carry an ``employee_`` prefix (except ``id``); the
conversion lives here so the rest of the code only sees domain attributes.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .common import EmailAddress, EmployeeId, EmployeeName

logger = logging.getLogger(__name__)

EMAIL_DOMAIN = "company.com"
WIRE_PREFIX = "employee_"


def email_from_name(name: str) -> EmailAddress:
    """Derives the contact address from a display name.

    Uses the first name plus the initial of the last name, e.g.
    'John Doe' -> 'johnd@company.com'. A single name is used as-is.

    Raises:
        ValueError: If the name is empty or blank.
    """
    if name is None or not name.strip():
        raise ValueError("Name cannot be null or empty")

    parts = name.split()
    first_name = parts[0].lower()
    last_initial = parts[-1][0].lower() if len(parts) > 1 else ""
    return EmailAddress(f"{first_name}{last_initial}@{EMAIL_DOMAIN}")


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-integer value from upstream: {value!r}")
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    logger.warning(f"Ignoring non-string value from upstream: {value!r}")
    return None


@dataclass(frozen=True)
class EmployeeRecord:
    """Point-in-time, read-only copy of an employee owned by the upstream service."""
    id: EmployeeId
    name: Optional[EmployeeName]
    title: Optional[str] = None
    salary: Optional[int] = None
    age: Optional[int] = None
    email: Optional[EmailAddress] = None

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "EmployeeRecord":
        """Builds a record from the upstream JSON object."""
        return cls(
            id=EmployeeId(str(data.get("id", ""))),
            name=_optional_str(data.get(f"{WIRE_PREFIX}name")),
            title=_optional_str(data.get(f"{WIRE_PREFIX}title")),
            salary=_optional_int(data.get(f"{WIRE_PREFIX}salary")),
            age=_optional_int(data.get(f"{WIRE_PREFIX}age")),
            email=_optional_str(data.get(f"{WIRE_PREFIX}email")),
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            f"{WIRE_PREFIX}name": self.name,
            f"{WIRE_PREFIX}title": self.title,
            f"{WIRE_PREFIX}salary": self.salary,
            f"{WIRE_PREFIX}age": self.age,
            f"{WIRE_PREFIX}email": self.email,
        }


@dataclass(frozen=True)
class CreationInput:
    """Caller-supplied data for a new employee; validated by the entry point."""
    name: str
    title: str
    salary: int
    age: int

    def to_payload(self) -> Dict[str, Any]:
        """Upstream create body. The email is derived here, the id is server-assigned."""
        return {
            f"{WIRE_PREFIX}name": self.name,
            f"{WIRE_PREFIX}title": self.title,
            f"{WIRE_PREFIX}salary": self.salary,
            f"{WIRE_PREFIX}age": self.age,
            f"{WIRE_PREFIX}email": email_from_name(self.name),
        }


@dataclass(frozen=True)
class DeletionRequest:
    """Delete command. The id is authoritative; the name is only a hint."""
    id: EmployeeId
    name: Optional[EmployeeName] = None


class DeletionOutcome(str, Enum):
    DELETED = "deleted"
    RACE = "race"  # record vanished between resolve and delete


@dataclass(frozen=True)
class DeletionResult:
    """Tagged result of the delete-by-name step."""
    name: EmployeeName
    outcome: DeletionOutcome


@dataclass(frozen=True)
class UpstreamEnvelope:
    """The {data, status} wrapper the upstream service puts around every payload."""
    data: Any = None
    status: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "UpstreamEnvelope":
        return cls(data=payload.get("data"), status=payload.get("status"))

    @property
    def is_empty(self) -> bool:
        return self.data is None

    def records(self) -> List[Mapping[str, Any]]:
        """Returns the payload as a list of JSON objects.

        A missing data field is an empty list; a single object is wrapped.
        Entries that are not JSON objects are skipped.
        """
        if self.data is None:
            return []
        items = self.data if isinstance(self.data, list) else [self.data]
        records = []
        for item in items:
            if isinstance(item, Mapping):
                records.append(item)
            else:
                logger.warning(f"Skipping malformed employee entry from upstream: {item!r}")
        return records
