"""In-memory aggregates over the full employee collection.

The upstream service offers no search or ranking endpoints, so these are
computed here from a list-all result. None of the functions mutate their
input.
"""

import logging
from typing import List, Sequence

from emporch.domain.errors import NoEmployeesError
from emporch.domain.models.common import MAX_RECORDS, TOP_EARNERS_LIMIT, EmployeeName
from emporch.domain.models.employee import EmployeeRecord

logger = logging.getLogger(__name__)


def truncate_records(records: Sequence[EmployeeRecord], ceiling: int = MAX_RECORDS) -> List[EmployeeRecord]:
    """Keeps at most `ceiling` records, dropping the tail of an oversized payload."""
    if len(records) > ceiling:
        logger.warning(f"Employee list size {len(records)} exceeds safety limit, truncating to {ceiling}")
        return list(records[:ceiling])
    return list(records)


def search_by_name(records: Sequence[EmployeeRecord], substring: str) -> List[EmployeeRecord]:
    """Case-insensitive substring match on the display name. Nameless records never match."""
    needle = substring.casefold()
    return [r for r in records if r.name is not None and needle in r.name.casefold()]


def max_salary(records: Sequence[EmployeeRecord]) -> int:
    """Returns the highest salary in the collection.

    Raises:
        NoEmployeesError: If there is no record carrying a salary.
    """
    salaries = [r.salary for r in records if r.salary is not None]
    if not salaries:
        raise NoEmployeesError("No employees found")
    return max(salaries)


def top_earner_names(records: Sequence[EmployeeRecord], limit: int = TOP_EARNERS_LIMIT) -> List[EmployeeName]:
    """Names of the `limit` best paid employees, highest salary first.

    sorted() is stable, so equal salaries keep their upstream order.
    Records without a salary rank after every salaried record; records
    without a name are left out.
    """
    ranked = sorted(
        (r for r in records if r.name is not None),
        key=lambda r: (r.salary is not None, r.salary or 0),
        reverse=True,
    )
    return [r.name for r in ranked[:limit]]
