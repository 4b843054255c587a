"""Defines common Value Objects used across different domain contexts.

These objects represent simple values like employee identifiers and names,
plus small configuration structures, ensuring consistency and type safety.
"""

from typing import NewType, TypedDict

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
EmployeeId = NewType("EmployeeId", str)        # Upstream-assigned, opaque
EmployeeName = NewType("EmployeeName", str)    # Display name, also the delete key
EmailAddress = NewType("EmailAddress", str)    # Derived from the display name
SearchText = NewType("SearchText", str)        # Substring for name search

# === Limits ===
MAX_RECORDS = 10_000   # Safety ceiling for a single list-all payload
TOP_EARNERS_LIMIT = 10

# --- Structured Data ---

class BackoffPolicy(TypedDict):
    """Value Object representing retry backoff configuration."""
    max_retries: int
    initial_delay: float
    factor: float
    max_delay: float
