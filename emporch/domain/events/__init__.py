"""Domain Event definitions.

Represents significant occurrences in upstream communication (attempts,
retries, failures) that other parts of the system might react to.
"""
