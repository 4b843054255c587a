"""Domain Layer: employee records, the error taxonomy, ports and events.

Has no dependencies on infrastructure; everything else depends on it.
"""
