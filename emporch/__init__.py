"""emporch: resilient orchestration layer over the upstream employee service."""

__version__ = "1.0.0"
