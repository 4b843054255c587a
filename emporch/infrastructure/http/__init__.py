"""HTTP adapters for the upstream employee service."""
