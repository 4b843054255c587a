"""Main entry point when executing emporch as a package.

This allows running the package using python -m emporch.
"""

from emporch.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
