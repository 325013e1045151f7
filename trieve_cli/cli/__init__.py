"""Trieve CLI framework: shared errors and console utilities.

The CLI entry point (main) is accessed via trieve_cli.cli.main:main
and is NOT eagerly imported here to avoid circular imports with
modules that only need the shared infrastructure (CLIError, console).
"""

from .errors import CLIError

__all__ = [
    "CLIError",
]
