"""Shared error type for the Trieve CLI."""

from __future__ import annotations


class CLIError(Exception):
    """User-facing CLI failure.

    Raised by command handlers; ``main`` prints the message to stderr and
    exits with status 1.
    """

    pass
