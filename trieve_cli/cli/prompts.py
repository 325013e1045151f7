"""Shared interactive prompt utilities built on questionary.

Provides a consistent visual style and helper functions for all
CLI commands that need interactive user input.

Usage:
    from trieve_cli.cli.prompts import select, confirm, text

    choice = select("Pick a profile:", choices=["work", "personal"])
    ok = confirm("Proceed?")
    name = text("Dataset name:", validate=my_validator)
"""

from __future__ import annotations

import sys
from typing import Any

import questionary
from questionary import Choice, Style

# ── Trieve brand style ───────────────────────────────────────────

TRIEVE_STYLE = Style(
    [
        ("qmark", "fg:#f97316 bold"),  # Orange question mark
        ("question", "bold"),
        ("answer", "fg:#a855f7 bold"),  # Purple submitted answer
        ("pointer", "fg:#f97316 bold"),
        ("highlighted", "fg:#f97316 bold"),
        ("selected", "fg:#a855f7"),
        ("separator", "fg:#6b7280"),
        ("instruction", "fg:#6b7280"),
        ("text", ""),
        ("disabled", "fg:#6b7280 italic"),
    ]
)


def is_interactive() -> bool:
    """Return True if stdin is a TTY (interactive terminal)."""
    return sys.stdin.isatty()


def select(
    message: str,
    choices: list[str | Choice],
    *,
    default: str | None = None,
    instruction: str | None = None,
) -> str | None:
    """Interactive single-selection prompt with arrow-key navigation.

    Returns the selected value, or None if the user cancels (Ctrl+C).
    """
    return questionary.select(
        message,
        choices=choices,
        default=default,
        style=TRIEVE_STYLE,
        qmark="?",
        pointer="❯",
        instruction=instruction or "(arrow keys to navigate)",
        use_shortcuts=False,
    ).ask()


def confirm(
    message: str,
    *,
    default: bool = True,
) -> bool | None:
    """Interactive yes/no confirmation prompt.

    Returns True/False, or None if the user cancels (Ctrl+C).
    """
    return questionary.confirm(
        message,
        default=default,
        style=TRIEVE_STYLE,
        qmark="?",
    ).ask()


def text(
    message: str,
    *,
    default: str = "",
    validate: Any = None,
    instruction: str | None = None,
) -> str | None:
    """Interactive text input prompt with optional validation.

    The validate callable receives the input string and should return
    True if valid, or an error message string if invalid.

    Returns the entered text, or None if the user cancels (Ctrl+C).
    """
    return questionary.text(
        message,
        default=default,
        validate=validate,
        style=TRIEVE_STYLE,
        qmark="?",
        instruction=instruction,
    ).ask()


def password(message: str, *, validate: Any = None) -> str | None:
    """Masked text input, used for API keys."""
    return questionary.password(
        message,
        validate=validate,
        style=TRIEVE_STYLE,
        qmark="?",
    ).ask()


def non_empty(value: str) -> bool | str:
    """questionary validator rejecting blank input."""
    return bool(value.strip()) or "A value is required."


__all__ = [
    "TRIEVE_STYLE",
    "Choice",
    "confirm",
    "is_interactive",
    "non_empty",
    "password",
    "select",
    "text",
]
