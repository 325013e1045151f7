"""Flag-or-prompt input sources for command arguments.

Commands accept most values either as a flag or, when the flag is omitted
and stdin is a terminal, through an interactive prompt. Each place a value
can come from is an ``InputSource``; ``resolve_input`` asks the sources in
order and returns the first non-blank value, so the code downstream only
ever sees final strings.

Usage:
    name = resolve_input(
        "dataset name",
        FlagInput("--name", args.name),
        PromptInput(lambda: text("Dataset name:")),
    )
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .errors import CLIError
from .prompts import is_interactive


class InputSource(Protocol):
    def read(self) -> str | None:
        """Return a value, or None if this source has nothing to offer."""
        ...


@dataclass(frozen=True)
class FlagInput:
    """A value passed explicitly on the command line."""

    flag: str
    value: str | None

    def read(self) -> str | None:
        if self.value is None:
            return None
        return self.value.strip() or None


@dataclass(frozen=True)
class PromptInput:
    """A value asked for interactively.

    Only offers a value when stdin is a TTY. A cancelled prompt (Ctrl+C,
    questionary returns None) aborts the command.
    """

    ask: Callable[[], str | None]

    def read(self) -> str | None:
        if not is_interactive():
            return None
        answer = self.ask()
        if answer is None:
            raise CLIError("Cancelled.")
        return answer.strip() or None


@dataclass(frozen=True)
class DefaultInput:
    """A fallback value used when nothing else is given."""

    value: str

    def read(self) -> str | None:
        return self.value or None


def resolve_input(label: str, *sources: InputSource) -> str:
    """Return the first value offered by *sources*.

    Raises:
        CLIError: If no source produced a value.
    """
    for source in sources:
        value = source.read()
        if value:
            return value

    flags = [s.flag for s in sources if isinstance(s, FlagInput)]
    hint = f"Pass {' or '.join(flags)}" if flags else "Provide it"
    raise CLIError(f"Missing {label}. {hint} or run in an interactive terminal.")


def flag_or_prompt(
    label: str, flag: str, value: str | None, ask: Callable[[], str | None]
) -> str:
    """Shorthand for the common flag-then-prompt pair."""
    return resolve_input(label, FlagInput(flag, value), PromptInput(ask))


__all__ = [
    "DefaultInput",
    "FlagInput",
    "InputSource",
    "PromptInput",
    "flag_or_prompt",
    "resolve_input",
]
