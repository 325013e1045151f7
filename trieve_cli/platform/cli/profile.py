"""Handler for `trieve profile` commands."""

from __future__ import annotations

import argparse

from trieve_cli.cli.console import console
from trieve_cli.cli.errors import CLIError
from trieve_cli.cli.inputs import FlagInput, PromptInput, resolve_input
from trieve_cli.cli.prompts import confirm, select
from trieve_cli.platform.auth import (
    ProfileNotFoundError,
    ProfileStore,
    ProfileStoreError,
    edit_store,
    load_store,
)


def _load() -> ProfileStore:
    try:
        return load_store()
    except ProfileStoreError as e:
        raise CLIError(str(e)) from e


class ProfileCommand:
    """Handler for `trieve profile`."""

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="profile_action", help="Profile management commands"
        )

        list_parser = subparsers.add_parser("list", help="List saved profiles")
        list_parser.set_defaults(handler=self._run_list)

        switch_parser = subparsers.add_parser(
            "switch", help="Make a saved profile the active one"
        )
        switch_parser.add_argument(
            "profile_name", nargs="?", help="Profile to activate (prompted if omitted)"
        )
        switch_parser.set_defaults(handler=self._run_switch)

        delete_parser = subparsers.add_parser("delete", help="Delete a saved profile")
        delete_parser.add_argument(
            "profile_name", nargs="?", help="Profile to delete (prompted if omitted)"
        )
        delete_parser.add_argument(
            "-y", "--yes", action="store_true", help="Skip confirmation"
        )
        delete_parser.set_defaults(handler=self._run_delete)

        parser.set_defaults(handler=self._run_default)

    def _run_default(self, args: argparse.Namespace) -> int:
        print("Usage: trieve profile <command>")
        print("")
        print("Commands:")
        print("  list      List saved profiles")
        print("  switch    Make a saved profile the active one")
        print("  delete    Delete a saved profile")
        return 0

    def _run_list(self, args: argparse.Namespace) -> int:
        store = _load()
        if not store.profiles:
            console.print(
                "No profiles saved. Run 'trieve login' to create one.", style="yellow"
            )
            return 0

        rows = [
            [
                "●" if p.name == store.active else "",
                p.name,
                p.org_id,
                p.api_url,
                p.masked_key(),
            ]
            for p in store.profiles
        ]
        console.data_table(
            ["", "Name", "Organization", "API URL", "API Key"],
            rows,
            title=f"Profiles ({len(store.profiles)})",
        )
        if store.active is None:
            console.print(
                "No active profile. Run 'trieve profile switch' to pick one.",
                style="dim",
            )
        return 0

    def _run_switch(self, args: argparse.Namespace) -> int:
        store = _load()
        if not store.profiles:
            raise CLIError("No profiles saved. Run 'trieve login' first.")

        name = resolve_input(
            "profile name",
            FlagInput("a profile name", args.profile_name),
            PromptInput(
                lambda: select(
                    "Select a profile to switch to:",
                    choices=store.names(),
                    default=store.active,
                )
            ),
        )

        try:
            with edit_store() as current:
                current.switch(name)
        except (ProfileNotFoundError, ProfileStoreError) as e:
            raise CLIError(str(e)) from e

        console.print(f"Switched to profile '{name}'.", style="green")
        return 0

    def _run_delete(self, args: argparse.Namespace) -> int:
        store = _load()
        if not store.profiles:
            raise CLIError("No profiles saved.")

        name = args.profile_name
        if not name:
            name = resolve_input(
                "profile name",
                FlagInput("a profile name", None),
                PromptInput(
                    lambda: select("Select a profile to delete:", choices=store.names())
                ),
            )
            if not args.yes:
                answer = confirm(f"Delete profile '{name}'?", default=False)
                if not answer:
                    console.print("Cancelled.")
                    return 0

        try:
            with edit_store() as current:
                was_active = current.active == name
                current.delete(name)
        except (ProfileNotFoundError, ProfileStoreError) as e:
            raise CLIError(str(e)) from e

        console.print(f"Deleted profile '{name}'.", style="green")
        if was_active:
            console.print(
                "It was the active profile. Run 'trieve profile switch' or "
                "'trieve login' before using commands that need credentials.",
                style="dim",
            )
        return 0
