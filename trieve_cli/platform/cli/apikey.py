"""Handler for `trieve apikey` commands."""

from __future__ import annotations

import argparse

from trieve_cli.cli.console import console
from trieve_cli.cli.errors import CLIError
from trieve_cli.cli.inputs import FlagInput, PromptInput, resolve_input
from trieve_cli.cli.prompts import Choice, non_empty, select, text
from trieve_cli.platform.api.client import API_KEY_ROLES, TrieveAPIError

from .common import add_credential_arguments, open_client, require_configuration

ROLE_TITLES = {"read-write": "Read + Write", "read": "Read"}


class ApiKeyCommand:
    """Handler for `trieve apikey`."""

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(dest="apikey_action", help="API key commands")

        generate_parser = subparsers.add_parser("generate", help="Generate a new API key")
        generate_parser.add_argument(
            "--name", help="Name that identifies the key in the dashboard"
        )
        generate_parser.add_argument(
            "--role",
            choices=sorted(API_KEY_ROLES),
            help="Permissions of the new key",
        )
        add_credential_arguments(generate_parser)
        generate_parser.set_defaults(handler=self._run_generate)

        parser.set_defaults(handler=self._run_default)

    def _run_default(self, args: argparse.Namespace) -> int:
        print("Usage: trieve apikey <command>")
        print("")
        print("Commands:")
        print("  generate  Generate a new API key")
        return 0

    def _run_generate(self, args: argparse.Namespace) -> int:
        config = require_configuration(args, require_org=False)

        name = resolve_input(
            "API key name",
            FlagInput("--name", args.name),
            PromptInput(
                lambda: text(
                    "Enter a name for the API key:",
                    validate=non_empty,
                    instruction="(helps you identify the key later)",
                )
            ),
        )
        role = resolve_input(
            "role",
            FlagInput("--role", args.role),
            PromptInput(
                lambda: select(
                    "Select a role for the API key:",
                    choices=[
                        Choice(title=title, value=value)
                        for value, title in ROLE_TITLES.items()
                    ],
                )
            ),
        )

        try:
            with open_client(config) as client:
                api_key = client.create_api_key(name, role)
        except TrieveAPIError as e:
            raise CLIError(f"Error generating API key: {e}") from e

        console.print("\nAPI key generated successfully!\n", style="green")
        console.table(
            [("Name", name), ("Role", ROLE_TITLES[role]), ("API Key", api_key.api_key)]
        )
        console.print(
            "\nStore this key somewhere safe; it will not be shown again.", style="dim"
        )
        return 0
