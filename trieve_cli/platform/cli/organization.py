"""Handler for `trieve organization` commands."""

from __future__ import annotations

import argparse
import uuid

from trieve_cli.cli.console import console
from trieve_cli.cli.errors import CLIError
from trieve_cli.cli.inputs import FlagInput, PromptInput, resolve_input
from trieve_cli.cli.prompts import Choice, select
from trieve_cli.platform.api.client import TrieveAPIError
from trieve_cli.platform.auth import (
    EffectiveConfiguration,
    ProfileStoreError,
    edit_store,
    is_no_profile_mode,
)

from .common import add_credential_arguments, open_client, require_configuration


class OrganizationCommand:
    """Handler for `trieve organization`."""

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="organization_action", help="Organization commands"
        )

        switch_parser = subparsers.add_parser(
            "switch", help="Change the organization of the active profile"
        )
        switch_parser.add_argument(
            "--org-id",
            dest="target_org_id",
            help="Organization to switch to (prompted from your organizations if omitted)",
        )
        add_credential_arguments(switch_parser, include_org=False)
        switch_parser.set_defaults(handler=self._run_switch)

        parser.set_defaults(handler=self._run_default)

    def _run_default(self, args: argparse.Namespace) -> int:
        print("Usage: trieve organization <command>")
        print("")
        print("Commands:")
        print("  switch    Change the organization of the active profile")
        return 0

    def _run_switch(self, args: argparse.Namespace) -> int:
        if is_no_profile_mode():
            raise CLIError(
                "'trieve organization switch' updates the active profile, which is "
                "disabled while TRIEVE_NO_PROFILE is set. Set TRIEVE_ORG_ID instead."
            )

        config = require_configuration(args, require_org=False, include_org=False)
        org_id = resolve_input(
            "organization ID",
            FlagInput("--org-id", args.target_org_id),
            PromptInput(lambda: _select_organization(config)),
        )
        try:
            uuid.UUID(org_id)
        except ValueError:
            raise CLIError(f"Invalid organization ID: {org_id}") from None

        try:
            with edit_store() as store:
                profile = store.set_active_org(org_id)
        except ProfileStoreError as e:
            raise CLIError(str(e)) from e

        console.print(
            f"Switched profile '{profile.name}' to organization '{org_id}'.",
            style="green",
        )
        return 0


def _select_organization(config: EffectiveConfiguration) -> str | None:
    try:
        with open_client(config) as client:
            user = client.get_me()
    except TrieveAPIError as e:
        raise CLIError(f"Failed to list organizations: {e}") from e

    if not user.orgs:
        raise CLIError("This account does not belong to any organization.")
    current = config.org_id if any(o.id == config.org_id for o in user.orgs) else None
    return select(
        "Select an organization to use:",
        choices=[Choice(title=o.label(), value=o.id) for o in user.orgs],
        default=current,
    )
