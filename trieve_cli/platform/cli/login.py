from __future__ import annotations

import argparse
import os
import webbrowser
from dataclasses import dataclass
from urllib.parse import urlencode

from trieve_cli.cli.console import console
from trieve_cli.cli.errors import CLIError
from trieve_cli.cli.inputs import DefaultInput, FlagInput, PromptInput, resolve_input
from trieve_cli.cli.prompts import Choice, confirm, is_interactive, non_empty, password, select, text
from trieve_cli.platform.api.client import TrieveAPIError
from trieve_cli.platform.api.models import User
from trieve_cli.platform.auth import (
    DEFAULT_API_URL,
    EffectiveConfiguration,
    Profile,
    ProfileStoreError,
    edit_store,
    is_no_profile_mode,
)
from trieve_cli.platform.auth.config import ENV_API_URL, LOCAL_SERVER_PORT, LOGIN_PATH
from trieve_cli.platform.auth.local_server import LocalLoginServer
from trieve_cli.platform.auth.profiles import normalize_api_url

from .common import open_client

DEFAULT_PROFILE_NAME = "default"
LOGIN_TIMEOUT_SECONDS = 300.0


def browser_login(api_url: str, timeout: float = LOGIN_TIMEOUT_SECONDS) -> str | None:
    """Open the dashboard login page and wait for the API key callback.

    Returns None if the callback server cannot be started, so the caller
    can fall back to pasting a key.
    """
    try:
        server = LocalLoginServer()
    except OSError as e:
        console.print(
            f"Could not listen on port {LOCAL_SERVER_PORT} for the login callback ({e}).",
            style="yellow",
        )
        return None

    try:
        query = urlencode({"redirect_uri": f"http://localhost:{server.port}"})
        url = f"{api_url}{LOGIN_PATH}?{query}"
        console.print("Opening your browser to log in. If it does not open, visit:")
        console.print(f"  {url}", style="cyan")
        webbrowser.open(url)
        api_key = server.wait_for_api_key(timeout=timeout)
    finally:
        server.server_close()

    if api_key is None:
        raise CLIError("Timed out waiting for the browser login to finish.")
    return api_key


@dataclass(frozen=True)
class BrowserLoginInput:
    """API key obtained through the browser, if the user opts in."""

    api_url: str
    enabled: bool = True

    def read(self) -> str | None:
        if not self.enabled or not is_interactive():
            return None
        use_browser = confirm(
            "Log in with your browser? (choose No to paste an API key)", default=True
        )
        if use_browser is None:
            raise CLIError("Cancelled.")
        if not use_browser:
            return None
        return browser_login(self.api_url)


class LoginCommand:
    """Handler for `trieve login`."""

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.set_defaults(handler=self.run)
        parser.add_argument("--api-key", dest="api_key", help="API key to save.")
        parser.add_argument(
            "--org-id", dest="org_id", help="Organization ID to use with this profile."
        )
        parser.add_argument(
            "--api-url",
            dest="api_url",
            help=f"Trieve API URL (default: $TRIEVE_API_URL or {DEFAULT_API_URL}).",
        )
        parser.add_argument(
            "--profile-name",
            dest="profile_name",
            help=f"Name of the profile to create or overwrite (default: '{DEFAULT_PROFILE_NAME}').",
        )
        parser.add_argument(
            "--no-browser",
            dest="no_browser",
            action="store_true",
            help="Don't offer browser login, just ask for an API key.",
        )

    def run(self, args: argparse.Namespace) -> int:
        if is_no_profile_mode():
            raise CLIError(
                "'trieve login' saves a profile, which is disabled while "
                "TRIEVE_NO_PROFILE is set. Use TRIEVE_API_KEY and TRIEVE_ORG_ID instead."
            )

        try:
            api_url = normalize_api_url(
                args.api_url or os.environ.get(ENV_API_URL) or DEFAULT_API_URL
            )
        except ValueError as e:
            raise CLIError(f"Invalid API URL: {e}") from e

        console.print()
        console.print("  Trieve", style="bold magenta")
        console.print()

        api_key = resolve_input(
            "API key",
            FlagInput("--api-key", args.api_key),
            BrowserLoginInput(api_url, enabled=not args.no_browser),
            PromptInput(
                lambda: password(
                    "API key (from https://dashboard.trieve.ai):", validate=non_empty
                )
            ),
        )

        user = self._verify(api_key, api_url)
        org_id = self._choose_organization(user, args.org_id)
        org_name = next((o.name for o in user.orgs if o.id == org_id), org_id)

        profile_name = resolve_input(
            "profile name",
            FlagInput("--profile-name", args.profile_name),
            PromptInput(lambda: text("Profile name:", default=DEFAULT_PROFILE_NAME)),
            DefaultInput(DEFAULT_PROFILE_NAME),
        )

        profile = Profile(
            name=profile_name, api_key=api_key, org_id=org_id, api_url=api_url
        )
        try:
            with edit_store() as store:
                replaced = store.get(profile.name) is not None
                store.upsert(profile)
        except ProfileStoreError as e:
            raise CLIError(str(e)) from e

        info_lines = [f"Email: {user.email}"]
        if user.name:
            info_lines.append(f"Name: {user.name}")
        info_lines.append(f"Organization: {org_name} ({org_id})")
        info_lines.append(f"Profile: {profile.name}{' (updated)' if replaced else ''}")
        info_lines.append(f"API URL: {api_url}")
        console.panel("Login Successful", "\n".join(info_lines), style="green")
        return 0

    def _verify(self, api_key: str, api_url: str) -> User:
        config = EffectiveConfiguration(api_key=api_key, org_id="", api_url=api_url)
        try:
            with open_client(config) as client:
                return client.get_me()
        except TrieveAPIError as e:
            raise CLIError(f"Could not verify API key: {e}") from e

    def _choose_organization(self, user: User, org_id: str | None) -> str:
        org_id = (org_id or "").strip()
        if org_id:
            return org_id
        if not user.orgs:
            raise CLIError("This account does not belong to any organization.")
        if len(user.orgs) == 1:
            return user.orgs[0].id
        return resolve_input(
            "organization",
            FlagInput("--org-id", org_id),
            PromptInput(
                lambda: select(
                    "Select an organization to use:",
                    choices=[Choice(title=o.label(), value=o.id) for o in user.orgs],
                )
            ),
        )
