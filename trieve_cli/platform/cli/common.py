"""Credential flags and client construction shared by the platform commands."""

from __future__ import annotations

import argparse

from trieve_cli.cli.errors import CLIError
from trieve_cli.platform.api.client import TrieveClient
from trieve_cli.platform.auth import (
    ConfigurationError,
    CredentialFlags,
    EffectiveConfiguration,
    ProfileStoreError,
    resolve_configuration,
)


def add_credential_arguments(
    parser: argparse.ArgumentParser, *, include_org: bool = True
) -> None:
    """Add --api-key/--org-id/--api-url, which override env vars and profiles."""
    group = parser.add_argument_group("credentials")
    group.add_argument(
        "--api-key",
        dest="api_key",
        help="API key (overrides TRIEVE_API_KEY and the active profile).",
    )
    if include_org:
        group.add_argument(
            "--org-id",
            dest="org_id",
            help="Organization ID (overrides TRIEVE_ORG_ID and the active profile).",
        )
    group.add_argument(
        "--api-url",
        dest="api_url",
        help="Trieve API URL for self-hosted deployments "
        "(overrides TRIEVE_API_URL and the active profile).",
    )


def credential_flags(args: argparse.Namespace, *, include_org: bool = True) -> CredentialFlags:
    return CredentialFlags(
        api_key=getattr(args, "api_key", None),
        org_id=getattr(args, "org_id", None) if include_org else None,
        api_url=getattr(args, "api_url", None),
    )


def require_configuration(
    args: argparse.Namespace, *, require_org: bool = True, include_org: bool = True
) -> EffectiveConfiguration:
    """Resolve credentials for a command, as a CLIError on failure."""
    try:
        return resolve_configuration(
            credential_flags(args, include_org=include_org), require_org=require_org
        )
    except (ConfigurationError, ProfileStoreError) as e:
        raise CLIError(str(e)) from e


def open_client(config: EffectiveConfiguration) -> TrieveClient:
    return TrieveClient(config)
