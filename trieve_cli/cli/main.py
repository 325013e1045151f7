from __future__ import annotations

import argparse
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from trieve_cli.consts import PACKAGE_VERSION

from .console import console
from .errors import CLIError


def main(argv: list[str] | None = None) -> int:
    """Entry point for the trieve CLI."""
    load_dotenv(find_dotenv(usecwd=True), override=False)

    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except CLIError as exc:
        console.print_error(f"Error: {exc}")
        return 1
    except KeyboardInterrupt:
        console.print("\nCancelled.")
        return 130


def _build_parser() -> argparse.ArgumentParser:
    from trieve_cli.platform.cli import (
        ApiKeyCommand,
        DatasetCommand,
        LoginCommand,
        OrganizationCommand,
        ProfileCommand,
    )

    parser = argparse.ArgumentParser(
        prog="trieve",
        description="Trieve CLI - manage datasets, API keys and profiles "
        "for the Trieve search platform.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {PACKAGE_VERSION}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output (credential sources, HTTP requests).",
    )
    subparsers = parser.add_subparsers(dest="command")

    login_parser = subparsers.add_parser(
        "login",
        help="Authenticate with Trieve and save a profile.",
    )
    LoginCommand().configure_parser(login_parser)

    dataset_parser = subparsers.add_parser(
        "dataset",
        help="Create, list, delete and seed datasets.",
    )
    DatasetCommand().configure_parser(dataset_parser)

    apikey_parser = subparsers.add_parser(
        "apikey",
        help="Generate API keys.",
    )
    ApiKeyCommand().configure_parser(apikey_parser)

    profile_parser = subparsers.add_parser(
        "profile",
        help="List, switch and delete saved profiles.",
    )
    ProfileCommand().configure_parser(profile_parser)

    organization_parser = subparsers.add_parser(
        "organization",
        help="Switch the organization of the active profile.",
    )
    OrganizationCommand().configure_parser(organization_parser)

    return parser


if __name__ == "__main__":
    sys.exit(main())
