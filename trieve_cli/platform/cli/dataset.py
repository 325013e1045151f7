"""Handler for `trieve dataset` commands."""

from __future__ import annotations

import argparse

from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from trieve_cli.cli.console import console
from trieve_cli.cli.errors import CLIError
from trieve_cli.cli.inputs import FlagInput, PromptInput, flag_or_prompt, resolve_input
from trieve_cli.cli.prompts import Choice, confirm, is_interactive, non_empty, select, text
from trieve_cli.platform.api.client import TrieveAPIError, TrieveClient
from trieve_cli.platform.api.examples import (
    EXAMPLES,
    ExampleDataError,
    SeedData,
    fetch_example,
    find_example,
    upload_seed_data,
)
from trieve_cli.platform.api.models import Dataset, DatasetAndUsage

from .common import add_credential_arguments, open_client, require_configuration


def _list(client: TrieveClient) -> list[DatasetAndUsage]:
    try:
        return client.list_datasets()
    except TrieveAPIError as e:
        raise CLIError(f"Error listing datasets: {e}") from e


def _create(client: TrieveClient, name: str) -> Dataset:
    try:
        dataset = client.create_dataset(name)
    except TrieveAPIError as e:
        raise CLIError(f"Error creating dataset: {e}") from e

    console.print("Dataset created successfully!\n", style="green")
    console.table(
        [
            ("ID", dataset.id),
            ("Name", dataset.name),
            ("Organization ID", dataset.organization_id),
        ]
    )
    return dataset


def _select_dataset(client: TrieveClient, message: str) -> str | None:
    datasets = _list(client)
    if not datasets:
        raise CLIError("No datasets found in this organization.")
    return select(
        message,
        choices=[Choice(title=d.label(), value=d.dataset.id) for d in datasets],
    )


def _ask_dataset_name() -> str | None:
    return text("Dataset name:", validate=non_empty)


class DatasetCommand:
    """Handler for `trieve dataset`."""

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="dataset_action", help="Dataset management commands"
        )

        # dataset create
        create_parser = subparsers.add_parser("create", help="Create a dataset")
        create_parser.add_argument("-n", "--name", help="Name of the dataset")
        add_credential_arguments(create_parser)
        create_parser.set_defaults(handler=self._run_create)

        # dataset list
        list_parser = subparsers.add_parser(
            "list", help="List datasets in the organization"
        )
        add_credential_arguments(list_parser)
        list_parser.set_defaults(handler=self._run_list)

        # dataset delete
        delete_parser = subparsers.add_parser("delete", help="Delete a dataset")
        delete_parser.add_argument(
            "dataset_id", nargs="?", help="Dataset ID (selected interactively if omitted)"
        )
        delete_parser.add_argument(
            "-y", "--yes", action="store_true", help="Skip confirmation"
        )
        add_credential_arguments(delete_parser)
        delete_parser.set_defaults(handler=self._run_delete)

        # dataset example
        example_parser = subparsers.add_parser(
            "example", help="Add example data to a dataset"
        )
        target = example_parser.add_mutually_exclusive_group()
        target.add_argument(
            "--dataset-id",
            dest="dataset_id",
            help="Dataset to add the data to (create or select one if omitted)",
        )
        target.add_argument(
            "--create",
            dest="create_name",
            metavar="NAME",
            help="Create a new dataset with this name and add the data to it",
        )
        example_parser.add_argument(
            "--example",
            help=f"Example to load: {', '.join(repr(n) for n in EXAMPLES)}",
        )
        add_credential_arguments(example_parser)
        example_parser.set_defaults(handler=self._run_example)

        parser.set_defaults(handler=self._run_default)

    def _run_default(self, args: argparse.Namespace) -> int:
        print("Usage: trieve dataset <command>")
        print("")
        print("Commands:")
        print("  create    Create a dataset")
        print("  list      List datasets in the organization")
        print("  delete    Delete a dataset")
        print("  example   Add example data to a dataset")
        return 0

    def _run_list(self, args: argparse.Namespace) -> int:
        config = require_configuration(args)
        with open_client(config) as client:
            datasets = _list(client)

        if not datasets:
            console.print("No datasets found.")
            return 0

        rows = [
            [
                d.dataset.id,
                d.dataset.name,
                d.dataset.created_date,
                d.dataset.updated_date,
                str(d.chunk_count),
            ]
            for d in datasets
        ]
        console.data_table(
            ["ID", "Name", "Created At", "Updated At", "Chunk Count"],
            rows,
            title=f"Datasets for organization: {config.org_id}",
        )
        return 0

    def _run_create(self, args: argparse.Namespace) -> int:
        config = require_configuration(args)
        name = flag_or_prompt("dataset name", "--name", args.name, _ask_dataset_name)
        with open_client(config) as client:
            _create(client, name)
        return 0

    def _run_delete(self, args: argparse.Namespace) -> int:
        config = require_configuration(args)
        with open_client(config) as client:
            dataset_id = args.dataset_id
            if not dataset_id:
                dataset_id = resolve_input(
                    "dataset ID",
                    FlagInput("a dataset ID", None),
                    PromptInput(
                        lambda: _select_dataset(client, "Select a dataset to delete:")
                    ),
                )
                if not args.yes:
                    answer = confirm(
                        "Are you sure you want to delete this dataset?", default=False
                    )
                    if not answer:
                        console.print("Dataset deletion cancelled.")
                        return 0

            try:
                client.delete_dataset(dataset_id)
            except TrieveAPIError as e:
                raise CLIError(f"Error deleting dataset: {e}") from e

        console.print("Dataset deleted successfully!", style="green")
        return 0

    def _run_example(self, args: argparse.Namespace) -> int:
        config = require_configuration(args)

        if args.example:
            example = find_example(args.example)
            if example is None:
                raise CLIError(
                    f"Unknown example '{args.example}'. "
                    f"Available: {', '.join(EXAMPLES)}"
                )
        else:
            example_name = resolve_input(
                "example",
                FlagInput("--example", None),
                PromptInput(
                    lambda: select(
                        "Select an example dataset to add:",
                        choices=[
                            Choice(title=f"{e.name} - {e.description}", value=e.name)
                            for e in EXAMPLES.values()
                        ],
                    )
                ),
            )
            example = EXAMPLES[example_name]

        with open_client(config) as client:
            if args.create_name and args.create_name.strip():
                dataset_id = _create(client, args.create_name.strip()).id
            else:
                dataset_id = resolve_input(
                    "dataset ID",
                    FlagInput("--dataset-id", args.dataset_id),
                    PromptInput(lambda: self._choose_dataset(client)),
                )

            console.print(f"Downloading '{example.name}' example data...")
            try:
                seed = fetch_example(example)
            except ExampleDataError as e:
                raise CLIError(str(e)) from e

            console.print(f"Adding seed data to dataset: {dataset_id}")
            try:
                uploaded = self._upload(client, dataset_id, seed)
            except TrieveAPIError as e:
                raise CLIError(f"Error adding seed data: {e}") from e

        console.print(
            f"Example dataset added successfully! ({uploaded} chunks)", style="green"
        )
        return 0

    def _choose_dataset(self, client: TrieveClient) -> str | None:
        """Create a new dataset or pick an existing one."""
        create_new = confirm(
            "Would you like to create a new dataset? "
            "(choose No to select an existing dataset)",
            default=True,
        )
        if create_new is None:
            return None
        if create_new:
            name = _ask_dataset_name()
            if name is None:
                return None
            return _create(client, name.strip()).id
        return _select_dataset(client, "Select a dataset to add seed data to:")

    def _upload(self, client: TrieveClient, dataset_id: str, seed: SeedData) -> int:
        if not is_interactive():
            return upload_seed_data(client, dataset_id, seed)

        progress = Progress(
            TextColumn("Uploading chunks"),
            BarColumn(),
            MofNCompleteColumn(),
        )
        task_id = progress.add_task("upload", total=len(seed.chunks))
        with progress:
            return upload_seed_data(
                client,
                dataset_id,
                seed,
                progress_callback=lambda done, total: progress.update(
                    task_id, completed=done
                ),
            )
