"""Tests for `trieve dataset` subcommands."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from trieve_cli.cli.main import main
from trieve_cli.platform.api.examples import EXAMPLES, SeedData

ORG = "3c90c3cc-0d44-4b50-8888-8dd25736052a"


def _dataset(dataset_id: str = "ds-1", name: str = "docs") -> dict:
    return {
        "id": dataset_id,
        "name": name,
        "organization_id": ORG,
        "created_at": "2024-05-01T12:30:00",
        "updated_at": "2024-05-02T08:00:00",
    }


def _api(request: httpx.Request) -> httpx.Response:
    """A small fake of the dataset endpoints."""
    path, method = request.url.path, request.method
    if method == "GET" and path == f"/api/dataset/organization/{ORG}":
        return httpx.Response(
            200,
            json=[
                {"dataset": _dataset("ds-1", "docs"), "dataset_usage": {"chunk_count": 7}},
                {"dataset": _dataset("ds-2", "faq"), "dataset_usage": {"chunk_count": 0}},
            ],
        )
    if method == "POST" and path == "/api/dataset":
        name = json.loads(request.content)["dataset_name"]
        return httpx.Response(200, json=_dataset("ds-new", name))
    if method == "DELETE" and path.startswith("/api/dataset/"):
        return httpx.Response(204)
    if method == "POST" and path in ("/api/chunk", "/api/chunk_group"):
        return httpx.Response(200, json={})
    return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def credentials(monkeypatch) -> None:
    monkeypatch.setenv("TRIEVE_API_KEY", "tr-env")
    monkeypatch.setenv("TRIEVE_ORG_ID", ORG)


@pytest.fixture
def client_factory(mock_client_factory):
    factory = mock_client_factory(_api)
    with patch("trieve_cli.platform.cli.dataset.open_client", factory):
        yield factory


class TestDatasetList:
    def test_lists_datasets(self, credentials, client_factory, capsys) -> None:
        assert main(["dataset", "list"]) == 0

        out = capsys.readouterr().out
        assert f"Datasets for organization: {ORG}" in out
        assert "docs" in out
        assert "faq" in out
        assert "2024-05-01" in out
        assert "7" in out

        request = client_factory.requests[0]
        assert request.headers["Authorization"] == "tr-env"
        assert request.headers["TR-Organization"] == ORG

    def test_empty(self, credentials, mock_client_factory, capsys) -> None:
        factory = mock_client_factory(lambda request: httpx.Response(200, json=[]))
        with patch("trieve_cli.platform.cli.dataset.open_client", factory):
            assert main(["dataset", "list"]) == 0
        assert "No datasets found." in capsys.readouterr().out

    def test_api_error(self, credentials, mock_client_factory, capsys) -> None:
        factory = mock_client_factory(
            lambda request: httpx.Response(401, json={"message": "Unauthorized"})
        )
        with patch("trieve_cli.platform.cli.dataset.open_client", factory):
            assert main(["dataset", "list"]) == 1
        err = capsys.readouterr().err
        assert "Error listing datasets" in err
        assert "HTTP 401: Unauthorized" in err

    def test_missing_credentials(self, client_factory, capsys) -> None:
        assert main(["dataset", "list"]) == 1
        assert "TRIEVE_API_KEY" in capsys.readouterr().err
        assert client_factory.requests == []

    def test_flags_override_environment(self, credentials, client_factory) -> None:
        assert main(["dataset", "list", "--api-key", "tr-flag"]) == 0
        assert client_factory.requests[0].headers["Authorization"] == "tr-flag"

    def test_active_profile_used(self, make_profile, client_factory) -> None:
        from trieve_cli.platform.auth import edit_store

        with edit_store() as store:
            store.upsert(make_profile("work", api_key="tr-profile", org_id=ORG))

        assert main(["dataset", "list"]) == 0
        assert client_factory.requests[0].headers["Authorization"] == "tr-profile"


class TestDatasetCreate:
    def test_create_with_name(self, credentials, client_factory, capsys) -> None:
        assert main(["dataset", "create", "--name", "my-docs"]) == 0

        request = client_factory.requests[0]
        assert request.method == "POST"
        assert json.loads(request.content)["dataset_name"] == "my-docs"
        out = capsys.readouterr().out
        assert "Dataset created successfully!" in out
        assert "ds-new" in out

    def test_create_prompts_for_name(self, credentials, client_factory, interactive) -> None:
        with patch("trieve_cli.platform.cli.dataset.text", return_value="prompted"):
            assert main(["dataset", "create"]) == 0
        assert json.loads(client_factory.requests[0].content)["dataset_name"] == "prompted"

    def test_create_without_name_non_interactive(
        self, credentials, client_factory, capsys
    ) -> None:
        assert main(["dataset", "create"]) == 1
        assert "Missing dataset name" in capsys.readouterr().err
        assert client_factory.requests == []


class TestDatasetDelete:
    def test_delete_by_id(self, credentials, client_factory, capsys) -> None:
        assert main(["dataset", "delete", "ds-2"]) == 0

        request = client_factory.requests[0]
        assert request.method == "DELETE"
        assert request.url.path == "/api/dataset/ds-2"
        assert request.headers["TR-Dataset"] == "ds-2"
        assert "Dataset deleted successfully!" in capsys.readouterr().out

    def test_interactive_select_and_confirm(
        self, credentials, client_factory, interactive
    ) -> None:
        select = MagicMock(return_value="ds-1")
        with patch("trieve_cli.platform.cli.dataset.select", select), patch(
            "trieve_cli.platform.cli.dataset.confirm", return_value=True
        ):
            assert main(["dataset", "delete"]) == 0

        choices = select.call_args.kwargs["choices"]
        assert [c.title for c in choices] == ["docs - ds-1", "faq - ds-2"]
        assert client_factory.requests[-1].url.path == "/api/dataset/ds-1"

    def test_interactive_declined(
        self, credentials, client_factory, interactive, capsys
    ) -> None:
        with patch("trieve_cli.platform.cli.dataset.select", return_value="ds-1"), patch(
            "trieve_cli.platform.cli.dataset.confirm", return_value=False
        ):
            assert main(["dataset", "delete"]) == 0

        assert "Dataset deletion cancelled." in capsys.readouterr().out
        assert all(r.method == "GET" for r in client_factory.requests)

    def test_no_id_non_interactive(self, credentials, client_factory, capsys) -> None:
        assert main(["dataset", "delete"]) == 1
        assert "Missing dataset ID" in capsys.readouterr().err

    def test_api_error(self, credentials, mock_client_factory, capsys) -> None:
        factory = mock_client_factory(
            lambda request: httpx.Response(404, json={"message": "Dataset not found"})
        )
        with patch("trieve_cli.platform.cli.dataset.open_client", factory):
            assert main(["dataset", "delete", "ds-9"]) == 1
        assert "Error deleting dataset: API error: HTTP 404: Dataset not found" in (
            capsys.readouterr().err
        )


class TestDatasetExample:
    SEED = SeedData(
        groups=["g1"],
        chunks=[{"chunk_html": f"<p>{i}</p>", "tracking_id": str(i)} for i in range(130)],
    )

    def test_with_flags(self, credentials, client_factory, capsys) -> None:
        with patch(
            "trieve_cli.platform.cli.dataset.fetch_example", return_value=self.SEED
        ) as fetch:
            code = main(
                ["dataset", "example", "--dataset-id", "ds-1", "--example", "yc companies"]
            )

        assert code == 0
        assert fetch.call_args.args[0] is EXAMPLES["YC Companies"]
        paths = [r.url.path for r in client_factory.requests]
        assert paths == ["/api/chunk_group", "/api/chunk", "/api/chunk"]
        assert all(r.headers["TR-Dataset"] == "ds-1" for r in client_factory.requests)
        out = capsys.readouterr().out
        assert "Adding seed data to dataset: ds-1" in out
        assert "Example dataset added successfully! (130 chunks)" in out

    def test_create_flag_makes_new_dataset(self, credentials, client_factory) -> None:
        with patch(
            "trieve_cli.platform.cli.dataset.fetch_example", return_value=SeedData()
        ), patch(
            "trieve_cli.platform.cli.dataset.upload_seed_data", return_value=0
        ) as upload:
            code = main(["dataset", "example", "--create", "demo", "--example", "Trieve Docs"])

        assert code == 0
        assert json.loads(client_factory.requests[0].content)["dataset_name"] == "demo"
        assert upload.call_args.args[1] == "ds-new"

    def test_create_and_dataset_id_are_exclusive(self, credentials, client_factory) -> None:
        with pytest.raises(SystemExit):
            main(["dataset", "example", "--create", "demo", "--dataset-id", "ds-1"])

    def test_unknown_example(self, credentials, client_factory, capsys) -> None:
        assert main(["dataset", "example", "--dataset-id", "ds-1", "--example", "wiki"]) == 1
        err = capsys.readouterr().err
        assert "Unknown example 'wiki'" in err
        assert "YC Companies" in err

    def test_interactive_create_new_dataset(
        self, credentials, client_factory, interactive
    ) -> None:
        with patch(
            "trieve_cli.platform.cli.dataset.select", return_value="Trieve Docs"
        ), patch("trieve_cli.platform.cli.dataset.confirm", return_value=True), patch(
            "trieve_cli.platform.cli.dataset.text", return_value="seeded"
        ), patch(
            "trieve_cli.platform.cli.dataset.fetch_example", return_value=self.SEED
        ), patch(
            "trieve_cli.platform.cli.dataset.upload_seed_data", return_value=130
        ) as upload:
            assert main(["dataset", "example"]) == 0

        create = client_factory.requests[0]
        assert create.url.path == "/api/dataset"
        assert json.loads(create.content)["dataset_name"] == "seeded"
        assert upload.call_args.args[1] == "ds-new"

    def test_interactive_existing_dataset(
        self, credentials, client_factory, interactive
    ) -> None:
        select = MagicMock(side_effect=["PhilosophizeThis", "ds-2"])
        with patch("trieve_cli.platform.cli.dataset.select", select), patch(
            "trieve_cli.platform.cli.dataset.confirm", return_value=False
        ), patch(
            "trieve_cli.platform.cli.dataset.fetch_example", return_value=SeedData()
        ) as fetch, patch(
            "trieve_cli.platform.cli.dataset.upload_seed_data", return_value=0
        ) as upload:
            assert main(["dataset", "example"]) == 0

        assert fetch.call_args.args[0] is EXAMPLES["PhilosophizeThis"]
        assert upload.call_args.args[1] == "ds-2"

    def test_missing_dataset_non_interactive(self, credentials, client_factory, capsys) -> None:
        assert main(["dataset", "example", "--example", "Mintlify Docs"]) == 1
        assert "Missing dataset ID. Pass --dataset-id" in capsys.readouterr().err

    def test_upload_error(self, credentials, mock_client_factory, capsys) -> None:
        factory = mock_client_factory(
            lambda request: httpx.Response(400, json={"message": "Bad chunk"})
        )
        with patch("trieve_cli.platform.cli.dataset.open_client", factory), patch(
            "trieve_cli.platform.cli.dataset.fetch_example", return_value=self.SEED
        ):
            code = main(
                ["dataset", "example", "--dataset-id", "ds-1", "--example", "YC Companies"]
            )
        assert code == 1
        assert "Error adding seed data: API error: HTTP 400: Bad chunk" in (
            capsys.readouterr().err
        )


class TestDatasetUsage:
    def test_bare_group_prints_usage(self, capsys) -> None:
        assert main(["dataset"]) == 0
        assert "Usage: trieve dataset <command>" in capsys.readouterr().out
