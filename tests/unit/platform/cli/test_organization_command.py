"""Tests for `trieve organization switch`."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from trieve_cli.cli.main import main
from trieve_cli.platform.auth import edit_store, load_store

ORG = "3c90c3cc-0d44-4b50-8888-8dd25736052a"
OTHER_ORG = "6f9619ff-8b86-d011-b42d-00c04fc964ff"


@pytest.fixture
def saved(make_profile):
    with edit_store() as store:
        store.upsert(make_profile("personal"))
        store.upsert(make_profile("work", org_id=ORG))


@pytest.fixture
def client_factory(mock_client_factory):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "id": "user-1",
                "email": "dev@example.com",
                "orgs": [{"id": ORG, "name": "Acme"}, {"id": OTHER_ORG, "name": "Side"}],
            },
        )

    factory = mock_client_factory(handler)
    with patch("trieve_cli.platform.cli.organization.open_client", factory):
        yield factory


class TestOrganizationSwitch:
    def test_switch_with_flag(self, saved, client_factory, capsys) -> None:
        assert main(["organization", "switch", "--org-id", OTHER_ORG]) == 0

        store = load_store()
        assert store.active == "work"
        assert store.require("work").org_id == OTHER_ORG
        assert store.require("personal").org_id == ORG
        assert client_factory.requests == []
        assert f"Switched profile 'work' to organization '{OTHER_ORG}'" in (
            capsys.readouterr().out
        )

    def test_interactive_selection(self, saved, client_factory, interactive) -> None:
        select = MagicMock(return_value=OTHER_ORG)
        with patch("trieve_cli.platform.cli.organization.select", select):
            assert main(["organization", "switch"]) == 0

        assert client_factory.requests[0].url.path == "/api/auth/me"
        assert client_factory.requests[0].headers["Authorization"] == "tr-key-work"
        assert select.call_args.kwargs["default"] == ORG
        assert load_store().require("work").org_id == OTHER_ORG

    def test_invalid_org_id(self, saved, client_factory, capsys) -> None:
        assert main(["organization", "switch", "--org-id", "not-a-uuid"]) == 1
        assert "Invalid organization ID: not-a-uuid" in capsys.readouterr().err
        assert load_store().require("work").org_id == ORG

    def test_missing_org_non_interactive(self, saved, client_factory, capsys) -> None:
        assert main(["organization", "switch"]) == 1
        assert "Missing organization ID. Pass --org-id" in capsys.readouterr().err

    def test_without_active_profile(self, saved, client_factory, capsys, monkeypatch) -> None:
        with edit_store() as store:
            store.delete("work")
        monkeypatch.setenv("TRIEVE_API_KEY", "tr-env")

        assert main(["organization", "switch", "--org-id", OTHER_ORG]) == 1
        assert "No active profile" in capsys.readouterr().err

    def test_refused_in_no_profile_mode(self, saved, client_factory, monkeypatch, capsys) -> None:
        monkeypatch.setenv("TRIEVE_NO_PROFILE", "yes")
        assert main(["organization", "switch", "--org-id", OTHER_ORG]) == 1
        assert "TRIEVE_NO_PROFILE" in capsys.readouterr().err
        monkeypatch.delenv("TRIEVE_NO_PROFILE")
        assert load_store().require("work").org_id == ORG
