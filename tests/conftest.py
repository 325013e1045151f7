"""Shared pytest fixtures for trieve_cli tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from trieve_cli.cli.console import console
from trieve_cli.platform.api.client import TrieveClient
from trieve_cli.platform.auth import EffectiveConfiguration, Profile
from trieve_cli.platform.auth.config import get_profiles_file

# Every module that imports is_interactive by name.
_INTERACTIVE_SITES = (
    "trieve_cli.cli.inputs.is_interactive",
    "trieve_cli.platform.cli.login.is_interactive",
    "trieve_cli.platform.cli.dataset.is_interactive",
)

ORG_ID = "3c90c3cc-0d44-4b50-8888-8dd25736052a"
OTHER_ORG_ID = "6f9619ff-8b86-d011-b42d-00c04fc964ff"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the profile store at a temp dir and clear TRIEVE_* variables."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("TRIEVE_CONFIG_DIR", str(config_dir))
    for name in ("TRIEVE_API_KEY", "TRIEVE_ORG_ID", "TRIEVE_API_URL", "TRIEVE_NO_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    for site in _INTERACTIVE_SITES:
        monkeypatch.setattr(site, lambda: False)
    # Tables are sized to the terminal; keep rows on one line under capture.
    monkeypatch.setattr(console._out, "_width", 200)
    return config_dir


@pytest.fixture
def interactive(monkeypatch: pytest.MonkeyPatch) -> None:
    """Behave as if stdin were a terminal."""
    for site in _INTERACTIVE_SITES:
        monkeypatch.setattr(site, lambda: True)


@pytest.fixture
def profiles_path() -> Path:
    return get_profiles_file()


@pytest.fixture
def make_profile() -> Callable[..., Profile]:
    def _make(name: str = "work", **overrides: str) -> Profile:
        fields = {"api_key": f"tr-key-{name}", "org_id": ORG_ID}
        fields.update(overrides)
        return Profile(name=name, **fields)

    return _make


@pytest.fixture
def mock_client_factory() -> Callable[..., Callable[[EffectiveConfiguration], TrieveClient]]:
    """Build an ``open_client`` replacement whose requests go to *handler*.

    Each request is also appended to the returned factory's ``requests`` list.
    """

    def _factory(handler: Callable[[httpx.Request], httpx.Response]):
        requests: list[httpx.Request] = []

        def _recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        def _open(config: EffectiveConfiguration) -> TrieveClient:
            return TrieveClient(config, transport=httpx.MockTransport(_recording))

        _open.requests = requests  # type: ignore[attr-defined]
        return _open

    return _factory
