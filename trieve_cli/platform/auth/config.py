"""Configuration constants for the Trieve CLI."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

DEFAULT_API_URL = "https://api.trieve.ai"

# Environment variables
ENV_NO_PROFILE = "TRIEVE_NO_PROFILE"
ENV_API_KEY = "TRIEVE_API_KEY"
ENV_ORG_ID = "TRIEVE_ORG_ID"
ENV_API_URL = "TRIEVE_API_URL"
ENV_CONFIG_DIR = "TRIEVE_CONFIG_DIR"

_TRUTHY = frozenset({"true", "1", "yes"})

PROFILES_FILENAME = "profiles.json"


def get_config_dir() -> Path:
    """Directory holding the profile store (``TRIEVE_CONFIG_DIR`` or ~/.config/trieve)."""
    override = os.environ.get(ENV_CONFIG_DIR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "trieve"


def get_profiles_file() -> Path:
    return get_config_dir() / PROFILES_FILENAME


PROFILES_LOCK_TIMEOUT = 10

# Browser login: the dashboard redirects back to this loopback port with ?apiKey=...
LOCAL_SERVER_HOST = "127.0.0.1"
LOCAL_SERVER_PORT = 65535
LOGIN_PATH = "/api/auth/cli"


def is_no_profile_mode(env: Mapping[str, str] | None = None) -> bool:
    """True when ``TRIEVE_NO_PROFILE`` disables the profile store."""
    source = os.environ if env is None else env
    return source.get(ENV_NO_PROFILE, "").strip().lower() in _TRUTHY
