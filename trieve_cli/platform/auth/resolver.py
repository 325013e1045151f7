"""Resolve the credentials used for one CLI invocation.

Each field is taken from the first source that provides it:

    1. explicit command-line flag   (--api-key, --org-id, --api-url)
    2. environment variable         (TRIEVE_API_KEY, TRIEVE_ORG_ID, TRIEVE_API_URL)
    3. the active saved profile
    4. built-in default             (api_url only: https://api.trieve.ai)

With TRIEVE_NO_PROFILE=true step 3 is skipped entirely: the profile store
is neither read nor written, so the key and organization must come from
flags or the environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from .config import (
    DEFAULT_API_URL,
    ENV_API_KEY,
    ENV_API_URL,
    ENV_NO_PROFILE,
    ENV_ORG_ID,
    is_no_profile_mode,
)
from .profiles import Profile, ProfileStore, load_store, normalize_api_url

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the resolved configuration is unusable."""

    pass


class MissingCredentialError(ConfigurationError):
    """Raised when a required credential is absent after full resolution.

    Attributes:
        variable: Environment variable that would have supplied the value.
    """

    def __init__(self, variable: str, message: str):
        super().__init__(message)
        self.variable = variable


@dataclass(frozen=True)
class CredentialFlags:
    """Credential values passed explicitly on the command line."""

    api_key: str | None = None
    org_id: str | None = None
    api_url: str | None = None


@dataclass(frozen=True)
class EffectiveConfiguration:
    """Credentials for a single invocation. Never persisted."""

    api_key: str
    org_id: str
    api_url: str


_FIELDS = (
    ("api_key", ENV_API_KEY, "--api-key", "API key"),
    ("org_id", ENV_ORG_ID, "--org-id", "organization ID"),
    ("api_url", ENV_API_URL, "--api-url", "API URL"),
)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def resolve_configuration(
    flags: CredentialFlags | None = None,
    env: Mapping[str, str] | None = None,
    store_loader: Callable[[], ProfileStore] = load_store,
    *,
    require_org: bool = True,
) -> EffectiveConfiguration:
    """Merge flags, environment and the active profile into one configuration.

    Args:
        flags: Values given on the command line.
        env: Environment mapping (defaults to ``os.environ``).
        store_loader: Returns the persisted profile store. Only called when a
            field is still unresolved after flags and environment, and never
            in no-profile mode.
        require_org: When False a missing organization resolves to ``""``.

    Raises:
        MissingCredentialError: A required field has no source.
        ConfigurationError: The API URL is malformed.
        ProfileStoreError: The profile store could not be read.
    """
    flags = flags or CredentialFlags()
    env = os.environ if env is None else env
    no_profile = is_no_profile_mode(env)

    values: dict[str, str | None] = {}
    for field, variable, flag, _ in _FIELDS:
        value = _clean(getattr(flags, field))
        source = flag
        if value is None:
            value = _clean(env.get(variable))
            source = variable
        if value is not None:
            logger.debug("%s taken from %s", field, source)
        values[field] = value

    profile: Profile | None = None
    if not no_profile and any(v is None for v in values.values()):
        profile = store_loader().active_profile()
        if profile is not None:
            for field, _, _, _ in _FIELDS:
                if values[field] is None:
                    values[field] = _clean(getattr(profile, field))
                    logger.debug("%s taken from profile '%s'", field, profile.name)

    if values["api_url"] is None:
        values["api_url"] = DEFAULT_API_URL
    try:
        api_url = normalize_api_url(values["api_url"])
    except ValueError as e:
        raise ConfigurationError(f"Invalid API URL {values['api_url']!r}: {e}") from None

    for field, variable, flag, label in _FIELDS[:2]:
        if values[field] is not None:
            continue
        if field == "org_id" and not require_org:
            values[field] = ""
            continue
        raise MissingCredentialError(
            variable, _missing_message(label, variable, flag, no_profile)
        )

    return EffectiveConfiguration(
        api_key=values["api_key"] or "",
        org_id=values["org_id"] or "",
        api_url=api_url,
    )


def _missing_message(label: str, variable: str, flag: str, no_profile: bool) -> str:
    if no_profile:
        return (
            f"No {label} configured: {variable} must be set when "
            f"{ENV_NO_PROFILE} is enabled (or pass {flag})."
        )
    return (
        f"No {label} configured. Set {variable}, pass {flag}, "
        "or run 'trieve login' to create a profile."
    )


__all__ = [
    "ConfigurationError",
    "CredentialFlags",
    "EffectiveConfiguration",
    "MissingCredentialError",
    "resolve_configuration",
]
