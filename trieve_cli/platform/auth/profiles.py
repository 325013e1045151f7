"""Persisted credential profiles.

The store is a JSON document holding every named profile plus a pointer
to the active one:

    {
      "active": "work",
      "profiles": [
        {"name": "work", "api_key": "tr-...", "org_id": "...", "api_url": "https://api.trieve.ai"}
      ]
    }

File: ~/.config/trieve/profiles.json (or $TRIEVE_CONFIG_DIR/profiles.json)

All mutation goes through the ``ProfileStore`` update methods, applied
inside ``edit_store()`` so the read-modify-write happens under a file lock.
Nothing here is touched when TRIEVE_NO_PROFILE is set.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import urlparse

import filelock
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .config import (
    DEFAULT_API_URL,
    ENV_NO_PROFILE,
    PROFILES_LOCK_TIMEOUT,
    get_profiles_file,
    is_no_profile_mode,
)

logger = logging.getLogger(__name__)


class ProfileStoreError(Exception):
    """Raised when the profile store cannot be read, written, or is inconsistent."""

    pass


class ProfileNotFoundError(Exception):
    """Raised when a referenced profile name does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Profile '{name}' not found.")
        self.name = name


def normalize_api_url(value: str) -> str:
    """Validate an API base URL and strip trailing slashes."""
    value = value.strip().rstrip("/")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https"):
        raise ValueError("api_url must use http or https scheme")
    if not parsed.netloc:
        raise ValueError("api_url must have a valid host")
    return value


class Profile(BaseModel):
    """A named bundle of credentials."""

    name: str
    api_key: str
    org_id: str
    api_url: str = DEFAULT_API_URL

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("profile name cannot be empty")
        return v

    @field_validator("api_key", "org_id")
    @classmethod
    def validate_credential(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("value cannot be empty")
        return v

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        return normalize_api_url(v)

    def masked_key(self) -> str:
        """API key shortened for display, e.g. ``tr-...a1b2``."""
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:3]}...{self.api_key[-4:]}"


class ProfileStore(BaseModel):
    """Every saved profile plus the active-profile pointer."""

    profiles: list[Profile] = Field(default_factory=list)
    active: str | None = None

    @model_validator(mode="after")
    def validate_integrity(self) -> ProfileStore:
        names = [p.name for p in self.profiles]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate profile names: {', '.join(duplicates)}")
        if self.active is not None and self.active not in names:
            raise ValueError(
                f"active profile '{self.active}' does not match any saved profile"
            )
        return self

    # ── Queries ──────────────────────────────────────────────────────

    def names(self) -> list[str]:
        return [p.name for p in self.profiles]

    def get(self, name: str) -> Profile | None:
        for profile in self.profiles:
            if profile.name == name:
                return profile
        return None

    def require(self, name: str) -> Profile:
        profile = self.get(name)
        if profile is None:
            raise ProfileNotFoundError(name)
        return profile

    def active_profile(self) -> Profile | None:
        if self.active is None:
            return None
        return self.get(self.active)

    # ── Updates ──────────────────────────────────────────────────────

    def upsert(self, profile: Profile, *, activate: bool = True) -> None:
        """Add *profile*, replacing any profile with the same name."""
        for i, existing in enumerate(self.profiles):
            if existing.name == profile.name:
                self.profiles[i] = profile
                break
        else:
            self.profiles.append(profile)
        if activate:
            self.active = profile.name

    def switch(self, name: str) -> Profile:
        """Point the active pointer at *name*. Profile contents are unchanged."""
        profile = self.require(name)
        self.active = name
        return profile

    def delete(self, name: str) -> Profile:
        """Remove *name*; clears the active pointer if it was active."""
        profile = self.require(name)
        self.profiles = [p for p in self.profiles if p.name != name]
        if self.active == name:
            self.active = None
        return profile

    def set_active_org(self, org_id: str) -> Profile:
        """Change the organization of the active profile."""
        current = self.active_profile()
        if current is None:
            raise ProfileStoreError(
                "No active profile. Run 'trieve login' or 'trieve profile switch' first."
            )
        updated = current.model_copy(update={"org_id": org_id})
        self.upsert(updated)
        return updated


# ── Persistence ──────────────────────────────────────────────────────


def _check_enabled() -> None:
    if is_no_profile_mode():
        raise ProfileStoreError(
            f"Profiles are disabled because {ENV_NO_PROFILE} is set. "
            "Unset it to use saved profiles."
        )


def load_store(path: Path | None = None) -> ProfileStore:
    """Read the profile store. A missing file is an empty store.

    Raises:
        ProfileStoreError: If the file is unreadable, not JSON, or inconsistent,
            or if TRIEVE_NO_PROFILE is set.
    """
    _check_enabled()
    path = path or get_profiles_file()
    if not path.exists():
        logger.debug("No profile store at %s", path)
        return ProfileStore()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ProfileStoreError(f"Cannot read profile store {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ProfileStoreError(f"Profile store {path} is not valid JSON: {e}") from e

    try:
        store = ProfileStore.model_validate(data)
    except ValidationError as e:
        detail = e.errors()[0]["msg"] if e.errors() else str(e)
        raise ProfileStoreError(f"Profile store {path} is corrupt: {detail}") from e

    logger.debug("Loaded %d profile(s) from %s", len(store.profiles), path)
    return store


def save_store(store: ProfileStore, path: Path | None = None) -> None:
    """Atomically write the profile store, readable by the owner only."""
    _check_enabled()
    path = path or get_profiles_file()
    temp = path.with_suffix(".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(temp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(store.model_dump(), f, indent=2)
            f.write("\n")
        os.chmod(temp, 0o600)
        temp.replace(path)
    except OSError as e:
        if temp.exists():
            temp.unlink()
        raise ProfileStoreError(f"Cannot write profile store {path}: {e}") from e
    logger.debug("Saved %d profile(s) to %s", len(store.profiles), path)


@contextmanager
def edit_store(path: Path | None = None) -> Iterator[ProfileStore]:
    """Load the store under a file lock, yield it, and save it on success.

    If the body raises, nothing is written.
    """
    _check_enabled()
    path = path or get_profiles_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        lock = filelock.FileLock(str(path.with_suffix(".lock")), timeout=PROFILES_LOCK_TIMEOUT)
        lock.acquire()
    except filelock.Timeout as e:
        raise ProfileStoreError(
            f"Another trieve command is updating {path}. Try again shortly."
        ) from e
    except OSError as e:
        raise ProfileStoreError(f"Cannot lock profile store {path}: {e}") from e

    try:
        store = load_store(path)
        yield store
        save_store(store, path)
    finally:
        lock.release()


__all__ = [
    "Profile",
    "ProfileNotFoundError",
    "ProfileStore",
    "ProfileStoreError",
    "edit_store",
    "load_store",
    "normalize_api_url",
    "save_store",
]
