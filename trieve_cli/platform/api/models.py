"""Data models for Trieve API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _date_part(value: str) -> str:
    """Return the YYYY-MM-DD part of an ISO timestamp, or the raw value."""
    try:
        return datetime.fromisoformat(value).date().isoformat()
    except (TypeError, ValueError):
        return value or ""


@dataclass
class Dataset:
    """A dataset in an organization."""

    id: str
    name: str
    organization_id: str
    created_at: str = ""
    updated_at: str = ""
    tracking_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dataset:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            organization_id=data.get("organization_id", ""),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            tracking_id=data.get("tracking_id"),
        )

    @property
    def created_date(self) -> str:
        return _date_part(self.created_at)

    @property
    def updated_date(self) -> str:
        return _date_part(self.updated_at)


@dataclass
class DatasetAndUsage:
    """A dataset together with its chunk usage, as listed per organization."""

    dataset: Dataset
    chunk_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DatasetAndUsage:
        usage = data.get("dataset_usage") or {}
        return cls(
            dataset=Dataset.from_dict(data["dataset"]),
            chunk_count=usage.get("chunk_count", 0),
        )

    def label(self) -> str:
        """Display label used in selection prompts."""
        return f"{self.dataset.name} - {self.dataset.id}"


@dataclass
class Organization:
    """An organization the user belongs to."""

    id: str
    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Organization:
        return cls(id=data["id"], name=data.get("name", ""))

    def label(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass
class User:
    """The authenticated user, as returned by /api/auth/me."""

    id: str
    email: str
    name: str | None = None
    orgs: list[Organization] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=data["id"],
            email=data.get("email", ""),
            name=data.get("name"),
            orgs=[Organization.from_dict(o) for o in data.get("orgs", [])],
        )


@dataclass
class ApiKey:
    """A newly generated API key."""

    api_key: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApiKey:
        return cls(api_key=data["api_key"])
