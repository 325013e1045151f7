"""Trieve API client for dataset, API key and organization management."""

from .client import TrieveAPIError, TrieveClient
from .models import ApiKey, Dataset, DatasetAndUsage, Organization, User

__all__ = [
    "ApiKey",
    "Dataset",
    "DatasetAndUsage",
    "Organization",
    "TrieveAPIError",
    "TrieveClient",
    "User",
]
