"""HTTP client for the Trieve API.

Every request is authenticated with the resolved API key and routed with
the resolved organization and base URL. No retries: one CLI command maps
to the calls it needs and any failure is surfaced as ``TrieveAPIError``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from trieve_cli.consts import PACKAGE_VERSION
from trieve_cli.platform.auth.resolver import EffectiveConfiguration

from .models import ApiKey, Dataset, DatasetAndUsage, User

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
UPLOAD_TIMEOUT = 120.0
CHUNK_BATCH_SIZE = 120

API_KEY_ROLES = {"read": 0, "read-write": 1}

DEFAULT_SERVER_CONFIGURATION: dict[str, Any] = {
    "LLM_BASE_URL": "",
    "LLM_DEFAULT_MODEL": "",
    "EMBEDDING_BASE_URL": "https://embedding.trieve.ai",
    "RAG_PROMPT": "",
    "EMBEDDING_SIZE": 768,
    "N_RETRIEVALS_TO_INCLUDE": 8,
    "DUPLICATE_DISTANCE_THRESHOLD": 1.1,
    "DOCUMENT_UPLOAD_FEATURE": True,
    "DOCUMENT_DOWNLOAD_FEATURE": True,
    "COLLISIONS_ENABLED": False,
    "FULLTEXT_ENABLED": True,
}


class TrieveAPIError(Exception):
    """Raised when a Trieve API call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    """Build an error message carrying the remote status and message as sent."""
    detail = ""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        detail = str(body["message"])
    elif response.text:
        detail = response.text.strip()
    message = f"API error: HTTP {response.status_code}"
    return f"{message}: {detail}" if detail else message


class TrieveClient:
    """Client for the Trieve REST API.

    Use as a context manager so the underlying connection pool is closed::

        with TrieveClient(config) as client:
            datasets = client.list_datasets()
    """

    def __init__(
        self,
        config: EffectiveConfiguration,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        headers = {
            "Authorization": config.api_key,
            "User-Agent": f"trieve-cli/{PACKAGE_VERSION}",
        }
        if config.org_id:
            headers["TR-Organization"] = config.org_id
        self._http = httpx.Client(
            base_url=config.api_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> TrieveClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        dataset_id: str | None = None,
        timeout: float | None = None,
    ) -> Any:
        kwargs: dict[str, Any] = {}
        if json is not None:
            kwargs["json"] = json
        if params:
            kwargs["params"] = params
        if dataset_id:
            kwargs["headers"] = {"TR-Dataset": dataset_id}
        if timeout is not None:
            kwargs["timeout"] = timeout

        logger.debug("%s %s", method, path)
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise TrieveAPIError(f"Request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            raise TrieveAPIError(f"Connection error: {e}") from e
        logger.debug("%s %s -> %d", method, path, response.status_code)

        if response.is_error:
            raise TrieveAPIError(_error_message(response), response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise TrieveAPIError(
                "Invalid JSON response from Trieve API", response.status_code
            ) from None

    # ── Auth ─────────────────────────────────────────────────────────

    def get_me(self) -> User:
        """GET /api/auth/me: the user owning the API key and their organizations."""
        return User.from_dict(self._request("GET", "/api/auth/me"))

    # ── Datasets ─────────────────────────────────────────────────────

    def list_datasets(
        self, limit: int | None = None, offset: int | None = None
    ) -> list[DatasetAndUsage]:
        params = {
            k: v for k, v in (("limit", limit), ("offset", offset)) if v is not None
        }
        data = self._request(
            "GET", f"/api/dataset/organization/{self.config.org_id}", params=params
        )
        return [DatasetAndUsage.from_dict(d) for d in data or []]

    def create_dataset(
        self, name: str, server_configuration: dict[str, Any] | None = None
    ) -> Dataset:
        payload = {
            "dataset_name": name,
            "organization_id": self.config.org_id,
            "server_configuration": server_configuration
            or DEFAULT_SERVER_CONFIGURATION,
        }
        return Dataset.from_dict(self._request("POST", "/api/dataset", json=payload))

    def delete_dataset(self, dataset_id: str) -> None:
        self._request("DELETE", f"/api/dataset/{dataset_id}", dataset_id=dataset_id)

    # ── API keys ─────────────────────────────────────────────────────

    def create_api_key(self, name: str, role: str) -> ApiKey:
        if role not in API_KEY_ROLES:
            raise ValueError(
                f"Unknown role {role!r}. Expected one of: {', '.join(API_KEY_ROLES)}"
            )
        data = self._request(
            "POST",
            "/api/user/api_key",
            json={"name": name, "role": API_KEY_ROLES[role]},
        )
        return ApiKey.from_dict(data)

    # ── Chunks ───────────────────────────────────────────────────────

    def create_chunks(self, dataset_id: str, chunks: list[dict[str, Any]]) -> None:
        if len(chunks) > CHUNK_BATCH_SIZE:
            raise ValueError(
                f"At most {CHUNK_BATCH_SIZE} chunks per request, got {len(chunks)}"
            )
        self._request(
            "POST",
            "/api/chunk",
            json=chunks,
            dataset_id=dataset_id,
            timeout=UPLOAD_TIMEOUT,
        )

    def create_chunk_group(self, dataset_id: str, name: str, tracking_id: str) -> None:
        self._request(
            "POST",
            "/api/chunk_group",
            json={"name": name, "tracking_id": tracking_id},
            dataset_id=dataset_id,
        )
