"""Example datasets that can be loaded into a Trieve dataset.

Each example is published as a public CSV or JSON file. Loading one means
downloading it, turning every row into a chunk payload, creating any chunk
groups the chunks reference, and uploading the chunks in batches.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from .client import CHUNK_BATCH_SIZE, TrieveClient

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 60.0

YC_COMPANIES_URL = (
    "https://gist.githubusercontent.com/densumesh/127bd58e026ccadaea58dc1aa3ad9648/raw/"
    "1dcf2fe14954047064ef5cfbec43bf74d54365d8/yc-company-data.csv"
)
PHILOSOPHIZE_THIS_GROUPS_URL = (
    "https://gist.githubusercontent.com/densumesh/241be979beb48b05a01591b7ff40ddca/raw/"
    "83ad1c0c75c016832368183fc2cb86cb3d7f9c50/philosiphizethis-epLinks.csv"
)
PHILOSOPHIZE_THIS_CHUNKS_URL = (
    "https://gist.githubusercontent.com/densumesh/33f34fa0ca115723b2c25a862a2d2a4b/raw/"
    "f282e21f12ccaa2ad10a8fa831d238fa4a8aa1b0/philosiphizethis-chunksToCreate.csv"
)
TRIEVE_DOCS_URL = (
    "https://gist.githubusercontent.com/skeptrunedev/dc34aa54f7810c913794ad045cc767d2/raw/"
    "4205cf3ab0dd55fccdc3a336bc26ce6a16b82cf3/trieve-mintlify-docs-chunks.json"
)
MINTLIFY_DOCS_URL = (
    "https://gist.githubusercontent.com/densumesh/0400c4519e55dfcd8d8d2e4a171fc531/raw/"
    "df73e08c4173128ba321f506ff763b2bdce4e273/mintlify_chunks.json"
)


class ExampleDataError(Exception):
    """Raised when example data cannot be downloaded or parsed."""

    pass


@dataclass
class SeedData:
    """Chunk groups (by tracking id) and chunk payloads to upload."""

    groups: list[str] = field(default_factory=list)
    chunks: list[dict[str, Any]] = field(default_factory=list)


# ── Parsers ──────────────────────────────────────────────────────────


def _csv_rows(text: str, delimiter: str = ",") -> Iterator[list[str]]:
    """Yield CSV rows after the header row."""
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    next(reader, None)
    for row in reader:
        if row:
            yield row


def parse_yc_companies(text: str) -> SeedData:
    """Parse the YC companies CSV.

    Columns: chunk_html, link, tag_set ('|'-separated), tracking_id, metadata.
    Commas inside fields are stored as ';' in the source file.
    """
    chunks = []
    for i, row in enumerate(_csv_rows(text), 2):
        if len(row) < 5:
            raise ExampleDataError(f"YC companies row {i}: expected 5 columns, got {len(row)}")
        try:
            metadata = json.loads(row[4].replace(";", ","))
        except json.JSONDecodeError as e:
            raise ExampleDataError(f"YC companies row {i}: invalid metadata - {e}") from e
        chunks.append(
            {
                "chunk_html": row[0].replace(";", ","),
                "link": row[1].replace(";", ","),
                "tag_set": row[2].split("|"),
                "tracking_id": row[3],
                "metadata": metadata,
                "upsert_by_tracking_id": True,
            }
        )
    return SeedData(chunks=chunks)


def parse_philosophize_this(groups_text: str, chunks_text: str) -> SeedData:
    """Parse the episode-links CSV and the '|'-delimited episode chunks CSV."""
    groups = [row[1] for row in _csv_rows(groups_text) if len(row) > 1]
    chunks = []
    for i, row in enumerate(_csv_rows(chunks_text, delimiter="|"), 2):
        if len(row) < 7:
            raise ExampleDataError(
                f"PhilosophizeThis row {i}: expected 7 columns, got {len(row)}"
            )
        chunks.append(
            {
                "group_tracking_ids": [row[0]],
                "tracking_id": row[1],
                "chunk_html": row[2],
                "time_stamp": row[3],
                "link": row[4],
                "metadata": {"episode_number": row[5], "episode_title": row[6]},
                "upsert_by_tracking_id": True,
            }
        )
    return SeedData(groups=groups, chunks=chunks)


def parse_json_chunks(items: Any) -> SeedData:
    """Parse a JSON array of chunk objects.

    ``tag_set`` is a comma-separated string in the source; groups are the
    union of every chunk's ``group_tracking_ids`` in first-seen order.
    """
    if not isinstance(items, list):
        raise ExampleDataError("Example data must be a JSON array of chunks")

    groups: dict[str, None] = {}
    chunks = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ExampleDataError(f"Chunk {i} is not an object")
        group_ids = item.get("group_tracking_ids") or []
        for group_id in group_ids:
            groups.setdefault(str(group_id), None)
        tag_set = item.get("tag_set")
        chunk: dict[str, Any] = {
            "chunk_html": item.get("chunk_html"),
            "link": item.get("link"),
            "tracking_id": item.get("tracking_id"),
            "metadata": item.get("metadata") if isinstance(item.get("metadata"), dict) else None,
            "tag_set": tag_set.split(",") if isinstance(tag_set, str) else None,
            "upsert_by_tracking_id": True,
        }
        if group_ids:
            chunk["group_tracking_ids"] = [str(g) for g in group_ids]
        chunks.append(chunk)
    return SeedData(groups=list(groups), chunks=chunks)


# ── Catalog ──────────────────────────────────────────────────────────


def _download(http: httpx.Client, url: str) -> httpx.Response:
    logger.debug("Downloading example data from %s", url)
    try:
        response = http.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise ExampleDataError(f"Failed to download example data: {e}") from e
    return response


def _load_json(http: httpx.Client, url: str) -> SeedData:
    response = _download(http, url)
    try:
        return parse_json_chunks(response.json())
    except ValueError as e:
        raise ExampleDataError(f"Example data at {url} is not valid JSON") from e


@dataclass(frozen=True)
class ExampleDataset:
    name: str
    description: str
    load: Callable[[httpx.Client], SeedData]


EXAMPLES: dict[str, ExampleDataset] = {
    e.name: e
    for e in (
        ExampleDataset(
            "YC Companies",
            "Y Combinator company descriptions",
            lambda http: parse_yc_companies(_download(http, YC_COMPANIES_URL).text),
        ),
        ExampleDataset(
            "PhilosophizeThis",
            "Philosophize This! podcast transcripts grouped by episode",
            lambda http: parse_philosophize_this(
                _download(http, PHILOSOPHIZE_THIS_GROUPS_URL).text,
                _download(http, PHILOSOPHIZE_THIS_CHUNKS_URL).text,
            ),
        ),
        ExampleDataset(
            "Trieve Docs",
            "Trieve documentation pages",
            lambda http: _load_json(http, TRIEVE_DOCS_URL),
        ),
        ExampleDataset(
            "Mintlify Docs",
            "Mintlify documentation pages",
            lambda http: _load_json(http, MINTLIFY_DOCS_URL),
        ),
    )
}


def find_example(name: str) -> ExampleDataset | None:
    """Look up an example by name, ignoring case and spaces."""
    key = name.replace(" ", "").lower()
    for example in EXAMPLES.values():
        if example.name.replace(" ", "").lower() == key:
            return example
    return None


def fetch_example(example: ExampleDataset) -> SeedData:
    with httpx.Client(timeout=DOWNLOAD_TIMEOUT, follow_redirects=True) as http:
        return example.load(http)


# ── Upload ───────────────────────────────────────────────────────────


def batched(items: list[Any], size: int = CHUNK_BATCH_SIZE) -> Iterator[list[Any]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def upload_seed_data(
    client: TrieveClient,
    dataset_id: str,
    seed: SeedData,
    progress_callback: Callable[[int, int], None] | None = None,
) -> int:
    """Create groups, then upload chunks batch by batch.

    Groups must exist before chunks that reference them are created.

    Returns:
        Number of chunks uploaded.
    """
    for group in seed.groups:
        client.create_chunk_group(dataset_id, name=group, tracking_id=group)
    if seed.groups:
        logger.debug("Created %d chunk group(s)", len(seed.groups))

    uploaded = 0
    total = len(seed.chunks)
    for batch in batched(seed.chunks):
        client.create_chunks(dataset_id, batch)
        uploaded += len(batch)
        if progress_callback:
            progress_callback(uploaded, total)
    return uploaded
