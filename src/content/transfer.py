"""Export and import of the whole record collection.

Exports are JSON only.  ``csv`` and ``xml`` are recognised format names
but are rejected with a TransferError rather than silently written as
JSON.  Imports accept either a bare list of records or an object with a
``content`` list, and never deduplicate.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Literal

from medcms.content.models import ContentRecord, utc_now
from medcms.content.storage import STORAGE_KEY, STORAGE_VERSION
from medcms.shared.errors import TransferError
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as SchemaError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

ExportFormat = Literal["json", "csv", "xml"]
SUPPORTED_FORMATS: frozenset[str] = frozenset({"json"})
DEFAULT_EXPORTER = "CMS User"

_records_adapter = TypeAdapter(list[ContentRecord])


class ExportMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_items: int
    exported_by: str = DEFAULT_EXPORTER
    format: ExportFormat = "json"


class ExportData(BaseModel):
    """A full snapshot of the collection, as written to an export file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: list[ContentRecord] = Field(default_factory=list)
    export_date: datetime
    version: str = STORAGE_VERSION
    metadata: ExportMetadata

    def to_json(self) -> str:
        return json.dumps(
            self.model_dump(mode="json", by_alias=True, exclude_none=True),
            indent=2,
            ensure_ascii=False,
        )


def build_export(
    records: list[ContentRecord],
    fmt: str = "json",
    exported_by: str = DEFAULT_EXPORTER,
    now: datetime | None = None,
) -> ExportData:
    """Snapshot *records* into an export artifact.

    Raises TransferError for any format other than ``json``.
    """
    if fmt not in SUPPORTED_FORMATS:
        raise TransferError(f"Unsupported export format: {fmt}")
    return ExportData(
        content=list(records),
        export_date=now or utc_now(),
        metadata=ExportMetadata(total_items=len(records), exported_by=exported_by, format=fmt),
    )


def export_filename(now: datetime | None = None) -> str:
    """``disease-prevention-cms-<YYYY-MM-DD>.json``"""
    stamp = (now or utc_now()).date().isoformat()
    return f"{STORAGE_KEY}-{stamp}.json"


def write_export(data: ExportData, directory: Path) -> Path:
    """Write *data* into *directory* under the dated export filename."""
    path = directory / export_filename(data.export_date)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(data.to_json(), encoding="utf-8")
    except OSError as exc:
        raise TransferError(f"Could not write export to {path}: {exc}") from exc
    logger.info("Wrote export with %d items to %s", data.metadata.total_items, path)
    return path


def parse_import(text: str) -> list[ContentRecord]:
    """Parse an import artifact into records.

    Raises TransferError on malformed JSON, a missing or non-list
    ``content``, or records that do not match the record schema.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TransferError(f"Import file is not valid JSON: {exc}") from exc

    items = data.get("content") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise TransferError("Import file must contain a list of records")

    try:
        return _records_adapter.validate_python(items)
    except SchemaError as exc:
        raise TransferError(f"Import file contains invalid records: {exc}") from exc


async def read_import(path: Path) -> list[ContentRecord]:
    """Read and parse an import artifact without blocking the event loop."""
    if path.suffix.lower() != ".json":
        raise TransferError(f"Unsupported import file type: {path.name}")
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TransferError(f"Could not read {path}: {exc}") from exc
    return parse_import(text)
