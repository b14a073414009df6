"""Repository façade — the single entry point to the content store.

Mutations are validated, applied to the in-memory collection and then
persisted synchronously.  ``filtered_content`` and ``stats`` are
recomputed from the current records and criteria on every access.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import string
from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from medcms.content.models import (
    ContentDraft,
    ContentRecord,
    ContentStatus,
    ContentType,
    UpdateRequest,
    ValidationResult,
    metadata_key,
    utc_now,
)
from medcms.content.query import (
    ALL,
    ContentStats,
    QueryCriteria,
    SortKey,
    SortOrder,
    apply_query,
    compute_stats,
)
from medcms.content.storage import KeyValueStorage, RecordStore
from medcms.content.transfer import (
    DEFAULT_EXPORTER,
    ExportData,
    build_export,
    read_import,
    write_export,
)
from medcms.content.validation import validate
from medcms.shared.errors import PersistenceError, ValidationError
from medcms.shared.timing import NullTimer, Timer
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"

_ID_ALPHABET = string.digits + string.ascii_lowercase

Candidate = ContentDraft | ContentRecord | Mapping[str, Any]


def _as_dict(candidate: Candidate) -> dict[str, Any]:
    if isinstance(candidate, BaseModel):
        return candidate.model_dump(mode="json", by_alias=True, exclude_none=True)
    metadata = candidate.get("metadata")
    return {**candidate, "metadata": dict(metadata) if isinstance(metadata, Mapping) else {}}


class ContentRepository:
    """CRUD, query and transfer operations over one record store.

    Call ``load`` (a coroutine) once before trusting ``filtered_content``;
    ``is_loading`` stays true until it completes.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        timer: Timer | None = None,
        clock: Callable[[], datetime] = utc_now,
        exported_by: str = DEFAULT_EXPORTER,
    ) -> None:
        self._timer = timer or NullTimer()
        self._store = RecordStore(storage, timer=self._timer)
        self._clock = clock
        self._exported_by = exported_by
        self.criteria = QueryCriteria()
        self.is_loading = True
        self.last_warnings: list[str] = []

    # ── State ────────────────────────────────────────────────────

    @property
    def records(self) -> list[ContentRecord]:
        return list(self._store.records)

    @property
    def error(self) -> str | None:
        return self._store.error

    @property
    def filtered_content(self) -> list[ContentRecord]:
        return apply_query(self._store.records, self.criteria)

    @property
    def stats(self) -> ContentStats:
        return compute_stats(self._store.records)

    async def load(self) -> None:
        """Hydrate the store from durable storage (seeding it if empty)."""
        try:
            with self._timer.measure("cms-load"):
                await asyncio.to_thread(self._store.load)
        finally:
            self.is_loading = False

    # ── Helpers ──────────────────────────────────────────────────

    def _new_id(self, now: datetime) -> str:
        taken = self._store.ids()
        millis = int(now.timestamp() * 1000)
        while True:
            suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
            candidate = f"{millis}-{suffix}"
            if candidate not in taken:
                return candidate

    def _check(self, payload: Mapping[str, Any], action: str) -> ValidationResult:
        result = validate(payload)
        if not result.is_valid:
            logger.warning("Content %s validation failed: %s", action, result.errors)
            raise ValidationError(result.errors, result.warnings)
        return result

    @staticmethod
    def _build(payload: Mapping[str, Any], warnings: list[str]) -> ContentRecord:
        try:
            return ContentRecord.model_validate(payload)
        except SchemaError as exc:
            errors = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
            raise ValidationError(errors, warnings) from exc

    # ── Queries ──────────────────────────────────────────────────

    def validate(self, candidate: Candidate) -> ValidationResult:
        return validate(_as_dict(candidate))

    def get(self, record_id: str) -> ContentRecord | None:
        return self._store.find(record_id)

    def get_by_type(self, content_type: ContentType | str) -> list[ContentRecord]:
        return [r for r in self._store.records if r.content_type == content_type]

    # ── Mutations ────────────────────────────────────────────────

    def add(self, candidate: Candidate) -> ContentRecord:
        """Validate and store a new record.

        Assigns a fresh id, sets ``version`` to 1, defaults ``status`` to
        draft and stamps ``lastUpdated``.  Raises ValidationError (and
        leaves the collection untouched) when validation fails.
        """
        payload = _as_dict(candidate)
        payload.pop("id", None)
        result = self._check(payload, "add")

        now = self._clock()
        metadata = payload["metadata"]
        metadata["version"] = 1
        metadata["lastUpdated"] = now
        metadata["status"] = metadata.get("status") or ContentStatus.DRAFT.value
        payload["id"] = self._new_id(now)

        record = self._build(payload, result.warnings)
        self._store.append(record)
        self._store.persist()
        self.last_warnings = result.warnings

        logger.info(
            "CMS content added: id=%s type=%s title=%r warnings=%s",
            record.id,
            record.content_type.value,
            record.title,
            result.warnings,
        )
        return record

    def update(self, record_id: str, request: UpdateRequest) -> ContentRecord:
        """Apply *request* to an existing record.

        The request is merged into the stored record (metadata shallowly)
        and the merged record is validated as a whole.  On success the
        version is incremented by one and ``lastUpdated`` restamped.

        Raises KeyError for an unknown id and ValidationError when the
        merged record fails validation.
        """
        existing = self._store.find(record_id)
        if existing is None:
            raise KeyError(record_id)

        changes = request.model_dump(by_alias=True, exclude_none=True, exclude={"metadata"})
        merged = {**existing.to_wire(), **changes}
        metadata = dict(merged.get("metadata") or {})
        for key, value in request.metadata.items():
            metadata[metadata_key(key)] = value
        metadata["version"] = existing.metadata.version + 1
        metadata["lastUpdated"] = self._clock()
        merged["metadata"] = metadata
        merged["id"] = record_id

        result = self._check(merged, "update")
        record = self._build(merged, result.warnings)
        self._store.replace(record_id, record)
        self._store.persist()
        self.last_warnings = result.warnings

        logger.info(
            "CMS content updated: id=%s fields=%s version=%d",
            record_id,
            sorted(changes) + sorted(request.metadata),
            record.metadata.version,
        )
        return record

    def delete(self, record_id: str) -> None:
        """Remove a record.  Unknown ids are ignored; the store is persisted either way."""
        removed = self._store.remove(record_id)
        self._store.persist()
        if removed:
            logger.info("CMS content deleted: id=%s", record_id)
        else:
            logger.debug("Delete of unknown id %s", record_id)

    def duplicate(self, record_id: str) -> ContentRecord | None:
        """Copy a record as a new draft titled ``<title> (Copy)``.

        Returns None if the id does not exist.
        """
        original = self._store.find(record_id)
        if original is None:
            return None
        payload = original.to_wire()
        payload.pop("id")
        payload["title"] = f"{original.title}{COPY_SUFFIX}"
        payload["metadata"]["status"] = ContentStatus.DRAFT.value
        payload["metadata"]["version"] = 1
        return self.add(payload)

    def restore_backup(self) -> int:
        """Replace the collection with the backup slot's contents.

        Returns the number of restored records.  Raises PersistenceError
        when there is no usable backup.
        """
        records = self._store.read_backup()
        if records is None:
            raise PersistenceError("No backup available")
        self._store.reset(records)
        self._store.persist()
        logger.info("CMS content restored from backup (%d items)", len(records))
        return len(records)

    # ── Criteria ─────────────────────────────────────────────────

    def search(self, term: str) -> None:
        self.criteria = self.criteria.model_copy(update={"search_term": term})

    def set_filters(
        self,
        filter_type: ContentType | str | None = None,
        filter_urgency: str | None = None,
        filter_status: str | None = None,
    ) -> None:
        """Change any of the three filters; ``None`` leaves one unchanged."""
        data = self.criteria.model_dump()
        for name, value in (
            ("filter_type", filter_type),
            ("filter_urgency", filter_urgency),
            ("filter_status", filter_status),
        ):
            if value is not None:
                data[name] = value
        self.criteria = QueryCriteria.model_validate(data)

    def set_sorting(self, sort_by: SortKey | str, sort_order: SortOrder) -> None:
        data = self.criteria.model_dump()
        data.update(sort_by=sort_by, sort_order=sort_order)
        self.criteria = QueryCriteria.model_validate(data)

    def clear_filters(self) -> None:
        """Reset search and filters; sorting is kept."""
        self.criteria = self.criteria.model_copy(
            update={
                "search_term": "",
                "filter_type": ALL,
                "filter_urgency": ALL,
                "filter_status": ALL,
            }
        )

    # ── Transfer ─────────────────────────────────────────────────

    def export(self, fmt: str = "json") -> ExportData:
        data = build_export(
            self._store.records, fmt, exported_by=self._exported_by, now=self._clock()
        )
        logger.info("CMS content exported: format=%s items=%d", fmt, data.metadata.total_items)
        return data

    def export_to(self, directory: Path, fmt: str = "json") -> Path:
        return write_export(self.export(fmt), directory)

    async def import_file(self, path: Path) -> int:
        """Append every record in the artifact at *path*.

        No deduplication or id collision checks are made.  Raises
        TransferError without touching the store when the artifact is
        unreadable or malformed.
        """
        with self._timer.measure("cms-import"):
            records = await read_import(path)
        self._store.extend(records)
        self._store.persist()
        logger.info("CMS content imported: %d items from %s", len(records), path)
        return len(records)
