"""Durable slots and the record store built on them.

The store keeps the ordered record list in memory and mirrors it to a
primary slot after every mutation, then copies the primary slot verbatim
into a backup slot.  A crash between the two writes leaves the backup one
cycle behind.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from medcms.content.models import ContentRecord, utc_now
from medcms.content.seed import default_records
from medcms.shared.errors import PersistenceError
from medcms.shared.timing import NullTimer, Timer
from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

logger = logging.getLogger(__name__)

STORAGE_KEY = "disease-prevention-cms"
BACKUP_KEY = "disease-prevention-cms-backup"
STORAGE_VERSION = "1.0.0"

LOAD_ERROR = "Failed to load content"
SAVE_ERROR = "Failed to save content"


class KeyValueStorage(Protocol):
    """Named text slots that survive the process."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed slots, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value

    def remove(self, key: str) -> None:
        self.slots.pop(key, None)


class JsonFileStorage:
    """One ``<key>.json`` file per slot inside *directory*."""

    def __init__(self, directory: Path) -> None:
        self._dir = directory

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Could not read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Could not write {path}: {exc}") from exc

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class _SlotData(BaseModel):
    """Internal wrapper for slot serialization."""

    content: list[ContentRecord] = Field(default_factory=list)
    version: str = STORAGE_VERSION
    last_backup: str | None = Field(default=None, alias="lastBackup")


def _parse_slot(raw: str) -> list[ContentRecord]:
    data = json.loads(raw)
    # Older payloads stored the bare list
    if isinstance(data, list):
        data = {"content": data}
    return _SlotData.model_validate(data).content


class RecordStore:
    """Ordered in-memory record collection mirrored to durable slots.

    Read and write failures never raise out of ``load`` or ``persist``;
    they set ``error`` and leave the in-memory list as it was.  While a
    load error is set the backup slot is not overwritten, so it still
    holds the last collection that loaded cleanly.
    """

    def __init__(self, storage: KeyValueStorage, timer: Timer | None = None) -> None:
        self._storage = storage
        self._timer = timer or NullTimer()
        self.records: list[ContentRecord] = []
        self.error: str | None = None
        self._load_failed = False

    # ── Durability ───────────────────────────────────────────────

    def load(self) -> None:
        """Hydrate from the primary slot, seeding defaults when it is empty."""
        try:
            raw = self._storage.get(STORAGE_KEY)
        except PersistenceError as exc:
            logger.error("Failed to load CMS content: %s", exc)
            self.error = LOAD_ERROR
            self._load_failed = True
            return

        if raw is None:
            self.records = default_records()
            self.persist()
            logger.info("CMS initialized with default content (%d items)", len(self.records))
            return

        try:
            self.records = _parse_slot(raw)
        except (json.JSONDecodeError, SchemaError, ValueError) as exc:
            logger.error("Failed to load CMS content: %s", exc)
            self.error = LOAD_ERROR
            self._load_failed = True
            return

        self.error = None
        self._load_failed = False
        logger.info("CMS content loaded from storage (%d items)", len(self.records))

    def persist(self) -> None:
        """Write the full collection to the primary slot, then back it up.

        The backup copy is skipped while a load error is set.
        """
        payload = {
            "content": [r.to_wire() for r in self.records],
            "version": STORAGE_VERSION,
            "lastBackup": utc_now().isoformat(),
        }
        with self._timer.measure("cms-persist"):
            try:
                self._storage.set(STORAGE_KEY, json.dumps(payload, ensure_ascii=False))
                if self._load_failed:
                    logger.warning("Skipping backup copy after failed load")
                    return
                written = self._storage.get(STORAGE_KEY)
                if written is not None:
                    self._storage.set(BACKUP_KEY, written)
            except PersistenceError as exc:
                logger.error("Failed to save CMS content: %s", exc)
                self.error = SAVE_ERROR
                return
        if self.error == SAVE_ERROR:
            self.error = LOAD_ERROR if self._load_failed else None
        logger.debug("CMS content saved to storage with backup")

    def read_backup(self) -> list[ContentRecord] | None:
        """Return the records held in the backup slot, or None if it is empty.

        Raises PersistenceError if the slot cannot be read or parsed.
        """
        raw = self._storage.get(BACKUP_KEY)
        if raw is None:
            return None
        try:
            return _parse_slot(raw)
        except (json.JSONDecodeError, SchemaError, ValueError) as exc:
            raise PersistenceError(f"Corrupt backup slot: {exc}") from exc

    # ── In-memory operations ─────────────────────────────────────

    def find(self, record_id: str) -> ContentRecord | None:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def ids(self) -> set[str]:
        return {r.id for r in self.records}

    def append(self, record: ContentRecord) -> None:
        self.records.append(record)

    def extend(self, records: list[ContentRecord]) -> None:
        self.records.extend(records)

    def replace(self, record_id: str, record: ContentRecord) -> None:
        """Swap the record with *record_id* in place, keeping its position.

        Raises KeyError if the id does not exist.
        """
        for index, existing in enumerate(self.records):
            if existing.id == record_id:
                self.records[index] = record
                return
        raise KeyError(record_id)

    def remove(self, record_id: str) -> bool:
        """Drop every record with *record_id*.  Returns whether any was removed."""
        before = len(self.records)
        self.records = [r for r in self.records if r.id != record_id]
        return len(self.records) != before

    def reset(self, records: list[ContentRecord]) -> None:
        """Replace the whole collection and clear any error state."""
        self.records = list(records)
        self.error = None
        self._load_failed = False
