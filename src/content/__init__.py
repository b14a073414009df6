"""Content domain — medical-reference records, their store and façade.

``ContentRepository`` is the entry point: it validates mutations, applies
them to a ``RecordStore`` persisted in durable slots, and derives
filtered views, statistics and export artifacts from the collection.
"""

from medcms.content.models import (
    AgeGroup,
    ContentDraft,
    ContentMetadata,
    ContentRecord,
    ContentStatus,
    ContentType,
    Gender,
    Onset,
    Prevalence,
    Severity,
    UpdateRequest,
    Urgency,
    ValidationResult,
)
from medcms.content.query import ContentStats, QueryCriteria, SortKey
from medcms.content.repository import ContentRepository
from medcms.content.storage import JsonFileStorage, KeyValueStorage, MemoryStorage, RecordStore
from medcms.content.transfer import ExportData

__all__ = [
    "AgeGroup",
    "ContentDraft",
    "ContentMetadata",
    "ContentRecord",
    "ContentRepository",
    "ContentStats",
    "ContentStatus",
    "ContentType",
    "ExportData",
    "Gender",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "Onset",
    "Prevalence",
    "QueryCriteria",
    "RecordStore",
    "Severity",
    "SortKey",
    "UpdateRequest",
    "Urgency",
    "ValidationResult",
]
