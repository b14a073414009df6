"""Validation of candidate records.

Hard errors block a mutation; warnings are reported and left to the
caller to act on.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from medcms.content.models import ContentType, ValidationResult
from pydantic import BaseModel

MIN_TITLE_LENGTH = 3
MIN_BODY_LENGTH = 10

_CONTENT_TYPES = {t.value for t in ContentType}


def _as_wire(candidate: BaseModel | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(candidate, BaseModel):
        return candidate.model_dump(mode="json", by_alias=True, exclude_none=True)
    return candidate


def _text(value: object) -> str | None:
    return value if isinstance(value, str) else None


def validate(candidate: BaseModel | Mapping[str, Any]) -> ValidationResult:
    """Check a candidate record.

    Accepts a model (dumped to its camelCase form) or a camelCase mapping,
    so that payloads from files can be checked before they are parsed into
    models.  ``is_valid`` is true exactly when ``errors`` is empty.
    """
    data = _as_wire(candidate)
    metadata = data.get("metadata")
    if not isinstance(metadata, Mapping):
        metadata = {}

    title = _text(data.get("title"))
    body = _text(data.get("content"))
    content_type = data.get("type")
    author = _text(metadata.get("author"))
    tags = metadata.get("tags")

    errors: list[str] = []
    warnings: list[str] = []

    if not title or not title.strip():
        errors.append("Title is required")
    if not body or not body.strip():
        errors.append("Content is required")
    if not content_type:
        errors.append("Content type is required")
    elif not isinstance(content_type, str) or content_type not in _CONTENT_TYPES:
        errors.append(f"Invalid content type: {content_type}")
    if not author or not author.strip():
        errors.append("Author is required")

    if title and len(title) < MIN_TITLE_LENGTH:
        warnings.append("Title should be at least 3 characters")
    if body and len(body) < MIN_BODY_LENGTH:
        warnings.append("Content should be more descriptive")
    if isinstance(tags, list) and not tags:
        warnings.append("Consider adding tags for better organization")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
