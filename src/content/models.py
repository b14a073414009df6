"""Content domain models — pure Pydantic v2 data types.

A ContentRecord is one medical-reference entry (condition, symptom,
advice, disclaimer, treatment or prevention tip).  Records serialize with
camelCase keys and carry their body text under ``content``, which is the
format used by the storage slots and the export artifact.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ContentType(StrEnum):
    """Kind of medical-reference entry."""

    CONDITION = "condition"
    SYMPTOM = "symptom"
    ADVICE = "advice"
    DISCLAIMER = "disclaimer"
    TREATMENT = "treatment"
    PREVENTION = "prevention"


class ContentStatus(StrEnum):
    """Editorial lifecycle status of a record."""

    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    ARCHIVED = "archived"


class Urgency(StrEnum):
    IMMEDIATE = "immediate"
    MODERATE = "moderate"
    MONITOR = "monitor"


class Severity(StrEnum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    CRITICAL = "critical"


class AgeGroup(StrEnum):
    INFANT = "infant"
    CHILD = "child"
    TEEN = "teen"
    ADULT = "adult"
    ELDERLY = "elderly"


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    BOTH = "both"


class Prevalence(StrEnum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"


class Onset(StrEnum):
    SUDDEN = "sudden"
    GRADUAL = "gradual"
    CHRONIC = "chronic"


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump to the camelCase JSON shape used on disk and in exports."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ContentMetadata(_CamelModel):
    """Facets attached to a record.

    List facets keep their order and may contain duplicates.  ``author``
    defaults to empty so that drafts can be built and then rejected by
    the validator rather than by the model.
    """

    # Clinical
    urgency: Urgency | None = None
    severity: Severity | None = None
    category: str | None = None
    subcategory: str | None = None

    # List facets
    tags: list[str] | None = None
    symptoms: list[str] | None = None
    related_conditions: list[str] | None = None
    risk_factors: list[str] | None = None
    complications: list[str] | None = None
    when_to_seek_help: list[str] | None = None
    home_remedies: list[str] | None = None
    medications: list[str] | None = None
    lifestyle: list[str] | None = None
    prevention: list[str] | None = None
    sources: list[str] | None = None

    # Demographic
    age_groups: list[AgeGroup] | None = None
    gender: Gender | None = None
    prevalence: Prevalence | None = None

    # Temporal
    duration: str | None = None
    onset: Onset | None = None
    triggers: list[str] | None = None
    follow_up: str | None = None

    # Provenance
    author: str = ""
    reviewed_by: str | None = None
    medically_reviewed: bool | None = None

    # Lifecycle
    version: int = Field(default=1, ge=1)
    status: ContentStatus = ContentStatus.DRAFT
    language: str = "en"
    region: str | None = None
    last_updated: datetime = Field(default_factory=utc_now)

    @field_validator("last_updated")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps would not compare against aware ones when sorting.
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class ContentRecord(_CamelModel):
    """A stored medical-reference entry."""

    id: str
    content_type: ContentType = Field(alias="type")
    title: str
    body: str = Field(alias="content")
    short_description: str | None = None
    detailed_description: str | None = None
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)


class ContentDraft(_CamelModel):
    """A candidate record that has not been validated or assigned an id."""

    content_type: ContentType | None = Field(default=None, alias="type")
    title: str = ""
    body: str = Field(default="", alias="content")
    short_description: str | None = None
    detailed_description: str | None = None
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)


class UpdateRequest(_CamelModel):
    """Fields a caller may change on an existing record.

    ``None`` leaves a top-level field untouched.  ``metadata`` holds facet
    values to overwrite (snake_case or camelCase keys); ``version`` and
    ``lastUpdated`` are always recomputed by the repository.
    """

    content_type: ContentType | None = Field(default=None, alias="type")
    title: str | None = None
    body: str | None = Field(default=None, alias="content")
    short_description: str | None = None
    detailed_description: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ValidationResult(BaseModel):
    """Verdict of the validator."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def metadata_key(name: str) -> str:
    """Return the camelCase wire key for a metadata field name or alias.

    Unknown names are returned unchanged.
    """
    field = ContentMetadata.model_fields.get(name)
    if field is None:
        return name
    return field.alias or to_camel(name)
