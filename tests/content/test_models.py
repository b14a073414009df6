"""Tests for content domain models."""

from datetime import UTC, datetime

import pytest
from medcms.content.models import (
    ContentDraft,
    ContentMetadata,
    ContentRecord,
    ContentStatus,
    ContentType,
    UpdateRequest,
    Urgency,
    metadata_key,
)
from pydantic import ValidationError


class TestContentType:
    def test_all_values(self):
        values = {t.value for t in ContentType}
        assert values == {
            "condition",
            "symptom",
            "advice",
            "disclaimer",
            "treatment",
            "prevention",
        }


class TestContentStatus:
    def test_all_values(self):
        values = {s.value for s in ContentStatus}
        assert values == {"draft", "review", "approved", "archived"}


class TestContentMetadata:
    def test_defaults(self):
        meta = ContentMetadata()
        assert meta.author == ""
        assert meta.version == 1
        assert meta.status == ContentStatus.DRAFT
        assert meta.language == "en"
        assert meta.tags is None
        assert meta.last_updated.tzinfo is not None

    def test_accepts_camel_case_keys(self):
        meta = ContentMetadata.model_validate(
            {"whenToSeekHelp": ["chest pain"], "medicallyReviewed": True, "author": "A"}
        )
        assert meta.when_to_seek_help == ["chest pain"]
        assert meta.medically_reviewed is True

    def test_accepts_snake_case_keys(self):
        meta = ContentMetadata(related_conditions=["flu"], author="A")
        assert meta.related_conditions == ["flu"]

    def test_naive_timestamp_assumed_utc(self):
        meta = ContentMetadata(last_updated=datetime(2026, 1, 1, 12, 0))
        assert meta.last_updated.tzinfo == UTC

    def test_version_must_be_positive(self):
        with pytest.raises(ValidationError):
            ContentMetadata(version=0)

    def test_rejects_unknown_urgency(self):
        with pytest.raises(ValidationError):
            ContentMetadata.model_validate({"urgency": "whenever"})

    def test_list_facets_keep_order_and_duplicates(self):
        meta = ContentMetadata(tags=["b", "a", "b"])
        assert meta.tags == ["b", "a", "b"]


class TestContentRecord:
    def test_wire_format_uses_camel_case_keys(self):
        record = ContentRecord(
            id="r1",
            content_type=ContentType.ADVICE,
            title="Rest well",
            body="Sleep at least seven hours a night.",
            short_description="Sleep advice",
            metadata=ContentMetadata(author="Dr. A", urgency=Urgency.MONITOR),
        )
        wire = record.to_wire()
        assert wire["type"] == "advice"
        assert wire["content"] == "Sleep at least seven hours a night."
        assert wire["shortDescription"] == "Sleep advice"
        assert wire["metadata"]["urgency"] == "monitor"
        assert "lastUpdated" in wire["metadata"]
        assert "detailedDescription" not in wire

    def test_parses_wire_format(self):
        record = ContentRecord.model_validate(
            {
                "id": "x",
                "type": "symptom",
                "title": "Cough",
                "content": "A sudden expulsion of air.",
                "metadata": {"author": "B", "lastUpdated": "2024-03-01T10:00:00.000Z"},
            }
        )
        assert record.content_type == ContentType.SYMPTOM
        assert record.body == "A sudden expulsion of air."
        assert record.metadata.last_updated == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)

    def test_requires_id(self):
        with pytest.raises(ValidationError):
            ContentRecord.model_validate({"type": "symptom", "title": "t", "content": "c"})


class TestContentDraft:
    def test_everything_optional(self):
        draft = ContentDraft()
        assert draft.content_type is None
        assert draft.title == ""
        assert draft.body == ""


class TestUpdateRequest:
    def test_defaults_leave_fields_untouched(self):
        request = UpdateRequest()
        assert request.title is None
        assert request.body is None
        assert request.metadata == {}

    def test_accepts_wire_keys(self):
        request = UpdateRequest.model_validate({"content": "New body text", "type": "advice"})
        assert request.body == "New body text"
        assert request.content_type == ContentType.ADVICE


class TestMetadataKey:
    def test_snake_case_maps_to_alias(self):
        assert metadata_key("when_to_seek_help") == "whenToSeekHelp"
        assert metadata_key("last_updated") == "lastUpdated"

    def test_alias_unchanged(self):
        assert metadata_key("whenToSeekHelp") == "whenToSeekHelp"

    def test_single_word_unchanged(self):
        assert metadata_key("tags") == "tags"
