"""Tests for the candidate record validator."""

from medcms.content.models import ContentDraft, ContentMetadata, ContentType
from medcms.content.validation import validate


def _candidate(**overrides: object) -> dict:
    data: dict = {
        "type": "condition",
        "title": "Seasonal Allergies",
        "content": "An immune response to airborne pollen.",
        "metadata": {"author": "Dr. Kim", "tags": ["allergy"]},
    }
    data.update(overrides)
    return data


class TestHardErrors:
    def test_valid_candidate(self):
        result = validate(_candidate())
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_missing_title(self):
        result = validate(_candidate(title=""))
        assert result.is_valid is False
        assert result.errors == ["Title is required"]

    def test_blank_title(self):
        result = validate(_candidate(title="   "))
        assert "Title is required" in result.errors

    def test_missing_body(self):
        data = _candidate()
        del data["content"]
        result = validate(data)
        assert result.errors == ["Content is required"]

    def test_missing_type(self):
        result = validate(_candidate(type=None))
        assert result.errors == ["Content type is required"]

    def test_unknown_type(self):
        result = validate(_candidate(type="rumour"))
        assert result.errors == ["Invalid content type: rumour"]

    def test_non_string_type(self):
        result = validate(_candidate(type=["condition"]))
        assert result.is_valid is False
        assert result.errors == ["Invalid content type: ['condition']"]

    def test_missing_author(self):
        result = validate(_candidate(metadata={"tags": ["x"]}))
        assert result.errors == ["Author is required"]

    def test_missing_metadata(self):
        data = _candidate()
        del data["metadata"]
        assert validate(data).errors == ["Author is required"]

    def test_errors_reported_in_order(self):
        result = validate({})
        assert result.errors == [
            "Title is required",
            "Content is required",
            "Content type is required",
            "Author is required",
        ]


class TestWarnings:
    def test_short_title(self):
        result = validate(_candidate(title="Hi"))
        assert result.is_valid is True
        assert result.warnings == ["Title should be at least 3 characters"]

    def test_short_body(self):
        result = validate(_candidate(content="Rest."))
        assert result.is_valid is True
        assert result.warnings == ["Content should be more descriptive"]

    def test_empty_tags(self):
        result = validate(_candidate(metadata={"author": "Dr. Kim", "tags": []}))
        assert result.warnings == ["Consider adding tags for better organization"]

    def test_absent_tags_no_warning(self):
        result = validate(_candidate(metadata={"author": "Dr. Kim"}))
        assert result.warnings == []

    def test_non_list_tags_no_warning(self):
        result = validate(_candidate(metadata={"author": "Dr. Kim", "tags": 5}))
        assert result.is_valid is True
        assert result.warnings == []

    def test_warnings_independent_of_errors(self):
        result = validate(_candidate(title="Hi", metadata={"tags": []}))
        assert result.is_valid is False
        assert result.errors == ["Author is required"]
        assert "Title should be at least 3 characters" in result.warnings
        assert "Consider adding tags for better organization" in result.warnings


class TestModelCandidates:
    def test_empty_draft_fails(self):
        result = validate(ContentDraft())
        assert result.is_valid is False
        assert len(result.errors) == 4

    def test_complete_draft_passes(self):
        draft = ContentDraft(
            content_type=ContentType.ADVICE,
            title="Stay Hydrated",
            body="Drink water regularly throughout the day.",
            metadata=ContentMetadata(author="Nurse Lee", tags=["hydration"]),
        )
        assert validate(draft).is_valid is True
