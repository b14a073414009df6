"""Tests for the medcms CLI."""

import json
import re
from pathlib import Path

import pytest
from medcms.cli import app
from medcms.content.storage import STORAGE_KEY
from typer.testing import CliRunner

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return _ANSI_RE.sub("", text)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner(env={"NO_COLOR": "1", "FORCE_COLOR": None, "COLUMNS": "200"})


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


def _invoke(runner: CliRunner, data_dir: Path, *args: str, input: str | None = None):
    result = runner.invoke(app, ["--data-dir", str(data_dir), *args], input=input)
    return result, _strip_ansi(result.output)


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _stored(data_dir: Path) -> list[dict]:
    raw = (data_dir / f"{STORAGE_KEY}.json").read_text(encoding="utf-8")
    return json.loads(raw)["content"]


_DRAFT = {
    "type": "advice",
    "title": "Sleep Hygiene",
    "content": "Keep a consistent bedtime and limit screens before sleep.",
    "metadata": {"author": "Sleep Clinic", "tags": ["sleep"]},
}


class TestCLIBasics:
    def test_help(self, runner: CliRunner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "medical-reference" in _strip_ansi(result.output)

    def test_version(self, runner: CliRunner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "medcms" in result.output


class TestList:
    def test_seeds_and_lists(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "list")
        assert result.exit_code == 0
        assert "5 of 5 record(s)" in output
        assert (data_dir / f"{STORAGE_KEY}.json").exists()

    def test_filter_by_type(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "list", "--type", "condition")
        assert result.exit_code == 0
        assert "1 of 5 record(s)" in output

    def test_search(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "list", "--search", "hand")
        assert result.exit_code == 0
        assert "1 of 5 record(s)" in output

    def test_no_matches(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "list", "--search", "zzzz")
        assert result.exit_code == 0
        assert "No matching content" in output

    def test_invalid_filter(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "list", "--type", "rumour")
        assert result.exit_code == 1
        assert "Invalid filter or sort option" in output


class TestShow:
    def test_show_record(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "show", "2")
        assert result.exit_code == 0
        assert "Common Cold" in output

    def test_show_missing(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "show", "nope")
        assert result.exit_code == 1
        assert "No record with id nope" in output


class TestAdd:
    def test_add_record(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        draft = _write_json(tmp_path / "draft.json", _DRAFT)
        result, output = _invoke(runner, data_dir, "add", str(draft))

        assert result.exit_code == 0, output
        assert "Added" in output
        titles = [item["title"] for item in _stored(data_dir)]
        assert "Sleep Hygiene" in titles

    def test_add_invalid(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        draft = _write_json(tmp_path / "draft.json", {**_DRAFT, "title": ""})
        result, output = _invoke(runner, data_dir, "add", str(draft))

        assert result.exit_code == 1
        assert "Validation failed: Title is required" in output
        assert len(_stored(data_dir)) == 5

    def test_add_with_warnings_declined(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        draft = _write_json(tmp_path / "draft.json", {**_DRAFT, "title": "Zz"})
        result, output = _invoke(runner, data_dir, "add", str(draft), input="n\n")

        assert result.exit_code == 1
        assert "Title should be at least 3 characters" in output
        assert len(_stored(data_dir)) == 5

    def test_add_with_warnings_yes(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        draft = _write_json(tmp_path / "draft.json", {**_DRAFT, "title": "Zz"})
        result, _ = _invoke(runner, data_dir, "add", str(draft), "--yes")

        assert result.exit_code == 0
        assert len(_stored(data_dir)) == 6

    def test_add_unreadable_file(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        result, output = _invoke(runner, data_dir, "add", str(tmp_path / "missing.json"))
        assert result.exit_code == 1
        assert "Could not read" in output


class TestUpdate:
    def test_update_bumps_version(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        changes = _write_json(tmp_path / "changes.json", {"metadata": {"status": "review"}})
        result, output = _invoke(runner, data_dir, "update", "2", str(changes))

        assert result.exit_code == 0, output
        assert "version 3" in output
        cold = next(item for item in _stored(data_dir) if item["id"] == "2")
        assert cold["metadata"]["status"] == "review"

    def test_update_missing(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        changes = _write_json(tmp_path / "changes.json", {"title": "Anything"})
        result, output = _invoke(runner, data_dir, "update", "nope", str(changes))
        assert result.exit_code == 1
        assert "No record with id nope" in output

    def test_update_invalid(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        changes = _write_json(tmp_path / "changes.json", {"title": " "})
        result, output = _invoke(runner, data_dir, "update", "2", str(changes))
        assert result.exit_code == 1
        assert "Title is required" in output


class TestDeleteAndDuplicate:
    def test_delete(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "delete", "3")
        assert result.exit_code == 0
        assert "Deleted" in output
        assert [item["id"] for item in _stored(data_dir)] == ["1", "2", "4", "5"]

    def test_delete_missing(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "delete", "nope")
        assert result.exit_code == 0
        assert "No record with id nope" in output

    def test_duplicate(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "duplicate", "2")
        assert result.exit_code == 0
        assert "Common Cold (Copy)" in output
        copy = _stored(data_dir)[-1]
        assert copy["title"] == "Common Cold (Copy)"
        assert copy["metadata"]["status"] == "draft"
        assert copy["metadata"]["version"] == 1

    def test_duplicate_missing(self, runner: CliRunner, data_dir: Path):
        result, _ = _invoke(runner, data_dir, "duplicate", "nope")
        assert result.exit_code == 1


class TestStats:
    def test_stats(self, runner: CliRunner, data_dir: Path):
        result, output = _invoke(runner, data_dir, "stats")
        assert result.exit_code == 0
        assert "Total content: 5" in output
        assert "Needs review: 0" in output


class TestTransfer:
    def test_export_then_import(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        out = tmp_path / "exports"
        result, output = _invoke(runner, data_dir, "export", "--out", str(out))
        assert result.exit_code == 0, output

        files = list(out.glob("disease-prevention-cms-*.json"))
        assert len(files) == 1

        result, output = _invoke(runner, data_dir, "import", str(files[0]))
        assert result.exit_code == 0, output
        assert "Imported 5 record(s)" in output
        assert len(_stored(data_dir)) == 10

    def test_export_csv_rejected(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        result, output = _invoke(
            runner, data_dir, "export", "--out", str(tmp_path), "--format", "csv"
        )
        assert result.exit_code == 1
        assert "Unsupported export format: csv" in output

    def test_import_malformed(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        broken = tmp_path / "broken.json"
        broken.write_text("{nope", encoding="utf-8")
        result, output = _invoke(runner, data_dir, "import", str(broken))
        assert result.exit_code == 1
        assert "not valid JSON" in output
        assert len(_stored(data_dir)) == 5

    def test_import_undecodable(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        broken = tmp_path / "broken.json"
        broken.write_bytes(b"\xff\xfe")
        result, output = _invoke(runner, data_dir, "import", str(broken))
        assert result.exit_code == 1
        assert "Could not read" in output
        assert len(_stored(data_dir)) == 5


class TestValidate:
    def test_valid(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        draft = _write_json(tmp_path / "draft.json", _DRAFT)
        result, output = _invoke(runner, data_dir, "validate", str(draft))
        assert result.exit_code == 0
        assert "Valid" in output

    def test_invalid(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        draft = _write_json(tmp_path / "draft.json", {"title": "Hi"})
        result, output = _invoke(runner, data_dir, "validate", str(draft))
        assert result.exit_code == 1
        assert "Content is required" in output
        assert "Author is required" in output

    def test_malformed_fields(self, runner: CliRunner, data_dir: Path, tmp_path: Path):
        draft = _write_json(
            tmp_path / "draft.json",
            {**_DRAFT, "type": ["advice"], "metadata": {"author": "A", "tags": 5}},
        )
        result, output = _invoke(runner, data_dir, "validate", str(draft))
        assert result.exit_code == 1
        assert "Invalid content type" in output
        assert "Title should be at least 3 characters" in output


class TestRestoreBackup:
    def test_restore(self, runner: CliRunner, data_dir: Path):
        _invoke(runner, data_dir, "list")
        result, output = _invoke(runner, data_dir, "restore-backup")
        assert result.exit_code == 0
        assert "Restored 5 record(s)" in output

    def test_restore_after_corrupt_primary(self, runner: CliRunner, data_dir: Path):
        _invoke(runner, data_dir, "list")
        (data_dir / f"{STORAGE_KEY}.json").write_text("garbage", encoding="utf-8")

        result, output = _invoke(runner, data_dir, "list")
        assert result.exit_code == 1
        assert "Failed to load content" in output

        result, output = _invoke(runner, data_dir, "restore-backup")
        assert result.exit_code == 0
        assert "Restored 5 record(s)" in output
        assert len(_stored(data_dir)) == 5
