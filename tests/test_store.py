"""Tests for snapshot JSON persistence."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from db_diff.schema.comparator import compare
from db_diff.schema.models import ColumnSchema, Snapshot, TableSchema
from db_diff.schema.store import dump_snapshot, load_snapshot, save_snapshot


@pytest.fixture
def snapshot() -> Snapshot:
    return Snapshot(
        label="staging",
        captured_at=datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc),
        tables={
            "users": TableSchema(
                name="users",
                columns={
                    "id": ColumnSchema.model_validate({
                        "Field": "id",
                        "Type": "int(11)",
                        "Null": "NO",
                        "Key": "PRI",
                        "Default": None,
                        "Extra": "auto_increment",
                    }),
                },
            )
        },
    )


class TestDumpSnapshot:
    def test_uses_show_columns_names(self, snapshot: Snapshot) -> None:
        data = json.loads(dump_snapshot(snapshot))

        assert data["label"] == "staging"
        assert data["captured_at"].startswith("2026-10-01T12:00:00")
        assert data["tables"]["users"]["id"] == {
            "Field": "id",
            "Type": "int(11)",
            "Null": "NO",
            "Key": "PRI",
            "Default": None,
            "Extra": "auto_increment",
        }


class TestSaveLoad:
    def test_save_creates_parent_dirs(self, tmp_path: Path, snapshot: Snapshot) -> None:
        path = save_snapshot(snapshot, tmp_path / "snapshots" / "staging.json")

        assert path.exists()
        assert load_snapshot(path) == snapshot

    def test_loaded_snapshot_compares_clean(self, tmp_path: Path, snapshot: Snapshot) -> None:
        """A snapshot reloaded from disk is structurally identical to the original."""
        path = save_snapshot(snapshot, tmp_path / "staging.json")

        assert compare(snapshot, load_snapshot(path)).identical

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Snapshot file not found"):
            load_snapshot(tmp_path / "missing.json")

    def test_load_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"tables": {}}')

        with pytest.raises(ValueError, match="Invalid snapshot file bad.json"):
            load_snapshot(path)

    def test_load_hand_written_file(self, tmp_path: Path) -> None:
        """Files missing captured_at, Field or other attributes still load."""
        path = tmp_path / "manual.json"
        path.write_text(json.dumps({
            "label": "expected",
            "tables": {"t": {"x": {"Type": "int"}}},
        }))

        loaded = load_snapshot(path)

        assert loaded.tables["t"].columns["x"].field == "x"
        assert loaded.tables["t"].columns["x"].default is None

    def test_load_named_table_form(self, tmp_path: Path) -> None:
        """Tables written with explicit name and columns keys also load."""
        path = tmp_path / "named.json"
        path.write_text(json.dumps({
            "label": "expected",
            "tables": {"t": {"name": "t", "columns": {"x": {"Field": "x", "Type": "int"}}}},
        }))

        loaded = load_snapshot(path)

        assert loaded.tables["t"].columns["x"].type == "int"
