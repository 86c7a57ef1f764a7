"""Tests for chefquiz.core.storage – game state persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from chefquiz.core.storage import InMemoryRepository, JsonFileRepository, default_state_path


# ---------------------------------------------------------------------------
# InMemoryRepository
# ---------------------------------------------------------------------------

class TestInMemoryRepository:
    def test_get_default(self):
        repo = InMemoryRepository()
        assert repo.get("missing") is None
        assert repo.get("missing", 5) == 5

    def test_set_then_get(self):
        repo = InMemoryRepository()
        repo.set("wallet", {"coins": 10})
        assert repo.get("wallet") == {"coins": 10}
        assert repo.save_count == 1

    def test_values_are_copied(self):
        repo = InMemoryRepository()
        value = {"coins": 10}
        repo.set("wallet", value)
        value["coins"] = 99
        repo.get("wallet")["coins"] = 42
        assert repo.get("wallet") == {"coins": 10}

    def test_seed_data(self):
        repo = InMemoryRepository({"stats": {"hints_used": 2}})
        assert repo.get("stats") == {"hints_used": 2}


# ---------------------------------------------------------------------------
# JsonFileRepository
# ---------------------------------------------------------------------------

class TestJsonFileRepository:
    def test_default_path_under_home(self):
        assert default_state_path().parent.name == ".chefquiz"

    def test_missing_file_is_empty(self, tmp_path: Path):
        repo = JsonFileRepository(tmp_path / "state.json")
        assert repo.get("wallet") is None

    def test_set_writes_file(self, tmp_path: Path):
        path = tmp_path / "nested" / "state.json"
        repo = JsonFileRepository(path)
        repo.set("wallet", {"coins": 70, "initialized": True})
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["wallet"]["coins"] == 70

    def test_reload_from_disk(self, tmp_path: Path):
        path = tmp_path / "state.json"
        JsonFileRepository(path).set("stats", {"levels_completed": 3})
        assert JsonFileRepository(path).get("stats") == {"levels_completed": 3}

    def test_corrupt_json(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text("NOT VALID JSON", encoding="utf-8")
        repo = JsonFileRepository(path)
        assert repo.get("wallet") is None

    def test_invalid_utf8(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_bytes(b"\xff\xfe{")
        repo = JsonFileRepository(path)
        assert repo.get("wallet") is None
        repo.set("wallet", {"coins": 100})
        assert JsonFileRepository(path).get("wallet") == {"coins": 100}

    def test_non_object_json(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileRepository(path).get("wallet") is None

    def test_write_failure_keeps_memory_state(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "state.json"
        repo = JsonFileRepository(path)

        def _fail(self, *args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "write_text", _fail)
        repo.set("wallet", {"coins": 5})
        assert repo.get("wallet") == {"coins": 5}
        assert not path.exists()
