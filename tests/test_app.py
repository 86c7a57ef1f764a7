"""Tests for chefquiz.app – logging setup and game wiring."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from chefquiz.app import configure_logging, create_game


class TestConfigureLogging:
    def test_sets_info_level(self, monkeypatch: pytest.MonkeyPatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging()
        assert calls["level"] == logging.INFO
        assert "%(name)s" in calls["format"]


class TestCreateGame:
    def test_loads_first_unlocked_theme(self, tmp_path: Path, content_dir: Path):
        game = create_game(state_path=tmp_path / "state.json", content_dir=content_dir)
        assert game.theme_id == "basics"
        assert game.board.target_word == "CAT"

    def test_state_written_to_file(self, tmp_path: Path, content_dir: Path):
        path = tmp_path / "state.json"
        create_game(state_path=path, content_dir=content_dir)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["wallet"]["coins"] == 100
        assert data["puzzle"]["board"]["target_word"] == "CAT"

    def test_resumes_from_file(self, tmp_path: Path, content_dir: Path):
        path = tmp_path / "state.json"
        first = create_game(state_path=path, content_dir=content_dir)
        tile = first.board.pool.first_unused("C")
        first.insert_letter(tile, 0)
        second = create_game(state_path=path, content_dir=content_dir)
        assert second.board.guess == ["C", None, None]

    def test_empty_content(self, tmp_path: Path):
        game = create_game(state_path=tmp_path / "state.json", content_dir=tmp_path / "empty")
        assert game.board is None
        assert game.theme_id is None

    def test_bundled_content(self, tmp_path: Path):
        game = create_game(state_path=tmp_path / "state.json")
        assert game.board is not None
