"""Shared fixtures for the chefquiz test-suite."""

from __future__ import annotations

import random
from pathlib import Path

import pytest
import yaml
from PySide6.QtCore import QCoreApplication

from chefquiz.core.content import ContentRepository
from chefquiz.core.events import GameEvents
from chefquiz.core.game import Game
from chefquiz.core.storage import InMemoryRepository


@pytest.fixture(scope="session", autouse=True)
def qt_app() -> QCoreApplication:
    """One Qt application object for every test that touches signals."""
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def repository() -> InMemoryRepository:
    return InMemoryRepository()


def write_yaml(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, allow_unicode=True, default_flow_style=False), encoding="utf-8")


@pytest.fixture()
def content_dir(tmp_path: Path) -> Path:
    """Small content tree: one open theme with three levels and one locked theme."""
    base = tmp_path / "content"
    write_yaml(
        base / "themes.yaml",
        [
            {"id": "basics", "name": "Basics", "required_levels": 0},
            {"id": "advanced", "name": "Advanced", "required_levels": 2},
        ],
    )
    write_yaml(
        base / "levels" / "basics.yaml",
        [
            {"id": 1, "word": "CAT", "extra_letters": ["X", "Y", "Z"], "video": "cat.mp4"},
            {"id": 2, "word": "DOG", "extra_letters": ["Q", "W"]},
            {"id": 3, "word": "EGG", "extra_letters": ["V"], "image": "egg.jpg"},
        ],
    )
    write_yaml(base / "levels" / "advanced.yaml", [{"id": 1, "word": "BREAD", "extra_letters": ["K"]}])
    return base


@pytest.fixture()
def game(repository: InMemoryRepository, content_dir: Path, rng: random.Random) -> Game:
    g = Game(repository=repository, content=ContentRepository(content_dir), events=GameEvents(), rng=rng)
    assert g.load_theme("basics")
    return g
