from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

from chefquiz.core.board import is_valid_word

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Level:
    id: int
    word: str
    extra_letters: List[str] = field(default_factory=list)
    video: Optional[str] = None
    image: Optional[str] = None
    theme_id: Optional[str] = None

    @property
    def media(self) -> Tuple[str, Optional[str]]:
        """Clue media to show: ``("video", ref)``, ``("image", ref)`` or ``("placeholder", None)``."""
        if self.video:
            return ("video", self.video)
        if self.image:
            return ("image", self.image)
        return ("placeholder", None)


@dataclass(frozen=True)
class Theme:
    id: str
    name: str
    description: str = ""
    category: str = "other"
    required_levels: int = 0
    is_event: bool = False

    def is_unlocked(self, levels_completed: int) -> bool:
        return levels_completed >= self.required_levels


def default_content_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data"


class ContentRepository:
    """Reads themes and levels from YAML files.

    Layout: ``<base>/themes.yaml`` holds a list of themes and
    ``<base>/levels/<theme_id>.yaml`` the levels of each theme. Missing or
    malformed files give an empty list; bad entries are skipped.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else default_content_dir()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def load_themes(self) -> List[Theme]:
        raw = self._read_list(self._base_dir / "themes.yaml")
        themes: List[Theme] = []
        for item in raw:
            if not isinstance(item, dict) or not item.get("id") or not item.get("name"):
                logger.warning("Skipping theme without 'id' or 'name': %r", item)
                continue
            try:
                themes.append(
                    Theme(
                        id=str(item["id"]).strip(),
                        name=str(item["name"]).strip(),
                        description=str(item.get("description") or "").strip(),
                        category=str(item.get("category") or "other").strip(),
                        required_levels=int(item.get("required_levels") or 0),
                        is_event=bool(item.get("is_event", False)),
                    )
                )
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed theme %r: %s", item.get("id"), e)
        return themes

    def get_theme(self, theme_id: str) -> Optional[Theme]:
        return next((t for t in self.load_themes() if t.id == theme_id), None)

    def load_levels(self, theme_id: str) -> List[Level]:
        raw = self._read_list(self._base_dir / "levels" / f"{theme_id}.yaml")
        levels: List[Level] = []
        for position, item in enumerate(raw):
            level = self._parse_level(item, position, theme_id)
            if level is not None:
                levels.append(level)
        return levels

    def _parse_level(self, item: Any, position: int, theme_id: str) -> Optional[Level]:
        if not isinstance(item, dict):
            logger.warning("%s: level %d is not a mapping", theme_id, position)
            return None
        word = str(item.get("word") or "").strip().upper()
        if not is_valid_word(word):
            logger.warning("%s: skipping level %d with invalid word %r", theme_id, position, word)
            return None
        extra = item.get("extra_letters") or []
        if isinstance(extra, str):
            # allow extra letters as a plain string
            extra = list(extra)
        elif not isinstance(extra, list):
            logger.warning("%s: ignoring extra_letters of level %d: expected a list", theme_id, position)
            extra = []
        letters = []
        for entry in extra:
            letter = str(entry).strip().upper()
            if not letter:
                continue
            if len(letter) != 1 or not letter.isalpha():
                logger.warning("%s: skipping extra letter %r in level %d", theme_id, entry, position)
                continue
            letters.append(letter)
        try:
            level_id = int(item.get("id", position + 1))
        except (TypeError, ValueError):
            level_id = position + 1
        return Level(
            id=level_id,
            word=word,
            extra_letters=letters,
            video=item.get("video") or None,
            image=item.get("image") or None,
            theme_id=theme_id,
        )

    def _read_list(self, path: Path) -> List[Any]:
        if not path.exists():
            logger.warning("Content file not found: %s", path)
            return []
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, UnicodeDecodeError, OSError) as e:
            logger.warning("Could not load content from %s: %s", path, e)
            return []
        if not isinstance(raw, list):
            logger.warning("%s: expected a YAML list", path.name)
            return []
        return raw
