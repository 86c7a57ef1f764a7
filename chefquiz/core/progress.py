from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional

from chefquiz.core.storage import GameStateRepository

logger = logging.getLogger(__name__)

STATS_KEY = "stats"
THEME_PROGRESS_KEY = "theme_progress"


@dataclass
class GameStats:
    levels_completed: int = 0
    total_coins_earned: int = 0
    hints_used: int = 0
    perfect_levels: int = 0
    current_streak: int = 0
    best_streak: int = 0

    @classmethod
    def from_dict(cls, raw: Any) -> "GameStats":
        if not isinstance(raw, dict):
            return cls()
        values = {}
        for f in fields(cls):
            try:
                values[f.name] = max(0, int(raw.get(f.name, 0)))
            except (TypeError, ValueError):
                values[f.name] = 0
        return cls(**values)


class ProgressTracker:
    """Counters behind achievements and theme unlocks.

    Every counter only grows, except ``current_streak`` which can be reset
    explicitly with ``reset_streak``.
    """

    def __init__(self, repository: GameStateRepository) -> None:
        self._repository = repository
        self._stats = GameStats.from_dict(repository.get(STATS_KEY))
        self._themes = self._load_theme_progress()

    @property
    def stats(self) -> GameStats:
        return GameStats(**asdict(self._stats))

    def track_level_completion(
        self,
        used_hints: bool,
        theme_id: Optional[str] = None,
        level_id: Optional[int] = None,
    ) -> GameStats:
        self._stats.levels_completed += 1
        if not used_hints:
            self._stats.perfect_levels += 1
        self._stats.current_streak += 1
        self._stats.best_streak = max(self._stats.best_streak, self._stats.current_streak)
        if theme_id is not None and level_id is not None:
            self.mark_level_completed(theme_id, level_id)
        self._save_stats()
        return self.stats

    def track_hint_usage(self) -> GameStats:
        self._stats.hints_used += 1
        self._save_stats()
        return self.stats

    def track_coins_earned(self, amount: int) -> GameStats:
        if amount > 0:
            self._stats.total_coins_earned += amount
            self._save_stats()
        return self.stats

    def reset_streak(self) -> None:
        self._stats.current_streak = 0
        self._save_stats()

    # Theme progress

    def mark_level_completed(self, theme_id: str, level_id: int) -> None:
        completed = self._themes.setdefault(theme_id, [])
        if level_id not in completed:
            completed.append(level_id)
            self._repository.set(THEME_PROGRESS_KEY, self._themes)

    def completed_levels(self, theme_id: str) -> List[int]:
        return list(self._themes.get(theme_id, []))

    def completion_percentage(self, theme_id: str, total_levels: int) -> float:
        if total_levels <= 0:
            return 0.0
        return min(1.0, len(self._themes.get(theme_id, [])) / total_levels)

    def _save_stats(self) -> None:
        self._repository.set(STATS_KEY, asdict(self._stats))

    def _load_theme_progress(self) -> Dict[str, List[int]]:
        raw = self._repository.get(THEME_PROGRESS_KEY, {})
        themes: Dict[str, List[int]] = {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed theme progress: %r", raw)
            return themes
        for key, value in raw.items():
            if isinstance(value, list):
                themes[str(key)] = [int(v) for v in value if isinstance(v, int)]
        return themes
