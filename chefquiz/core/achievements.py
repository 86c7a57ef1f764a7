from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from chefquiz.core.progress import GameStats
from chefquiz.core.storage import GameStateRepository

logger = logging.getLogger(__name__)

ACHIEVEMENTS_KEY = "achievements"


class ConditionKind(Enum):
    LEVELS_COMPLETED = "levelsCompleted"
    COINS_EARNED = "coinsEarned"
    HINTS_USED = "hintsUsed"
    PERFECT_LEVELS = "perfectLevels"
    STREAK = "streak"


@dataclass(frozen=True)
class AchievementCondition:
    kind: ConditionKind
    value: int

    def is_met(self, stats: GameStats) -> bool:
        counter = {
            ConditionKind.LEVELS_COMPLETED: stats.levels_completed,
            ConditionKind.COINS_EARNED: stats.total_coins_earned,
            ConditionKind.HINTS_USED: stats.hints_used,
            ConditionKind.PERFECT_LEVELS: stats.perfect_levels,
            ConditionKind.STREAK: stats.current_streak,
        }[self.kind]
        return counter >= self.value


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    condition: AchievementCondition
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None


def _tier(achievement_id: str, name: str, description: str, kind: ConditionKind, value: int) -> Achievement:
    return Achievement(achievement_id, name, description, AchievementCondition(kind, value))


_L = ConditionKind.LEVELS_COMPLETED
_C = ConditionKind.COINS_EARNED
_H = ConditionKind.HINTS_USED
_P = ConditionKind.PERFECT_LEVELS

ACHIEVEMENTS: Tuple[Achievement, ...] = (
    _tier("toque_jaune", "Toque Jaune", "Complete 5 levels", _L, 5),
    _tier("toque_orange", "Toque Orange", "Complete 10 levels", _L, 10),
    _tier("toque_rouge", "Toque Rouge", "Complete 15 levels", _L, 15),
    _tier("toque_bleu_ciel", "Toque Bleu Ciel", "Complete 20 levels", _L, 20),
    _tier("toque_bleu_marine", "Toque Bleu Marine", "Complete 25 levels", _L, 25),
    _tier("toque_marron", "Toque Marron", "Complete 30 levels", _L, 30),
    _tier("toque_violette", "Toque Violette", "Complete 35 levels", _L, 35),
    _tier("toque_rose", "Toque Rose", "Complete 40 levels", _L, 40),
    _tier("toque_verte", "Toque Verte", "Complete 45 levels", _L, 45),
    _tier("toque_grise", "Toque Grise", "Complete 50 levels", _L, 50),
    _tier("toque_noire", "Toque Noire", "Complete 60 levels", _L, 60),
    _tier("toque_arc_en_ciel", "Toque Arc-en-Ciel", "Complete 70 levels", _L, 70),
    _tier("toque_bronze", "Toque Bronze", "Earn 1000 coins", _C, 1000),
    _tier("toque_argent", "Toque Argent", "Earn 2500 coins", _C, 2500),
    _tier("toque_or", "Toque Or", "Earn 5000 coins", _C, 5000),
    _tier("toque_platine", "Toque Platine", "Earn 10000 coins", _C, 10000),
    _tier("toque_emeraude", "Toque Emeraude", "Earn 15000 coins", _C, 15000),
    _tier("toque_rubis", "Toque Rubis", "Earn 25000 coins", _C, 25000),
    _tier("toque_saphir", "Toque Saphir", "Earn 50000 coins", _C, 50000),
    _tier("toque_perle", "Toque Perle", "Earn 100000 coins", _C, 100000),
    _tier("toque_titane", "Toque Titane", "Use 10 hints", _H, 10),
    _tier("toque_feu", "Toque Feu", "Use 25 hints", _H, 25),
    _tier("toque_cuir", "Toque Cuir", "Use 50 hints", _H, 50),
    _tier("toque_kryptonite", "Toque Kryptonite", "Complete 5 levels without hints", _P, 5),
    _tier("toque_diamant", "Toque Diamant", "Complete 10 levels without hints", _P, 10),
)


def evaluate(
    achievements: Sequence[Achievement],
    stats: GameStats,
    now: Optional[datetime] = None,
) -> Tuple[List[Achievement], List[Achievement]]:
    """Return ``(updated, newly_unlocked)`` for the given counters.

    Already unlocked achievements are left as they are, so calling this
    again with the same counters unlocks nothing new.
    """
    now = now or datetime.now()
    updated: List[Achievement] = []
    newly: List[Achievement] = []
    for achievement in achievements:
        if not achievement.unlocked and achievement.condition.is_met(stats):
            achievement = replace(achievement, unlocked=True, unlocked_at=now)
            newly.append(achievement)
        updated.append(achievement)
    return updated, newly


class AchievementTracker:
    """Keeps unlock state for the achievement table and persists it."""

    def __init__(
        self,
        repository: GameStateRepository,
        definitions: Sequence[Achievement] = ACHIEVEMENTS,
        on_unlock: Optional[Callable[[Achievement], None]] = None,
    ) -> None:
        self._repository = repository
        self._on_unlock = on_unlock
        self._achievements = self._load(definitions)

    def all(self) -> List[Achievement]:
        return list(self._achievements)

    def unlocked(self) -> List[Achievement]:
        return [a for a in self._achievements if a.unlocked]

    def locked(self) -> List[Achievement]:
        return [a for a in self._achievements if not a.unlocked]

    def check_for_new_achievements(self, stats: GameStats, now: Optional[datetime] = None) -> List[Achievement]:
        self._achievements, newly = evaluate(self._achievements, stats, now)
        if newly:
            self._save()
            for achievement in newly:
                logger.info("Achievement unlocked: %s", achievement.name)
                if self._on_unlock is not None:
                    self._on_unlock(achievement)
        return newly

    def _load(self, definitions: Sequence[Achievement]) -> List[Achievement]:
        raw = self._repository.get(ACHIEVEMENTS_KEY, {})
        stored: Dict[str, dict] = raw if isinstance(raw, dict) else {}
        achievements = []
        for definition in definitions:
            entry = stored.get(definition.id)
            if isinstance(entry, dict) and entry.get("unlocked"):
                achievements.append(
                    replace(definition, unlocked=True, unlocked_at=_parse_timestamp(entry.get("unlocked_at")))
                )
            else:
                achievements.append(definition)
        return achievements

    def _save(self) -> None:
        payload = {
            a.id: {
                "unlocked": a.unlocked,
                "unlocked_at": a.unlocked_at.isoformat() if a.unlocked_at else None,
            }
            for a in self._achievements
            if a.unlocked
        }
        self._repository.set(ACHIEVEMENTS_KEY, payload)


def _parse_timestamp(value: object) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning("Ignoring malformed unlock timestamp: %r", value)
        return None
