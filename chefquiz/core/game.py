from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from chefquiz.core.achievements import Achievement, AchievementTracker
from chefquiz.core.board import BoardState, InsertResult, PuzzleBoard, RevealedLetter
from chefquiz.core.content import ContentRepository, Level, Theme
from chefquiz.core.economy import (
    AD_WATCH_REWARD,
    COIN_PACKS,
    INITIAL_COINS,
    HintKind,
    Wallet,
    scratch_card,
    spin_wheel,
    win_reward,
)
from chefquiz.core.events import GameEvents
from chefquiz.core.progress import GameStats, ProgressTracker
from chefquiz.core.storage import GameStateRepository

logger = logging.getLogger(__name__)

WALLET_KEY = "wallet"
PUZZLE_KEY = "puzzle"


@dataclass
class HintResult:
    success: bool
    kind: HintKind
    removed: List[int] = field(default_factory=list)
    revealed: List[RevealedLetter] = field(default_factory=list)
    state: BoardState = BoardState.IN_PROGRESS


class Game:
    """Everything the UI talks to: the current puzzle, coins, hints and progression.

    Each command validates first and only then mutates, and state is saved
    after every command that changed something. Commands are safe to call
    at any time, including while the UI is still animating a previous one.
    """

    def __init__(
        self,
        repository: GameStateRepository,
        content: ContentRepository,
        events: Optional[GameEvents] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._repository = repository
        self._content = content
        self._events = events or GameEvents()
        self._rng = rng or random.Random()

        self._wallet = Wallet(self._load_coins(), on_change=self._coins_changed)
        self._progress = ProgressTracker(repository)
        self._achievements = AchievementTracker(repository, on_unlock=self._achievement_unlocked)

        self._theme_id: Optional[str] = None
        self._levels: List[Level] = []
        self._level_index = 0
        self._board: Optional[PuzzleBoard] = None
        self._used_hints = False
        self._rewarded = False
        self._restored: Optional[Dict[str, Any]] = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def events(self) -> GameEvents:
        return self._events

    @property
    def coins(self) -> int:
        return self._wallet.coins

    @property
    def board(self) -> Optional[PuzzleBoard]:
        return self._board

    @property
    def stats(self) -> GameStats:
        return self._progress.stats

    @property
    def achievements(self) -> AchievementTracker:
        return self._achievements

    @property
    def theme_id(self) -> Optional[str]:
        return self._theme_id

    @property
    def level_index(self) -> int:
        return self._level_index

    @property
    def level_number(self) -> int:
        """Human-friendly level number (1-based)."""
        return self._level_index + 1

    @property
    def current_level(self) -> Optional[Level]:
        if 0 <= self._level_index < len(self._levels):
            return self._levels[self._level_index]
        return None

    @property
    def used_hints(self) -> bool:
        return self._used_hints

    # ------------------------------------------------------------------
    # Themes and levels
    # ------------------------------------------------------------------

    def themes(self) -> List[Theme]:
        return self._content.load_themes()

    def is_theme_unlocked(self, theme: Theme) -> bool:
        return theme.is_unlocked(self._progress.stats.levels_completed)

    def unlocked_themes(self) -> List[Theme]:
        return [t for t in self.themes() if self.is_theme_unlocked(t)]

    def theme_completion(self, theme_id: str) -> float:
        return self._progress.completion_percentage(theme_id, len(self._content.load_levels(theme_id)))

    def load_theme(self, theme_id: str) -> bool:
        """Switch to a theme, resuming its saved puzzle if there is one."""
        theme = self._content.get_theme(theme_id)
        if theme is None:
            logger.warning("Unknown theme: %s", theme_id)
            return False
        if not self.is_theme_unlocked(theme):
            logger.info("Theme %s is locked", theme_id)
            return False
        levels = self._content.load_levels(theme_id)
        if not levels:
            logger.warning("Theme %s has no levels", theme_id)
            return False

        self._theme_id = theme_id
        self._levels = levels
        self._level_index = 0
        self.load_state()
        if self._level_index >= len(self._levels):
            self._level_index = max(len(self._levels) - 1, 0)
        logger.info("Loaded %d levels for theme %s", len(levels), theme.name)
        self.load_current_level()
        return True

    def load_current_level(self) -> Optional[PuzzleBoard]:
        level = self.current_level
        if level is None:
            logger.info("No more levels available")
            return None

        restored = self._restored
        self._restored = None
        board = None
        if restored is not None and str(restored.get("board", {}).get("target_word", "")).upper() == level.word:
            board = PuzzleBoard.from_snapshot(restored["board"], rng=self._rng)
        if board is not None:
            self._used_hints = bool(restored.get("used_hints", False))
            self._rewarded = bool(restored.get("rewarded", False))
        else:
            board = PuzzleBoard(level.word, level.extra_letters, rng=self._rng)
            self._used_hints = False
            self._rewarded = False

        self._board = board
        logger.info("Loading level %d: %s", level.id, level.word)
        self._changed()
        return board

    def has_next_level(self) -> bool:
        return self._level_index + 1 < len(self._levels)

    def advance_level(self) -> Optional[PuzzleBoard]:
        self._level_index += 1
        if self._level_index >= len(self._levels):
            self._level_index = max(len(self._levels) - 1, 0)
            logger.info("Reached final level or no levels remain")
        return self.load_current_level()

    # ------------------------------------------------------------------
    # Puzzle commands
    # ------------------------------------------------------------------

    def insert_letter(self, tile_index: int, slot_index: int) -> InsertResult:
        if self._board is None:
            return InsertResult(inserted=False, state=BoardState.IN_PROGRESS)
        result = self._board.insert(tile_index, slot_index)
        if result.inserted:
            self._changed()
        return result

    def remove_letter(self, slot_index: int) -> bool:
        if self._board is None or not self._board.remove(slot_index):
            return False
        self._changed()
        return True

    def reset_guess(self) -> None:
        if self._board is None:
            return
        self._board.reset()
        self._changed()

    def check_win(self) -> bool:
        return self._board is not None and self._board.check_win()

    def tile_for_slot(self, slot_index: int) -> Optional[int]:
        return self._board.tile_for_slot(slot_index) if self._board is not None else None

    def is_slot_frozen(self, slot_index: int) -> bool:
        return self._board is not None and self._board.is_frozen(slot_index)

    # ------------------------------------------------------------------
    # Hints
    # ------------------------------------------------------------------

    def is_hint_enabled(self, kind: HintKind) -> bool:
        if self._board is None or not self._wallet.can_afford(kind.price):
            return False
        if kind.is_removal:
            return self._board.can_remove_incorrect_letters(kind.amount)
        if kind.is_reveal:
            return self._board.can_reveal_letters(kind.amount)
        return True

    def request_hint(self, kind: HintKind) -> HintResult:
        board = self._board
        if board is None or not self._wallet.can_afford(kind.price):
            return HintResult(success=False, kind=kind, state=self._state())

        if kind is HintKind.SKIP_LEVEL:
            skipped = self.skip_level()
            return HintResult(success=skipped, kind=kind, state=self._state())

        if kind.is_removal:
            if not board.can_remove_incorrect_letters(kind.amount):
                return HintResult(success=False, kind=kind, state=board.state)
            removal = board.remove_incorrect_letters(kind.amount, rng=self._rng)
            result = HintResult(success=removal.success, kind=kind, removed=removal.removed, state=removal.state)
        else:
            if not board.can_reveal_letters(kind.amount):
                return HintResult(success=False, kind=kind, state=board.state)
            revealed = board.prepare_reveal(kind.amount)
            if not revealed:
                # nothing placed, nothing charged
                return HintResult(success=False, kind=kind, state=board.state)
            result = HintResult(success=True, kind=kind, revealed=revealed, state=board.state)

        self._wallet.spend(kind.price)
        self._used_hints = True
        self._achievements.check_for_new_achievements(self._progress.track_hint_usage())
        self._changed()
        return result

    def skip_level(self) -> bool:
        cost = HintKind.SKIP_LEVEL.price
        if self._board is None or not self._wallet.spend(cost):
            return False
        self.advance_level()
        return True

    # ------------------------------------------------------------------
    # Coins and rewards
    # ------------------------------------------------------------------

    def earn(self, amount: int) -> int:
        """Credit coins and count them towards achievements. Returns the new balance."""
        if self._wallet.earn(amount):
            self._achievements.check_for_new_achievements(self._progress.track_coins_earned(amount))
        return self._wallet.coins

    def watch_ad(self) -> int:
        self.earn(AD_WATCH_REWARD)
        return AD_WATCH_REWARD

    def spin_wheel(self) -> int:
        prize = spin_wheel(self._rng)
        self.earn(prize)
        return prize

    def scratch_card(self) -> int:
        prize = scratch_card(self._rng)
        self.earn(prize)
        return prize

    def purchase_coins(self, pack: str) -> int:
        amount = COIN_PACKS.get(pack)
        if amount is None:
            logger.warning("Unknown coin pack: %s", pack)
            return 0
        self.earn(amount)
        return amount

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save_state(self) -> None:
        if self._board is None:
            return
        self._repository.set(
            PUZZLE_KEY,
            {
                "theme_id": self._theme_id,
                "current_level_index": self._level_index,
                "used_hints": self._used_hints,
                "rewarded": self._rewarded,
                "board": self._board.to_snapshot(),
            },
        )

    def load_state(self) -> bool:
        """Pick up the saved puzzle for the current theme, if any.

        The board itself is rebuilt by ``load_current_level`` once the saved
        word is confirmed to match the level.
        """
        raw = self._repository.get(PUZZLE_KEY)
        if not isinstance(raw, dict) or not isinstance(raw.get("board"), dict):
            return False
        if raw.get("theme_id") != self._theme_id:
            return False
        try:
            self._level_index = max(0, int(raw.get("current_level_index", 0)))
        except (TypeError, ValueError):
            logger.warning("Ignoring saved puzzle with bad level index: %r", raw.get("current_level_index"))
            return False
        self._restored = raw
        logger.info("Loaded puzzle state for level: %d", self._level_index)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _state(self) -> BoardState:
        return self._board.state if self._board is not None else BoardState.IN_PROGRESS

    def _changed(self) -> None:
        if self._board is not None and self._board.state is BoardState.SOLVED:
            self._handle_win()
        self.save_state()
        self._events.board_changed.emit()

    def _handle_win(self) -> None:
        if self._rewarded or self._board is None:
            return
        self._rewarded = True
        reward = win_reward(len(self._board.target_word))
        self.earn(reward)
        level = self.current_level
        stats = self._progress.track_level_completion(
            used_hints=self._used_hints,
            theme_id=self._theme_id,
            level_id=level.id if level is not None else None,
        )
        self._achievements.check_for_new_achievements(stats)
        logger.info("Solved %s, awarded %d coins", self._board.target_word, reward)
        self._events.puzzle_solved.emit(reward)

    def _load_coins(self) -> int:
        wallet = self._repository.get(WALLET_KEY)
        if isinstance(wallet, dict) and wallet.get("initialized"):
            try:
                return max(0, int(wallet.get("coins", 0)))
            except (TypeError, ValueError):
                logger.warning("Ignoring malformed coin balance: %r", wallet.get("coins"))
        self._repository.set(WALLET_KEY, {"coins": INITIAL_COINS, "initialized": True})
        return INITIAL_COINS

    def _coins_changed(self, coins: int) -> None:
        self._repository.set(WALLET_KEY, {"coins": coins, "initialized": True})
        self._events.coins_changed.emit(coins)

    def _achievement_unlocked(self, achievement: Achievement) -> None:
        self._events.achievement_unlocked.emit(achievement.id)
