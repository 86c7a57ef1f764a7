from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set

from chefquiz.core.letters import MAX_STOCK_LETTERS, LetterPool

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 20


class BoardState(Enum):
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"
    FAILED = "failed"


@dataclass
class InsertResult:
    inserted: bool
    state: BoardState


@dataclass
class RemovalResult:
    """Outcome of a remove-incorrect-letters hint."""

    success: bool
    removed: List[int] = field(default_factory=list)
    state: BoardState = BoardState.IN_PROGRESS


@dataclass(frozen=True)
class RevealedLetter:
    slot: int
    tile: int
    letter: str


def is_valid_word(word: str) -> bool:
    return MIN_WORD_LENGTH <= len(word) <= MAX_WORD_LENGTH and word.isalpha()


class PuzzleBoard:
    """State of a single puzzle: the target word, the player's guess and the letter pool.

    Each slot of the guess holds a letter or ``None``. Slots filled by a
    reveal hint are frozen and can no longer be changed. ``guess_to_tile``
    maps every filled slot to the pool tile it came from, so a tile is
    ``used`` exactly when some slot points at it (or it was blanked).

    Invalid commands (bad indices, used tiles, frozen slots) are silently
    rejected and leave the board untouched.
    """

    def __init__(
        self,
        target_word: str,
        extra_letters: Sequence[str] = (),
        shuffle: bool = True,
        rng: Optional[random.Random] = None,
        max_stock: int = MAX_STOCK_LETTERS,
    ) -> None:
        word = target_word.strip().upper()
        if not is_valid_word(word):
            raise ValueError(
                f"Target word must be {MIN_WORD_LENGTH}-{MAX_WORD_LENGTH} letters, got {target_word!r}"
            )
        self._rng = rng or random.Random()
        self._target = word
        self._guess: List[Optional[str]] = [None] * len(word)
        self._guess_to_tile: List[Optional[int]] = [None] * len(word)
        self._frozen: Set[int] = set()
        self._pool = LetterPool.build(word, extra_letters, max_stock=max_stock, shuffle=shuffle, rng=self._rng)
        self._initial_pool = self._pool.copy()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def target_word(self) -> str:
        return self._target

    @property
    def target_letters(self) -> List[str]:
        return list(self._target)

    @property
    def guess(self) -> List[Optional[str]]:
        return list(self._guess)

    @property
    def guess_word(self) -> str:
        return "".join(letter or "" for letter in self._guess)

    @property
    def frozen_slots(self) -> Set[int]:
        return set(self._frozen)

    @property
    def pool(self) -> LetterPool:
        return self._pool

    @property
    def initial_pool(self) -> LetterPool:
        return self._initial_pool

    def tile_for_slot(self, slot_index: int) -> Optional[int]:
        if not 0 <= slot_index < len(self._guess):
            return None
        return self._guess_to_tile[slot_index]

    def is_frozen(self, slot_index: int) -> bool:
        return slot_index in self._frozen

    def empty_slots(self) -> List[int]:
        return [i for i, letter in enumerate(self._guess) if letter is None]

    def is_full(self) -> bool:
        return all(letter is not None for letter in self._guess)

    # ------------------------------------------------------------------
    # Win state
    # ------------------------------------------------------------------

    def check_win(self) -> bool:
        if not self.is_full():
            return False
        return self.guess_word == self._target

    @property
    def state(self) -> BoardState:
        if not self.is_full():
            return BoardState.IN_PROGRESS
        return BoardState.SOLVED if self.check_win() else BoardState.FAILED

    # ------------------------------------------------------------------
    # Player moves
    # ------------------------------------------------------------------

    def insert(self, tile_index: int, slot_index: int) -> InsertResult:
        """Place the tile into the slot, freeing whatever tile the slot held before."""
        if (
            not 0 <= slot_index < len(self._guess)
            or not self._pool.contains_index(tile_index)
            or self._pool[tile_index].used
            or slot_index in self._frozen
        ):
            return InsertResult(inserted=False, state=self.state)

        if self._guess[slot_index] is not None:
            self.remove(slot_index)

        self._pool.mark_used(tile_index)
        self._guess[slot_index] = self._pool[tile_index].letter
        self._guess_to_tile[slot_index] = tile_index
        return InsertResult(inserted=True, state=self.state)

    def remove(self, slot_index: int) -> bool:
        if slot_index in self._frozen or not 0 <= slot_index < len(self._guess):
            return False
        tile_index = self._guess_to_tile[slot_index]
        if tile_index is None or self._guess[slot_index] is None:
            return False

        self._guess[slot_index] = None
        self._guess_to_tile[slot_index] = None
        self._pool.mark_unused(tile_index)
        return True

    def reset(self) -> None:
        """Clear the guess and frozen slots and restore the pool as it was built.

        Tiles blanked by a removal hint come back too; spent coins do not.
        """
        self._guess = [None] * len(self._target)
        self._guess_to_tile = [None] * len(self._target)
        self._frozen.clear()
        self._pool = self._initial_pool.copy()
        self._pool.release_all()

    # ------------------------------------------------------------------
    # Hint: remove incorrect letters
    # ------------------------------------------------------------------

    def candidate_tiles(self) -> List[int]:
        """Unused tiles whose letter is not in the target word or has more unused copies than it needs."""
        required = Counter(self._target)
        available = self._pool.unused_counts()
        return [
            index
            for index, tile in enumerate(self._pool)
            if not tile.used
            and tile.letter
            and (tile.letter not in required or available[tile.letter] > required[tile.letter])
        ]

    def can_remove_incorrect_letters(self, amount: int) -> bool:
        return amount > 0 and len(self.candidate_tiles()) >= amount

    def remove_incorrect_letters(self, count: int, rng: Optional[random.Random] = None) -> RemovalResult:
        """Blank ``count`` tiles picked at random among the candidates, or do nothing if there are too few."""
        if not self.can_remove_incorrect_letters(count):
            return RemovalResult(success=False, state=self.state)

        rng = rng or self._rng
        chosen = rng.sample(self.candidate_tiles(), count)
        for index in chosen:
            self._pool.blank(index)
        logger.debug("Blanked tiles %s for %s", chosen, self._target)
        return RemovalResult(success=True, removed=chosen, state=self.state)

    # ------------------------------------------------------------------
    # Hint: reveal letters
    # ------------------------------------------------------------------

    def can_reveal_letters(self, amount: int) -> bool:
        # Only counts empty slots; a reveal may still place fewer letters.
        return amount > 0 and len(self.empty_slots()) >= amount

    def prepare_reveal(self, count: int) -> List[RevealedLetter]:
        """Fill up to ``count`` empty slots with their correct letter and freeze them.

        Slots are visited in ascending order. A slot whose letter has no
        unused tile left is skipped.
        """
        revealed: List[RevealedLetter] = []
        if count <= 0:
            return revealed
        for slot_index in self.empty_slots()[:count]:
            letter = self._target[slot_index]
            tile_index = self._pool.first_unused(letter)
            if tile_index is None:
                logger.debug("No tile left for letter %s at slot %d", letter, slot_index)
                continue
            self._pool.mark_used(tile_index)
            self._guess[slot_index] = letter
            self._guess_to_tile[slot_index] = tile_index
            self._frozen.add(slot_index)
            revealed.append(RevealedLetter(slot=slot_index, tile=tile_index, letter=letter))
        return revealed

    def reveal_letters(self, count: int) -> int:
        return len(self.prepare_reveal(count))

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            "target_word": self._target,
            "guess": list(self._guess),
            "guess_to_tile": list(self._guess_to_tile),
            "frozen_slots": sorted(self._frozen),
            "pool": self._pool.to_list(),
            "initial_pool": self._initial_pool.to_list(),
        }

    @classmethod
    def from_snapshot(
        cls,
        data: Dict[str, Any],
        rng: Optional[random.Random] = None,
    ) -> Optional["PuzzleBoard"]:
        """Rebuild a board from ``to_snapshot`` output, keeping the saved tile order.

        Returns None when the snapshot does not describe a consistent board.
        """
        try:
            board = cls(str(data["target_word"]), shuffle=False, rng=rng)
            pool = LetterPool.from_list(data.get("pool") or [])
            initial = LetterPool.from_list(data.get("initial_pool") or data.get("pool") or [])
            guess = [None if g is None else str(g).upper() for g in data.get("guess") or []]
            frozen = {int(s) for s in data.get("frozen_slots") or []}
            mapping = data.get("guess_to_tile")
            if mapping is not None:
                if not isinstance(mapping, list):
                    raise TypeError(f"guess_to_tile must be a list, got {type(mapping).__name__}")
                mapping = [None if t is None else int(t) for t in mapping]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Could not restore puzzle snapshot: %s", e)
            return None

        if not board.restore(guess, pool, frozen, mapping=mapping, initial_pool=initial):
            return None
        return board

    def restore(
        self,
        guess: Sequence[Optional[str]],
        pool: LetterPool,
        frozen_slots: Set[int],
        mapping: Optional[Sequence[Optional[int]]] = None,
        initial_pool: Optional[LetterPool] = None,
    ) -> bool:
        """Replace the board contents with a saved guess and pool.

        When no slot-to-tile mapping was saved, each placed letter is
        matched to the first used tile carrying it.
        """
        if len(guess) != len(self._target) or len(pool) == 0:
            logger.warning("Restore failed for %s: counts don't match", self._target)
            return False
        if any(not 0 <= s < len(self._target) or guess[s] is None for s in frozen_slots):
            logger.warning("Restore failed for %s: frozen slot without a letter", self._target)
            return False

        new_mapping: List[Optional[int]] = [None] * len(self._target)
        new_guess: List[Optional[str]] = [None] * len(self._target)
        claimed: Set[int] = set()
        for slot_index, letter in enumerate(guess):
            if letter is None:
                continue
            tile_index = None
            if mapping is not None and slot_index < len(mapping):
                tile_index = mapping[slot_index]
            if tile_index is None:
                tile_index = next(
                    (
                        i
                        for i, tile in enumerate(pool)
                        if tile.used and tile.letter == letter and i not in claimed
                    ),
                    None,
                )
            if (
                not isinstance(tile_index, int)
                or tile_index in claimed
                or not pool.contains_index(tile_index)
                or pool[tile_index].letter != letter
                or not pool[tile_index].used
            ):
                logger.warning("Restore failed for %s: can't match letter %s", self._target, letter)
                return False
            claimed.add(tile_index)
            new_mapping[slot_index] = tile_index
            new_guess[slot_index] = letter

        self._pool = pool.copy()
        self._initial_pool = (initial_pool or pool).copy()
        self._guess = new_guess
        self._guess_to_tile = new_mapping
        self._frozen = set(frozen_slots)
        self._assert_consistent()
        return True

    def _assert_consistent(self) -> None:
        assert len(self._guess) == len(self._target)
        for slot_index in self._frozen:
            assert self._guess_to_tile[slot_index] is not None, f"frozen slot {slot_index} is unmapped"
        mapped = [t for t in self._guess_to_tile if t is not None]
        assert len(mapped) == len(set(mapped)), "tile mapped to more than one slot"
        for tile_index in mapped:
            assert self._pool[tile_index].used, f"mapped tile {tile_index} is not marked used"
