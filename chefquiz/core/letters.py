from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

MAX_STOCK_LETTERS = 21


@dataclass
class LetterTile:
    """A single tile in the letter pool. An empty letter means the tile was blanked by a hint."""

    letter: str
    used: bool = False


class LetterPool:
    """Ordered pool of letter tiles. A tile's identity is its index in the pool."""

    def __init__(self, tiles: Optional[Iterable[LetterTile]] = None) -> None:
        self._tiles: List[LetterTile] = [LetterTile(t.letter, t.used) for t in tiles or []]

    @classmethod
    def build(
        cls,
        target_word: str,
        extra_letters: Sequence[str],
        max_stock: int = MAX_STOCK_LETTERS,
        shuffle: bool = True,
        rng: Optional[random.Random] = None,
    ) -> "LetterPool":
        """Build a pool holding every letter of the target word plus filler letters.

        Filler letters are drawn without replacement from a shuffled copy of
        ``extra_letters`` until the pool reaches ``max_stock``. Too few extras
        just gives a smaller pool.
        """
        rng = rng or random.Random()
        stock = [ch.upper() for ch in target_word]
        extra_needed = max_stock - len(stock)
        if extra_needed > 0 and extra_letters:
            extras = [str(e).upper() for e in extra_letters]
            rng.shuffle(extras)
            stock.extend(extras[:extra_needed])
        if shuffle:
            rng.shuffle(stock)
        return cls(LetterTile(letter) for letter in stock)

    def __len__(self) -> int:
        return len(self._tiles)

    def __getitem__(self, index: int) -> LetterTile:
        return self._tiles[index]

    def __iter__(self) -> Iterator[LetterTile]:
        return iter(self._tiles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LetterPool):
            return NotImplemented
        return self._tiles == other._tiles

    def contains_index(self, index: int) -> bool:
        return 0 <= index < len(self._tiles)

    @property
    def letters(self) -> List[str]:
        return [t.letter for t in self._tiles]

    def mark_used(self, index: int) -> None:
        if self.contains_index(index):
            self._tiles[index].used = True

    def mark_unused(self, index: int) -> None:
        if self.contains_index(index):
            self._tiles[index].used = False

    def blank(self, index: int) -> None:
        """Retire a tile: clear its letter and keep it marked used."""
        if self.contains_index(index):
            self._tiles[index].letter = ""
            self._tiles[index].used = True

    def remove_at(self, index: int) -> bool:
        """Permanently delete an unused tile. Later indices shift down by one."""
        if not self.contains_index(index) or self._tiles[index].used:
            return False
        del self._tiles[index]
        return True

    def first_unused(self, letter: str) -> Optional[int]:
        for index, tile in enumerate(self._tiles):
            if not tile.used and tile.letter == letter:
                return index
        return None

    def unused_count(self, letter: str) -> int:
        return sum(1 for t in self._tiles if not t.used and t.letter == letter)

    def unused_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for tile in self._tiles:
            if not tile.used and tile.letter:
                counts[tile.letter] = counts.get(tile.letter, 0) + 1
        return counts

    def release_all(self) -> None:
        for tile in self._tiles:
            tile.used = False

    def copy(self) -> "LetterPool":
        return LetterPool(self._tiles)

    def to_list(self) -> List[dict]:
        return [{"letter": t.letter, "used": t.used} for t in self._tiles]

    @classmethod
    def from_list(cls, raw: Sequence[dict]) -> "LetterPool":
        return cls(
            LetterTile(letter=str(item.get("letter", "")).upper(), used=bool(item.get("used", False)))
            for item in raw
        )
