"""Tests for chefquiz.core.letters – the letter pool."""

from __future__ import annotations

import random
from collections import Counter

from chefquiz.core.letters import MAX_STOCK_LETTERS, LetterPool, LetterTile


# ---------------------------------------------------------------------------
# LetterTile dataclass
# ---------------------------------------------------------------------------

class TestLetterTile:
    def test_defaults(self):
        tile = LetterTile("A")
        assert tile.letter == "A"
        assert tile.used is False

    def test_equality(self):
        assert LetterTile("A", True) == LetterTile("A", True)
        assert LetterTile("A") != LetterTile("B")


# ---------------------------------------------------------------------------
# LetterPool.build
# ---------------------------------------------------------------------------

class TestBuild:
    def test_contains_every_target_letter(self):
        pool = LetterPool.build("CAT", list("XYZ"), rng=random.Random(0))
        letters = Counter(pool.letters)
        assert letters["C"] == 1 and letters["A"] == 1 and letters["T"] == 1

    def test_short_extras_give_smaller_pool(self):
        pool = LetterPool.build("CAT", list("XYZ"))
        assert len(pool) == 6

    def test_fills_up_to_max_stock(self):
        extras = [chr(c) for c in range(ord("A"), ord("Z") + 1)]
        pool = LetterPool.build("CAT", extras)
        assert len(pool) == MAX_STOCK_LETTERS

    def test_extras_drawn_without_replacement(self):
        extras = list("DEFGHIJKLMNOPQRSUVWXYZ")
        pool = LetterPool.build("CAT", extras, rng=random.Random(3))
        fillers = Counter(pool.letters) - Counter("CAT")
        assert all(count == 1 for count in fillers.values())
        assert sum(fillers.values()) == MAX_STOCK_LETTERS - 3

    def test_word_longer_than_stock_gets_no_extras(self):
        pool = LetterPool.build("ABC", list("XYZ"), max_stock=2)
        assert sorted(pool.letters) == ["A", "B", "C"]

    def test_no_shuffle_keeps_word_order(self):
        pool = LetterPool.build("CAT", [], shuffle=False)
        assert pool.letters == ["C", "A", "T"]

    def test_letters_uppercased(self):
        pool = LetterPool.build("cat", ["x"], shuffle=False)
        assert pool.letters == ["C", "A", "T", "X"]

    def test_all_tiles_unused(self):
        pool = LetterPool.build("CAT", list("XY"))
        assert not any(t.used for t in pool)


# ---------------------------------------------------------------------------
# Marking, blanking and removing
# ---------------------------------------------------------------------------

class TestTileMutation:
    def _pool(self) -> LetterPool:
        return LetterPool.build("CAT", list("XY"), shuffle=False)

    def test_mark_used_and_unused(self):
        pool = self._pool()
        pool.mark_used(1)
        assert pool[1].used
        pool.mark_unused(1)
        assert not pool[1].used

    def test_mark_out_of_range_is_noop(self):
        pool = self._pool()
        pool.mark_used(99)
        pool.mark_unused(-1)
        assert not any(t.used for t in pool)

    def test_blank(self):
        pool = self._pool()
        pool.blank(3)
        assert pool[3] == LetterTile("", True)

    def test_remove_at_shifts_indices(self):
        pool = self._pool()
        assert pool.remove_at(0)
        assert pool.letters[:2] == ["A", "T"]
        assert len(pool) == 4

    def test_remove_used_tile_rejected(self):
        pool = self._pool()
        pool.mark_used(2)
        assert not pool.remove_at(2)
        assert len(pool) == 5

    def test_remove_out_of_range_rejected(self):
        pool = self._pool()
        assert not pool.remove_at(5)
        assert len(pool) == 5


# ---------------------------------------------------------------------------
# Queries and copies
# ---------------------------------------------------------------------------

class TestQueries:
    def test_first_unused_skips_used(self):
        pool = LetterPool.build("EGG", [], shuffle=False)
        pool.mark_used(1)
        assert pool.first_unused("G") == 2

    def test_first_unused_missing(self):
        pool = LetterPool.build("EGG", [], shuffle=False)
        assert pool.first_unused("Z") is None

    def test_unused_counts_ignore_blanks(self):
        pool = LetterPool.build("EGG", ["G"], shuffle=False)
        pool.blank(3)
        pool.mark_used(0)
        assert pool.unused_counts() == {"G": 2}
        assert pool.unused_count("G") == 2

    def test_copy_is_independent(self):
        pool = LetterPool.build("CAT", [], shuffle=False)
        clone = pool.copy()
        clone.mark_used(0)
        assert not pool[0].used
        assert clone != pool

    def test_list_round_trip(self):
        pool = LetterPool.build("CAT", ["X"], shuffle=False)
        pool.mark_used(2)
        pool.blank(3)
        assert LetterPool.from_list(pool.to_list()) == pool
