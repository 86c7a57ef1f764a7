"""Tests for chefquiz.core.events – Qt notification signals."""

from __future__ import annotations

from chefquiz.core.events import GameEvents


class TestGameEvents:
    def test_coins_changed_carries_balance(self):
        events = GameEvents()
        seen = []
        events.coins_changed.connect(lambda coins: seen.append(coins))
        events.coins_changed.emit(120)
        assert seen == [120]

    def test_achievement_unlocked_carries_id(self):
        events = GameEvents()
        seen = []
        events.achievement_unlocked.connect(lambda achievement_id: seen.append(achievement_id))
        events.achievement_unlocked.emit("toque_jaune")
        assert seen == ["toque_jaune"]

    def test_instances_are_independent(self):
        a, b = GameEvents(), GameEvents()
        seen = []
        a.board_changed.connect(lambda: seen.append("a"))
        b.board_changed.emit()
        assert seen == []
