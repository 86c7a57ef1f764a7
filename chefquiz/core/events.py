"""Qt signals the game emits for the UI to listen to."""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class GameEvents(QObject):
    coins_changed = Signal(int)
    achievement_unlocked = Signal(str)
    puzzle_solved = Signal(int)
    board_changed = Signal()
