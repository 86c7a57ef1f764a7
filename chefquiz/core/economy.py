from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

INITIAL_COINS = 100

AD_WATCH_REWARD = 25
SPIN_WHEEL_PRIZES: List[int] = [0, 10, 20, 30, 40, 50, 60, 70, 80, 100]
SCRATCH_CARD_PRIZES: List[int] = [10, 20, 50, 100, 200]

# Simulated store packs, no payment processing behind them.
COIN_PACKS: Dict[str, int] = {
    "handful": 100,
    "pouch": 250,
    "bag": 500,
    "chest": 1000,
    "vault": 2500,
}


class HintKind(Enum):
    REMOVE_ONE = "remove-1-letter"
    REMOVE_TWO = "remove-2-letters"
    REVEAL_ONE = "reveal-1-letter"
    REVEAL_TWO = "reveal-2-letters"
    SKIP_LEVEL = "skip-level"

    @property
    def price(self) -> int:
        return HINT_PRICES[self]

    @property
    def amount(self) -> int:
        """Number of letters the hint removes or reveals (0 for skip)."""
        if self in (HintKind.REMOVE_ONE, HintKind.REVEAL_ONE):
            return 1
        if self in (HintKind.REMOVE_TWO, HintKind.REVEAL_TWO):
            return 2
        return 0

    @property
    def is_removal(self) -> bool:
        return self in (HintKind.REMOVE_ONE, HintKind.REMOVE_TWO)

    @property
    def is_reveal(self) -> bool:
        return self in (HintKind.REVEAL_ONE, HintKind.REVEAL_TWO)


HINT_PRICES: Dict[HintKind, int] = {
    HintKind.REMOVE_ONE: 30,
    HintKind.REMOVE_TWO: 50,
    HintKind.REVEAL_ONE: 50,
    HintKind.REVEAL_TWO: 80,
    HintKind.SKIP_LEVEL: 500,
}


def win_reward(word_length: int) -> int:
    """Coins for solving a puzzle: 50 base, +5 per letter past three, capped at 100."""
    return max(0, min(50 + (word_length - 3) * 5, 100))


def spin_wheel(rng: Optional[random.Random] = None) -> int:
    return (rng or random).choice(SPIN_WHEEL_PRIZES)


def scratch_card(rng: Optional[random.Random] = None) -> int:
    return (rng or random).choice(SCRATCH_CARD_PRIZES)


class Wallet:
    """Global coin balance. The balance never drops below zero."""

    def __init__(self, coins: int = INITIAL_COINS, on_change: Optional[Callable[[int], None]] = None) -> None:
        if coins < 0:
            raise ValueError(f"coin balance cannot be negative: {coins}")
        self._coins = coins
        self._on_change = on_change

    @property
    def coins(self) -> int:
        return self._coins

    def can_afford(self, cost: int) -> bool:
        return cost >= 0 and self._coins >= cost

    def spend(self, cost: int) -> bool:
        if not self.can_afford(cost):
            logger.info("Not enough coins: %d < %d", self._coins, cost)
            return False
        self._coins -= cost
        self._notify()
        return True

    def earn(self, amount: int) -> int:
        if amount <= 0:
            return 0
        self._coins += amount
        self._notify()
        return amount

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self._coins)
