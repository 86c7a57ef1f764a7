"""Application setup for the Chef Quiz game core."""

import logging
from pathlib import Path
from typing import Optional

from chefquiz.core.content import ContentRepository
from chefquiz.core.events import GameEvents
from chefquiz.core.game import Game
from chefquiz.core.storage import JsonFileRepository


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_game(
    state_path: Optional[Path] = None,
    content_dir: Optional[Path] = None,
    theme_id: Optional[str] = None,
) -> Game:
    """Wire the game core to its JSON state file and bundled content.

    The UI keeps the returned game and connects to ``game.events``.
    """
    repository = JsonFileRepository(state_path)
    content = ContentRepository(content_dir)
    game = Game(repository=repository, content=content, events=GameEvents())

    if theme_id is None:
        unlocked = game.unlocked_themes()
        theme_id = unlocked[0].id if unlocked else None
    if theme_id is None:
        logging.warning("No playable theme found in %s", content.base_dir)
    elif not game.load_theme(theme_id):
        logging.warning("Could not load theme %s", theme_id)
    return game
