"""
Game Registry for looking up game cartridges by name.
"""
import logging
from typing import Dict, List, Optional, Type

from .base_game import BaseGame

logger = logging.getLogger(__name__)


class GameRegistry:
    """
    Maps the name typed after `game` to a cartridge class.

    The class itself is the engine factory: the session calls it with an
    EngineContext to build a fresh engine for every launch.
    """

    def __init__(self):
        self._games: Dict[str, Type[BaseGame]] = {}

    def register(self, game_class: Type[BaseGame]) -> None:
        """
        Register a game class.
        """
        game_id = game_class.GAME_ID

        if not game_id:
            logger.warning(f"Game class {game_class.__name__} has no GAME_ID. Skipping.")
            return

        if game_id in self._games:
            raise ValueError(f"Game '{game_id}' already registered by {self._games[game_id].__name__}")

        self._games[game_id] = game_class
        logger.info(f"Registered game cartridge: {game_id} ({game_class.GAME_NAME})")

    def get_game(self, game_id: str) -> Optional[Type[BaseGame]]:
        """Get a game factory by name."""
        return self._games.get(game_id)

    def get_all_games(self) -> List[Type[BaseGame]]:
        """All registered cartridges in registration order."""
        return list(self._games.values())

    def describe(self) -> List[dict]:
        return [
            {'game_id': cls.GAME_ID, 'name': cls.GAME_NAME, 'width': cls.WIDTH, 'height': cls.HEIGHT}
            for cls in self._games.values()
        ]

    def __contains__(self, game_id: str) -> bool:
        return game_id in self._games
