"""Game cartridges - pluggable terminal games."""

from .base_game import BaseGame, EngineContext, Cell
from .game_registry import GameRegistry

# Import all game classes
from .snake.game import SnakeGame
from .defender.game import DefenderGame
from .tetris.game import TetrisGame

# All available games in registration order
ALL_GAMES = [
    SnakeGame,
    DefenderGame,
    TetrisGame,
]

__all__ = [
    'BaseGame', 'EngineContext', 'Cell', 'GameRegistry',
    'ALL_GAMES',
    'SnakeGame', 'DefenderGame', 'TetrisGame',
]
