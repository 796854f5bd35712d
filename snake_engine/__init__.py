"""
Single-player snake simulation core.

The engine is independent of the host shell in ``snake_engine.main``, which
drives it with an asyncio timer and WebSocket input.
"""

from .body import OccupancySet, SnakeBody
from .errors import BoardFullError, ConfigError, SnakeEngineError
from .food import FoodPlacer
from .game import GameEngine, speed_for_score
from .grid import Grid
from .models import Coordinate, Direction, GameStatus, RenderState

__all__ = [
    'Grid',
    'SnakeBody',
    'OccupancySet',
    'FoodPlacer',
    'GameEngine',
    'speed_for_score',
    'Coordinate',
    'Direction',
    'GameStatus',
    'RenderState',
    'SnakeEngineError',
    'ConfigError',
    'BoardFullError',
]
