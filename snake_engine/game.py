"""Core game state and logic."""

import logging
import random
import threading
from typing import Callable, Optional

from .body import OccupancySet, SnakeBody
from .constants import BOARD_SIZE, BASE_SPEED, FOOD_OFFSET, SPEED_TABLE
from .errors import BoardFullError, ConfigError
from .food import FoodPlacer
from .grid import Grid
from .models import Coordinate, Direction, GameStatus, RenderState

logger = logging.getLogger(__name__)

Listener = Callable[[RenderState], None]


def speed_for_score(score: int, current: int = BASE_SPEED) -> int:
    """Tick interval for ``score``.

    The first threshold (from the lowest) that the score exceeds wins; below
    every threshold the current interval is kept.
    """
    for threshold, interval in SPEED_TABLE:
        if score > threshold:
            return interval
    return current


class GameEngine:
    """
    One single-player game session.

    Every mutating call goes through one lock, so ticks and input coming from
    different threads are applied one at a time. Listeners are called after the
    lock is released.
    """

    def __init__(
        self,
        size: int = BOARD_SIZE,
        wrap: bool = True,
        rng: Optional[random.Random] = None,
        food_placer: Optional[FoodPlacer] = None,
    ):
        if not isinstance(wrap, bool):
            raise ConfigError(f"wrap must be a bool, got {wrap!r}.")
        self.grid = Grid(size)
        self.wrap = wrap
        self.food_placer = food_placer or FoodPlacer(rng)
        self._lock = threading.RLock()
        self._game_over_listeners: list[Listener] = []
        self._change_listeners: list[Listener] = []
        self._init_state()

    @property
    def start_position(self) -> Coordinate:
        offset = round(self.grid.size / 3)
        return Coordinate(offset, offset)

    def _init_state(self):
        start = self.start_position
        start_cell = self.grid.cell_at(start)
        self.body = SnakeBody(start, start_cell)
        self.occupancy = OccupancySet([start_cell])
        self.direction = Direction.RIGHT
        self.score = 0
        self.speed = BASE_SPEED
        self.status = GameStatus.RUNNING
        self.won = False
        self.game_over_reason: Optional[str] = None
        self.food = self._initial_food(start_cell)

    def _initial_food(self, start_cell: int) -> Optional[int]:
        food = start_cell + FOOD_OFFSET
        if food <= self.grid.max_cell:
            return food
        # Boards too small for the fixed offset fall back to a random cell.
        try:
            return self.food_placer.place(self.occupancy, None, self.grid.max_cell)
        except BoardFullError:
            return None

    # ── Listeners ──────────────────────────────────────────────

    def add_game_over_listener(self, callback: Listener):
        self._game_over_listeners.append(callback)

    def add_change_listener(self, callback: Listener):
        self._change_listeners.append(callback)

    @staticmethod
    def _notify(listeners: list[Listener], snapshot: RenderState):
        for callback in listeners:
            callback(snapshot)

    # ── Input ──────────────────────────────────────────────────

    def set_direction(self, requested) -> bool:
        """Apply a player's direction request. Returns True if it was applied."""
        direction = Direction.parse(requested)
        with self._lock:
            if self.status is not GameStatus.RUNNING:
                return False
            if direction is None:
                logger.debug("Ignoring invalid direction %r", requested)
                return False
            # Reversing into the body would be an instant collision.
            if direction is self.direction.opposite and len(self.body) > 1:
                return False
            self.direction = direction
            return True

    # ── Tick ───────────────────────────────────────────────────

    def tick(self) -> GameStatus:
        with self._lock:
            if self.status is GameStatus.GAME_OVER:
                return self.status

            next_coord = self.grid.step(self.body.head.coordinate, self.direction, wrap=self.wrap)
            if not self.grid.contains(next_coord):
                self._enter_game_over("wall")
            else:
                next_cell = self.grid.cell_at(next_coord)
                if next_cell in self.occupancy:
                    self._enter_game_over("self")
                else:
                    removed, added = self.body.advance(next_coord, next_cell)
                    self.occupancy.remove(removed)
                    self.occupancy.add(added)
                    if next_cell == self.food:
                        self._consume_food()

            status = self.status
            snapshot = self._snapshot()

        self._notify(self._change_listeners, snapshot)
        if status is GameStatus.GAME_OVER:
            self._notify(self._game_over_listeners, snapshot)
        return status

    def _consume_food(self):
        eaten = self.food
        self._grow()
        self.score += 1
        self.speed = speed_for_score(self.score, self.speed)
        try:
            self.food = self.food_placer.place(self.occupancy, eaten, self.grid.max_cell)
        except BoardFullError:
            self.food = None
            self.won = True
            self._enter_game_over("board full")

    def _grow(self) -> bool:
        """Extend the tail one cell behind where it currently points.

        Growth is skipped, without error, when that cell is off a bounded board
        or already covered by the body.
        """
        tail = self.body.tail.coordinate
        exit_direction = self.body.tail_exit_direction(self.direction, self.grid)
        coord = self.grid.step(tail, exit_direction.opposite, wrap=self.wrap)
        if not self.grid.contains(coord):
            return False
        cell = self.grid.cell_at(coord)
        if cell in self.occupancy:
            return False
        self.body.grow(coord, cell)
        self.occupancy.add(cell)
        return True

    def _enter_game_over(self, reason: str):
        self.status = GameStatus.GAME_OVER
        self.game_over_reason = reason
        logger.info("Game over (%s): scored %d points", reason, self.score)

    # ── Lifecycle ──────────────────────────────────────────────

    def reset(self) -> RenderState:
        with self._lock:
            self._init_state()
            snapshot = self._snapshot()
        logger.info("Game reset")
        self._notify(self._change_listeners, snapshot)
        return snapshot

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    def snapshot(self) -> RenderState:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> RenderState:
        return RenderState(
            size=self.grid.size,
            cells=tuple(self.body.cells()),
            food=self.food,
            direction=self.direction,
            score=self.score,
            speed=self.speed,
            status=self.status,
            won=self.won,
        )

    def __repr__(self):
        return (
            f"<GameEngine size={self.grid.size}, status={self.status.value}, "
            f"length={len(self.body)}, score={self.score}, speed={self.speed}>"
        )
