"""Data models."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import NamedTuple, Optional

from .constants import DIRECTIONS, OPPOSITES


class Direction(str, Enum):
    UP = "UP"
    RIGHT = "RIGHT"
    DOWN = "DOWN"
    LEFT = "LEFT"

    @property
    def delta(self) -> tuple[int, int]:
        return DIRECTIONS[self.value]

    @property
    def opposite(self) -> "Direction":
        return Direction(OPPOSITES[self.value])

    @classmethod
    def parse(cls, value) -> Optional["Direction"]:
        """Return the Direction named by ``value`` (case-insensitive), or None."""
        if isinstance(value, Direction):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


class GameStatus(Enum):
    RUNNING = "running"
    GAME_OVER = "game_over"


class Coordinate(NamedTuple):
    row: int
    col: int


class BodyNode(NamedTuple):
    coordinate: Coordinate
    cell: int


@dataclass(frozen=True)
class RenderState:
    """Everything the renderer needs for one frame.

    ``cells`` runs from tail to head, so ``cells[0]`` is the tail and
    ``cells[-1]`` is the head.
    """
    size: int
    cells: tuple[int, ...]
    food: Optional[int]
    direction: Direction
    score: int
    speed: int
    status: GameStatus
    won: bool = False

    @property
    def head(self) -> int:
        return self.cells[-1]

    @property
    def tail(self) -> int:
        return self.cells[0]

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    def to_dict(self) -> dict:
        data = asdict(self)
        data["cells"] = list(self.cells)
        data["head"] = self.head
        data["tail"] = self.tail
        data["direction"] = self.direction.value
        data["status"] = self.status.value
        return data

    def print_board(self) -> str:
        """
        Returns a text rendering of the board, one line per row:
        . = empty cell
        F = food
        o = snake body
        T = snake tail
        H = snake head
        """
        board = [["." for _ in range(self.size)] for _ in range(self.size)]

        def mark(cell: int, char: str):
            row, col = divmod(cell - 1, self.size)
            board[row][col] = char

        if self.food is not None:
            mark(self.food, "F")
        for cell in self.cells:
            mark(cell, "o")
        mark(self.tail, "T")
        mark(self.head, "H")

        return "\n".join(" ".join(row) for row in board)
