"""Board addressing."""

from .errors import ConfigError
from .models import Coordinate, Direction


class Grid:
    """N x N board. Cells are numbered row-major from 1 to size * size."""

    def __init__(self, size: int):
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ConfigError(f"Grid size must be a positive integer, got {size!r}.")
        self.size = size
        self._cells = [
            [row * size + col + 1 for col in range(size)]
            for row in range(size)
        ]

    @property
    def max_cell(self) -> int:
        return self.size * self.size

    def contains(self, coord: Coordinate) -> bool:
        row, col = coord
        return 0 <= row < self.size and 0 <= col < self.size

    def cell_at(self, coord: Coordinate) -> int:
        row, col = coord
        return self._cells[row][col]

    def coordinate_of(self, cell: int) -> Coordinate:
        row, col = divmod(cell - 1, self.size)
        return Coordinate(row, col)

    def step(self, coord: Coordinate, direction: Direction, wrap: bool = True) -> Coordinate:
        d_row, d_col = direction.delta
        row, col = coord[0] + d_row, coord[1] + d_col
        if wrap:
            row, col = row % self.size, col % self.size
        return Coordinate(row, col)

    def __repr__(self):
        return f"<Grid size={self.size}>"
