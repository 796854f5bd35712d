"""Snake body path and its occupancy mirror."""

from collections import deque
from typing import Iterator, Optional

from .grid import Grid
from .models import BodyNode, Coordinate, Direction


class SnakeBody:
    """
    Ordered path of the cells the snake covers.

    nodes: deque of BodyNode from tail at index 0 to head at the end, so both
    moving (push head / pop tail) and growing (push tail) are O(1).
    """

    def __init__(self, start: Coordinate, cell: int):
        self.nodes: deque[BodyNode] = deque([BodyNode(Coordinate(*start), cell)])

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[BodyNode]:
        return iter(self.nodes)

    @property
    def head(self) -> BodyNode:
        return self.nodes[-1]

    @property
    def tail(self) -> BodyNode:
        return self.nodes[0]

    @property
    def head_cell(self) -> int:
        return self.nodes[-1].cell

    @property
    def tail_cell(self) -> int:
        return self.nodes[0].cell

    def cells(self) -> list[int]:
        return [node.cell for node in self.nodes]

    def advance(self, coord: Coordinate, cell: int) -> tuple[int, int]:
        """Move one step: add a head node and drop the tail node.

        Returns (removed tail cell, added head cell).
        """
        self.nodes.append(BodyNode(Coordinate(*coord), cell))
        removed = self.nodes.popleft()
        return removed.cell, cell

    def grow(self, coord: Coordinate, cell: int) -> None:
        self.nodes.appendleft(BodyNode(Coordinate(*coord), cell))

    def tail_exit_direction(self, current: Direction, grid: Grid) -> Direction:
        """Direction from the tail toward its head-ward neighbour.

        A length-1 body has no neighbour, so the current movement direction is
        used. Neighbours across a wrapped edge are recognised too.
        """
        if len(self.nodes) == 1:
            return current
        tail = self.nodes[0].coordinate
        neighbour = self.nodes[1].coordinate
        found: Optional[Direction] = None
        for direction in Direction:
            if grid.step(tail, direction) == neighbour:
                found = direction
                break
        return found if found is not None else current


class OccupancySet:
    """Set of cells covered by the snake, for O(1) collision checks."""

    def __init__(self, cells=()):
        self._cells: set[int] = set(cells)

    def __contains__(self, cell: int) -> bool:
        return cell in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[int]:
        return iter(self._cells)

    def contains(self, cell: int) -> bool:
        return cell in self._cells

    def add(self, cell: int):
        self._cells.add(cell)

    def remove(self, cell: int):
        self._cells.discard(cell)

    def cells(self) -> frozenset[int]:
        return frozenset(self._cells)
