"""Food placement."""

import logging
import random
from typing import Optional

from .constants import FOOD_SAMPLE_ATTEMPTS
from .errors import BoardFullError

logger = logging.getLogger(__name__)


class FoodPlacer:
    def __init__(self, rng: Optional[random.Random] = None, attempts: int = FOOD_SAMPLE_ATTEMPTS):
        self.rng = rng or random.Random()
        self.attempts = attempts

    def place(self, occupancy, exclude_cell: Optional[int], max_cell: int) -> int:
        """
        Pick a random cell in [1, max_cell] that is neither occupied nor
        ``exclude_cell``.

        Random sampling is tried first; once ``attempts`` samples have all hit
        taken cells, the free cells are enumerated and one is chosen from them.

        Raises:
            BoardFullError: if every cell is taken.
        """
        taken = len(occupancy) + (1 if exclude_cell is not None and exclude_cell not in occupancy else 0)
        if taken >= max_cell:
            raise BoardFullError(f"No free cell left on a board of {max_cell} cells.")

        attempts = 0
        while attempts < self.attempts:
            cell = self.rng.randint(1, max_cell)
            if cell not in occupancy and cell != exclude_cell:
                return cell
            attempts += 1

        free = [
            cell for cell in range(1, max_cell + 1)
            if cell not in occupancy and cell != exclude_cell
        ]
        if not free:
            raise BoardFullError(f"No free cell left on a board of {max_cell} cells.")
        logger.debug("Food sampling gave up after %d attempts; %d free cells left", self.attempts, len(free))
        return self.rng.choice(free)
