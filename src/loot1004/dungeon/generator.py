from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..constants import (
    ENTRANCE_CANDIDATES,
    FLOORS,
    GRID_SIZE,
    SCATTER_MAX,
    SCATTER_MIN,
    STAIRS_DOWN_POS,
    STAIRS_UP_POS,
)
from ..core.random import RandomSource
from ..exceptions import LevelGenerationError
from .grid import Point, TileGrid
from .tiles import SCATTER_WEIGHTS, TileKind

logger = logging.getLogger(__name__)

# Random probes allowed per placement before giving up
MAX_PLACEMENT_ATTEMPTS = 10_000


@dataclass
class Level:
    """All floors of one run plus the floor-0 entrance."""

    floors: List[TileGrid]
    entrance: Point

    @property
    def last_floor(self) -> int:
        return len(self.floors) - 1


class LevelGenerator:
    """Builds the three floors of a fresh run.

    Fixed tiles go down first:

    - floor 0: entrance on a random edge midpoint, stairs down at (5, 5)
    - floor 1: stairs up at (1, 1), stairs down at (5, 5)
    - floor 2: stairs up at (1, 1), final treasure on a random free cell

    Then every floor receives between 12 and 19 scattered tiles, each on a
    random empty cell, kind drawn from ``SCATTER_WEIGHTS``. Cells are tracked as
    assigned so nothing is ever written twice.
    """

    def __init__(self, rng: Optional[RandomSource] = None, size: int = GRID_SIZE, floors: int = FLOORS) -> None:
        self.rng = rng or RandomSource()
        self.size = size
        self.floor_count = floors

    def generate(self) -> Level:
        entrance = Point(*self.rng.choice(ENTRANCE_CANDIDATES))
        logger.info("Generating %d floors (%dx%d), entrance at %s", self.floor_count, self.size, self.size, entrance)
        floors = [self._generate_floor(index, entrance) for index in range(self.floor_count)]
        return Level(floors=floors, entrance=entrance)

    def _generate_floor(self, index: int, entrance: Point) -> TileGrid:
        grid = TileGrid(self.size)
        assigned = [[False for _ in range(self.size)] for _ in range(self.size)]

        def assign(x: int, y: int, kind: TileKind) -> None:
            grid.place(x, y, kind)
            assigned[y][x] = True

        last = self.floor_count - 1
        if index == 0:
            assign(entrance.x, entrance.y, TileKind.ENTRANCE)
            grid.reveal(entrance.x, entrance.y)
        else:
            assign(*STAIRS_UP_POS, TileKind.STAIRS_UP)
        if index < last:
            assign(*STAIRS_DOWN_POS, TileKind.STAIRS_DOWN)
        else:
            x, y = self._free_cell(assigned, index)
            assign(x, y, TileKind.FINAL_TREASURE)

        target = self.rng.randint(SCATTER_MIN, SCATTER_MAX)
        for _ in range(target):
            x, y = self._free_cell(assigned, index)
            assign(x, y, self.rng.weighted_choice(SCATTER_WEIGHTS))

        logger.debug("Floor %d with %d scattered tiles:\n%s", index, target, "\n".join(grid.to_lines()))
        return grid

    def _free_cell(self, assigned: List[List[bool]], index: int) -> Tuple[int, int]:
        for _ in range(MAX_PLACEMENT_ATTEMPTS):
            x = self.rng.randrange(0, self.size)
            y = self.rng.randrange(0, self.size)
            if not assigned[y][x]:
                return x, y
        raise LevelGenerationError(f"No free cell found on floor {index} after {MAX_PLACEMENT_ATTEMPTS} attempts")


__all__ = ["Level", "LevelGenerator", "MAX_PLACEMENT_ATTEMPTS"]
