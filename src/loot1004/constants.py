from typing import Dict, Tuple

GRID_SIZE: int = 7
FLOORS: int = 3
MAX_HEALTH: int = 3

# Fixed staircase placement shared by every run
STAIRS_DOWN_POS: Tuple[int, int] = (5, 5)
STAIRS_UP_POS: Tuple[int, int] = (1, 1)
# Where the player lands after taking any staircase
REENTRY_POS: Tuple[int, int] = (3, 3)

ENTRANCE_CANDIDATES: Tuple[Tuple[int, int], ...] = ((0, 3), (6, 3), (3, 0), (3, 6))

# Scattered tiles per floor, inclusive bounds
SCATTER_MIN: int = 12
SCATTER_MAX: int = 19

NOTIFICATION_SECONDS: float = 3.0

# Cardinal directions as (dx, dy)
UP: Tuple[int, int] = (0, -1)
DOWN: Tuple[int, int] = (0, 1)
LEFT: Tuple[int, int] = (-1, 0)
RIGHT: Tuple[int, int] = (1, 0)

DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "up": UP,
    "down": DOWN,
    "left": LEFT,
    "right": RIGHT,
}
