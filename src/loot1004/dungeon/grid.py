from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Generator, List, Optional, Sequence, Tuple

from ..constants import GRID_SIZE
from .tiles import TileKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class CellRef:
    """A floor-scoped coordinate."""

    floor: int
    x: int
    y: int

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

    def key(self) -> str:
        return f"{self.floor},{self.x},{self.y}"


@dataclass(frozen=True)
class ItemMarker:
    """Which icon sits on a cell, shown once the cell is revealed."""

    kind: TileKind
    x: int
    y: int


class TileGrid:
    """A bounds-checked square grid for a single floor.

    Holds three parallel layers:

    - tile kinds, mutated as interactive tiles get consumed,
    - revealed flags, which only ever go from False to True,
    - optional item markers used to draw icons under lifted fog.

    All indexing is ``[y][x]``; public methods take ``(x, y)``.
    """

    __slots__ = ("_size", "_tiles", "_revealed", "_items")

    def __init__(self, size: int = GRID_SIZE, default_tile: TileKind = TileKind.EMPTY) -> None:
        if size <= 0:
            raise ValueError("TileGrid size must be positive")
        self._size = int(size)
        self._tiles: List[List[TileKind]] = [[default_tile for _ in range(self._size)] for _ in range(self._size)]
        self._revealed: List[List[bool]] = [[False for _ in range(self._size)] for _ in range(self._size)]
        self._items: List[List[Optional[ItemMarker]]] = [[None for _ in range(self._size)] for _ in range(self._size)]

    @property
    def size(self) -> int:
        return self._size

    def is_within(self, x: int, y: int) -> bool:
        """Check if coordinates are within the grid bounds. Never raises."""
        return 0 <= x < self._size and 0 <= y < self._size

    def _check(self, x: int, y: int) -> None:
        if not self.is_within(x, y):
            raise IndexError(f"Coordinates out of bounds: ({x}, {y}) for grid {self._size}x{self._size}")

    # ---- Tiles -----------------------------------------------------------
    def get(self, x: int, y: int) -> TileKind:
        """Return the tile at (x, y); raises IndexError when out of bounds."""
        self._check(x, y)
        return self._tiles[y][x]

    def safe_get(self, x: int, y: int) -> Optional[TileKind]:
        """Safely get a tile and return None when out-of-bounds."""
        if not self.is_within(x, y):
            return None
        return self._tiles[y][x]

    def set(self, x: int, y: int, tile: TileKind) -> None:
        """Overwrite the tile kind only. Item markers are left untouched."""
        if not isinstance(tile, TileKind):
            raise TypeError("tile must be a TileKind enum member")
        self._check(x, y)
        self._tiles[y][x] = tile

    def place(self, x: int, y: int, tile: TileKind) -> None:
        """Set the tile and keep its item marker in sync with the kind."""
        self.set(x, y, tile)
        self._items[y][x] = ItemMarker(tile, x, y) if tile.has_icon else None

    def clear(self, x: int, y: int) -> None:
        """Consume whatever sits on the cell."""
        self.place(x, y, TileKind.EMPTY)

    def find(self, tile: TileKind) -> List[Tuple[int, int]]:
        return [
            (x, y)
            for y in range(self._size)
            for x in range(self._size)
            if self._tiles[y][x] is tile
        ]

    def count(self, tile: TileKind) -> int:
        return sum(row.count(tile) for row in self._tiles)

    # ---- Visibility ------------------------------------------------------
    def is_revealed(self, x: int, y: int) -> bool:
        if not self.is_within(x, y):
            return False
        return self._revealed[y][x]

    def reveal(self, x: int, y: int) -> bool:
        """Mark a cell revealed. Returns True if it was hidden before."""
        self._check(x, y)
        if self._revealed[y][x]:
            return False
        self._revealed[y][x] = True
        return True

    def revealed_mask(self) -> List[List[bool]]:
        return [row[:] for row in self._revealed]

    # ---- Item markers ----------------------------------------------------
    def item_at(self, x: int, y: int) -> Optional[ItemMarker]:
        if not self.is_within(x, y):
            return None
        return self._items[y][x]

    def items(self) -> List[ItemMarker]:
        return [m for row in self._items for m in row if m is not None]

    # ---- Neighbourhood ---------------------------------------------------
    def neighbors(self, x: int, y: int, diagonals: bool = False) -> Generator[Tuple[int, int], None, None]:
        """Yield neighboring coordinates that are within bounds.

        Args:
            x: X coordinate
            y: Y coordinate
            diagonals: If True, include diagonal neighbors (Moore neighbourhood).
        """
        if diagonals:
            offsets = (
                (-1, -1), (0, -1), (1, -1),
                (-1, 0), (1, 0),
                (-1, 1), (0, 1), (1, 1),
            )
        else:
            offsets = ((0, -1), (1, 0), (0, 1), (-1, 0))

        for dx, dy in offsets:
            nx, ny = x + dx, y + dy
            if self.is_within(nx, ny):
                yield (nx, ny)

    # ---- Export / Import -------------------------------------------------
    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> "TileGrid":
        """Create a TileGrid from glyph rows (see ``TileKind.glyph``).

        Unknown characters raise ValueError. Item markers are derived from the
        placed kinds; nothing is revealed.
        """
        if not lines:
            raise ValueError("lines must not be empty")
        size = len(lines)
        for i, row in enumerate(lines):
            if len(row) != size:
                raise ValueError(f"Grid must be square; expected width {size}, row {i} has {len(row)}")
        grid = cls(size)
        for y, row in enumerate(lines):
            for x, ch in enumerate(row):
                kind = TileKind.from_glyph(ch)
                if kind is None:
                    raise ValueError(f"Unknown glyph {ch!r} at ({x}, {y})")
                grid.place(x, y, kind)
        return grid

    def to_lines(self, *, fog: bool = False) -> List[str]:
        """Render rows of glyphs; with ``fog`` hidden cells render as a space."""
        rows: List[str] = []
        for y in range(self._size):
            chars = []
            for x in range(self._size):
                if fog and not self._revealed[y][x]:
                    chars.append(" ")
                else:
                    chars.append(self._tiles[y][x].glyph)
            rows.append("".join(chars))
        return rows

    def snapshot(self) -> Tuple[Tuple[TileKind, ...], ...]:
        """Immutable copy of the tile layer."""
        return tuple(tuple(row) for row in self._tiles)

    def kind_counts(self) -> Dict[TileKind, int]:
        counts: Dict[TileKind, int] = {}
        for row in self._tiles:
            for tile in row:
                counts[tile] = counts.get(tile, 0) + 1
        return counts

    def __repr__(self) -> str:
        return f"TileGrid(size={self._size})"


__all__ = ["Point", "CellRef", "ItemMarker", "TileGrid"]
