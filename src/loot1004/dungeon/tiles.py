from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class TileKind(str, Enum):
    """Every kind of cell a floor can hold.

    Values match the identifiers used by the presentation layer, so a kind can
    be built straight from a string coming out of the UI (``TileKind("trap")``).
    """

    EMPTY = "empty"
    TREASURE = "treasure"
    BIG_TREASURE = "big_treasure"
    FINAL_TREASURE = "final_treasure"
    TRAP = "trap"
    MULTIPLIER = "multiplier"
    CARD = "card"
    POTION = "potion"
    STAIRS_UP = "stairs_up"
    STAIRS_DOWN = "stairs_down"
    ENTRANCE = "entrance"
    WALL = "wall"

    @property
    def is_scoring(self) -> bool:
        return self in SCORE_RANGES

    @property
    def is_utility(self) -> bool:
        return self in UTILITY_KINDS

    @property
    def has_icon(self) -> bool:
        """True if the kind leaves an item marker that shows through revealed fog."""
        return self not in ICONLESS_KINDS

    @property
    def glyph(self) -> str:
        """A single-character visualization useful for logs/debug."""
        return _GLYPHS[self]

    @classmethod
    def from_glyph(cls, ch: str) -> Optional["TileKind"]:
        return _BY_GLYPH.get(ch)


UTILITY_KINDS: FrozenSet[TileKind] = frozenset(
    {TileKind.MULTIPLIER, TileKind.CARD, TileKind.POTION}
)

ICONLESS_KINDS: FrozenSet[TileKind] = frozenset(
    {TileKind.EMPTY, TileKind.WALL, TileKind.ENTRANCE, TileKind.STAIRS_UP, TileKind.STAIRS_DOWN}
)

# Half-open [low, high) base point ranges, before the multiplier is applied
SCORE_RANGES: Dict[TileKind, Tuple[int, int]] = {
    TileKind.TREASURE: (50, 150),
    TileKind.BIG_TREASURE: (200, 700),
    TileKind.FINAL_TREASURE: (500, 1500),
}

# Ordered weights for scattered tiles; order fixes the cumulative thresholds
# 0.3 / 0.5 / 0.6 / 0.7 / 0.8 / 0.9 / 1.0
SCATTER_WEIGHTS: Dict[TileKind, float] = {
    TileKind.TREASURE: 0.3,
    TileKind.TRAP: 0.2,
    TileKind.BIG_TREASURE: 0.1,
    TileKind.MULTIPLIER: 0.1,
    TileKind.CARD: 0.1,
    TileKind.POTION: 0.1,
    TileKind.WALL: 0.1,
}

_GLYPHS: Dict[TileKind, str] = {
    TileKind.EMPTY: ".",
    TileKind.TREASURE: "$",
    TileKind.BIG_TREASURE: "&",
    TileKind.FINAL_TREASURE: "*",
    TileKind.TRAP: "^",
    TileKind.MULTIPLIER: "x",
    TileKind.CARD: "c",
    TileKind.POTION: "p",
    TileKind.STAIRS_UP: "<",
    TileKind.STAIRS_DOWN: ">",
    TileKind.ENTRANCE: "E",
    TileKind.WALL: "#",
}

_BY_GLYPH: Dict[str, TileKind] = {g: k for k, g in _GLYPHS.items()}


__all__ = [
    "TileKind",
    "UTILITY_KINDS",
    "ICONLESS_KINDS",
    "SCORE_RANGES",
    "SCATTER_WEIGHTS",
]
