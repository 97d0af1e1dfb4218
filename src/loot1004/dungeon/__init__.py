from .generator import Level, LevelGenerator
from .grid import CellRef, ItemMarker, Point, TileGrid
from .tiles import TileKind

__all__ = [
    "CellRef",
    "ItemMarker",
    "Level",
    "LevelGenerator",
    "Point",
    "TileGrid",
    "TileKind",
]
