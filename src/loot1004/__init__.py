"""
Loot 1004 package root.

Pure gameplay core for a small three-floor dungeon crawler. Rendering and
input wiring live outside this package; the presentation layer talks to
:class:`loot1004.game.Loot1004Game` only.
"""

from .game import Loot1004Game, MoveResult, MoveStatus

__all__ = [
    "Loot1004Game",
    "MoveResult",
    "MoveStatus",
]
