from __future__ import annotations

import logging
from typing import Optional

from ..core.events import GameEvent
from ..dungeon.tiles import TileKind
from .state import GameState

logger = logging.getLogger(__name__)


def parse_tile_kind(value: object) -> Optional[TileKind]:
    if isinstance(value, TileKind):
        return value
    try:
        return TileKind(str(value))
    except ValueError:
        return None


class MapEditor:
    """Authoring overlay: paints tiles on the active floor.

    Painting bypasses every gameplay rule. Score, health and the player are
    never touched, and the revealed grid is left alone; editor mode only
    changes how the floor renders (everything visible).
    """

    def __init__(self, state: GameState) -> None:
        self.state = state

    @property
    def active(self) -> bool:
        return self.state.editor_mode

    def toggle(self) -> bool:
        self.state.editor_mode = not self.state.editor_mode
        logger.info("Map editor %s", "enabled" if self.state.editor_mode else "disabled")
        return self.state.editor_mode

    def select(self, kind: object) -> Optional[TileKind]:
        tile = parse_tile_kind(kind) if kind is not None else None
        if kind is not None and tile is None:
            logger.debug("Ignoring unknown tile kind %r", kind)
            return self.state.selected_tile
        self.state.selected_tile = tile
        return tile

    def paint(self, x: int, y: int, kind: object = None) -> bool:
        state = self.state
        if not state.editor_mode:
            return False
        tile = parse_tile_kind(kind) if kind is not None else state.selected_tile
        if tile is None:
            logger.debug("Nothing to paint at (%d,%d): no tile selected", x, y)
            return False
        if not state.grid.is_within(x, y):
            logger.debug("Ignoring paint outside the grid at (%d,%d)", x, y)
            return False
        state.grid.place(x, y, tile)
        logger.debug("Painted %s at (%d,%d) on floor %d", tile.value, x, y, state.floor)
        state.bus.emit(GameEvent.TILE_PAINTED, cell=state.cell(x, y), kind=tile)
        return True


__all__ = ["MapEditor", "parse_tile_kind"]
