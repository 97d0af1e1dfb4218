from __future__ import annotations

import logging
import math
from typing import Optional

from ..constants import REENTRY_POS
from ..core.events import GameEvent
from ..core.random import RandomSource
from ..dungeon.grid import CellRef, Point
from ..dungeon.tiles import SCORE_RANGES, TileKind
from .inventory import DRAWABLE_CARDS, CardKind
from .prompts import Prompt, PromptBroker, PromptKind
from .state import GameState

logger = logging.getLogger(__name__)

SCORE_MESSAGES = {
    TileKind.TREASURE: "Treasure found!",
    TileKind.BIG_TREASURE: "Big treasure found!",
    TileKind.FINAL_TREASURE: "Final treasure!",
}

MULTIPLIER_TILE_BONUS = 0.5


class InteractionResolver:
    """Applies what happens when the player steps on an interactive tile.

    Pickups (scoring and utility tiles) take effect immediately and clear the
    tile. Traps and staircases only *propose* their effect through the
    PromptBroker; the continuations below run once the prompt is resolved.
    """

    def __init__(self, state: GameState, prompts: PromptBroker, rng: Optional[RandomSource] = None) -> None:
        self.state = state
        self.prompts = prompts
        self.rng = rng or RandomSource()

    # ---- Pickups ---------------------------------------------------------
    def collect_score(self, kind: TileKind, x: int, y: int) -> int:
        low, high = SCORE_RANGES[kind]
        base = self.rng.randrange(low, high)
        points = int(math.floor(base * self.state.multiplier))
        self.state.add_score(points)
        logger.debug("Picked up %s at (%d,%d): %d x %.1f = %d", kind.value, x, y, base, self.state.multiplier, points)
        self.state.notify(f"{SCORE_MESSAGES[kind]} +{points}")
        self._consume(kind, x, y)
        return points

    def collect_utility(self, kind: TileKind, x: int, y: int) -> None:
        state = self.state
        if kind is TileKind.MULTIPLIER:
            state.multiplier += MULTIPLIER_TILE_BONUS
            state.notify(f"Multiplier up! +{MULTIPLIER_TILE_BONUS}")
        elif kind is TileKind.CARD:
            card: CardKind = self.rng.choice(DRAWABLE_CARDS)
            state.cards.add(card)
            state.notify(f"Card acquired: {card.value}!")
        elif kind is TileKind.POTION:
            state.heal(1)
            state.notify("Health restored! +1")
        else:
            raise ValueError(f"{kind.value} is not a utility tile")
        self._consume(kind, x, y)

    def _consume(self, kind: TileKind, x: int, y: int) -> None:
        self.state.grid.clear(x, y)
        self.state.bus.emit(GameEvent.TILE_CONSUMED, cell=self.state.cell(x, y), kind=kind)

    # ---- Traps -----------------------------------------------------------
    def is_disarmed(self, x: int, y: int) -> bool:
        return self.state.cell(x, y) in self.state.disarmed

    def clear_disarmed_trap(self, x: int, y: int) -> None:
        logger.debug("Stepping over disarmed trap at (%d,%d)", x, y)
        self._consume(TileKind.TRAP, x, y)

    def propose_trap(self, x: int, y: int) -> Optional[Prompt]:
        ref = self.state.cell(x, y)
        self.state.bus.emit(GameEvent.TRAP_TRIGGERED, cell=ref)
        return self.prompts.propose(
            PromptKind.TRAP,
            "Trap found!",
            "You found a trap!\n\nAccept: use a trap disarm card\nDecline: take the damage",
            on_accept=lambda: self._trap_accepted(ref),
            on_decline=lambda: self._trap_declined(ref),
            at=ref,
        )

    def _trap_accepted(self, ref: CellRef) -> None:
        state = self.state
        if state.cards.take(CardKind.TRAP_DISARM):
            state.disarmed.add(ref)
            if state.pending_trap == ref:
                state.pending_trap = None
            state.notify("Trap disarm card used!")
            state.level.floors[ref.floor].clear(ref.x, ref.y)
            state.bus.emit(GameEvent.TILE_CONSUMED, cell=ref, kind=TileKind.TRAP)
            state.bus.emit(GameEvent.CARD_USED, kind=CardKind.TRAP_DISARM)
            return
        self._spring(ref, "Trap! Health -1 (no trap disarm cards)")

    def _trap_declined(self, ref: CellRef) -> None:
        self._spring(ref, "Trap! Health -1")

    def _spring(self, ref: CellRef, message: str) -> None:
        self.state.damage(1)
        self.state.notify(message)
        self.state.pending_trap = ref
        logger.debug("Trap at %s sprung; now pending", ref.key())

    # ---- Staircases ------------------------------------------------------
    def propose_stairs(self, going_down: bool) -> Optional[Prompt]:
        state = self.state
        destination = state.floor + 1 if going_down else state.floor - 1
        if going_down:
            kind, title, message = PromptKind.STAIRS_DOWN, "Stairs down!", "Go down to the next floor?"
        else:
            kind, title, message = PromptKind.STAIRS_UP, "Stairs up!", "Go back up a floor?"
        return self.prompts.propose(
            kind,
            title,
            message,
            on_accept=lambda: self.change_floor(destination),
        )

    def change_floor(self, destination: int) -> None:
        state = self.state
        if not 0 <= destination <= state.last_floor:
            logger.warning("Ignoring transition to nonexistent floor %d", destination)
            return
        going_down = destination > state.floor
        landing = Point(*REENTRY_POS)
        state.level.floors[destination].reveal(landing.x, landing.y)
        state.move_player_to(landing, floor=destination)
        state.notify("Moved to the next floor" if going_down else "Moved to the upper floor")


__all__ = ["InteractionResolver", "SCORE_MESSAGES"]
