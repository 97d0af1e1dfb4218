from __future__ import annotations

import logging
from typing import Callable, Dict

from ..core.events import GameEvent
from ..dungeon.grid import Point
from .inventory import CardKind, parse_card_kind
from .state import GameState

logger = logging.getLogger(__name__)

MULTIPLIER_CARD_BONUS = 1


class CardSystem:
    """Plays cards from the hand.

    Every ``use_*`` method checks its own precondition and returns False
    without touching state when it does not hold.
    """

    def __init__(self, state: GameState) -> None:
        self.state = state
        self._handlers: Dict[CardKind, Callable[[], bool]] = {
            CardKind.HEAL: self.use_heal,
            CardKind.TRAP_DISARM: self.use_trap_disarm,
            CardKind.MAP: self.use_map,
            CardKind.MULTIPLIER: self.use_multiplier_card,
        }

    def use(self, kind: object) -> bool:
        card = parse_card_kind(kind)
        if card is None:
            logger.debug("Ignoring unknown card kind %r", kind)
            return False
        return self._handlers[card]()

    def use_heal(self) -> bool:
        state = self.state
        if not state.cards.has(CardKind.HEAL) or state.health >= state.max_health:
            return False
        state.cards.take(CardKind.HEAL)
        state.heal(1)
        state.notify("Heal card used! +1")
        self._used(CardKind.HEAL)
        return True

    def use_trap_disarm(self) -> bool:
        state = self.state
        if not state.cards.has(CardKind.TRAP_DISARM) or state.pending_trap is None:
            return False
        state.cards.take(CardKind.TRAP_DISARM)
        state.disarmed.add(state.pending_trap)
        state.pending_trap = None
        state.notify("Trap disarm card used!")
        self._used(CardKind.TRAP_DISARM)
        return True

    def use_map(self) -> bool:
        state = self.state
        if not state.cards.has(CardKind.MAP):
            return False
        state.cards.take(CardKind.MAP)
        grid = state.grid
        around = set()
        for nx, ny in grid.neighbors(state.player.x, state.player.y, diagonals=True):
            grid.reveal(nx, ny)
            around.add(Point(nx, ny))
        # Replaces whatever the previous map card showed
        state.map_revealed = around
        state.notify("Map card used!")
        self._used(CardKind.MAP, revealed=len(around))
        return True

    def use_multiplier_card(self) -> bool:
        state = self.state
        if not state.cards.has(CardKind.MULTIPLIER):
            return False
        state.cards.take(CardKind.MULTIPLIER)
        state.multiplier += MULTIPLIER_CARD_BONUS
        state.notify(f"Multiplier card used! +{MULTIPLIER_CARD_BONUS}")
        self._used(CardKind.MULTIPLIER)
        return True

    def _used(self, kind: CardKind, **extra: object) -> None:
        logger.debug("Card %s used; hand=%s", kind.value, self.state.cards)
        self.state.bus.emit(GameEvent.CARD_USED, kind=kind, **extra)


__all__ = ["CardSystem"]
