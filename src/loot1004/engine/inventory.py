from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class CardKind(str, Enum):
    HEAL = "heal"
    TRAP_DISARM = "trap_disarm"
    MAP = "map"
    # Declared for parity with the card catalogue but never dealt nor playable.
    SCORE = "score"
    MULTIPLIER = "multiplier_card"


# Kinds a card tile can hand out, and the only kinds a hand keeps counts for
DRAWABLE_CARDS: Tuple[CardKind, ...] = (
    CardKind.HEAL,
    CardKind.TRAP_DISARM,
    CardKind.MAP,
    CardKind.MULTIPLIER,
)


def parse_card_kind(value: object) -> Optional[CardKind]:
    """Map a presentation-layer identifier to a playable CardKind, or None."""
    if isinstance(value, CardKind):
        kind = value
    else:
        try:
            kind = CardKind(str(value))
        except ValueError:
            return None
    return kind if kind in DRAWABLE_CARDS else None


class CardHand:
    """Counts of each playable card. Counts never go below zero."""

    def __init__(self, counts: Optional[Mapping[str, int]] = None) -> None:
        self._counts: Dict[CardKind, int] = {kind: 0 for kind in DRAWABLE_CARDS}
        for key, qty in (counts or {}).items():
            kind = parse_card_kind(key)
            if kind is None:
                logger.warning("Ignoring unknown card kind %r in starting hand", key)
                continue
            self._counts[kind] = max(0, int(qty))

    def count(self, kind: CardKind) -> int:
        return self._counts.get(kind, 0)

    def has(self, kind: CardKind) -> bool:
        return self.count(kind) > 0

    def add(self, kind: CardKind, qty: int = 1) -> None:
        if kind not in self._counts or qty <= 0:
            return
        self._counts[kind] += qty

    def take(self, kind: CardKind) -> bool:
        """Spend one card. Returns False (and changes nothing) when none are left."""
        if not self.has(kind):
            return False
        self._counts[kind] -= 1
        return True

    def as_dict(self) -> Dict[str, int]:
        return {kind.value: qty for kind, qty in self._counts.items()}

    def __repr__(self) -> str:
        return f"CardHand({self.as_dict()})"


__all__ = ["CardKind", "CardHand", "DRAWABLE_CARDS", "parse_card_kind"]
