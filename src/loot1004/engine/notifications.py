from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import count
from typing import List

from ..constants import NOTIFICATION_SECONDS
from ..dungeon.grid import CellRef

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """Floating text shown on a floor cell until it expires."""

    id: int
    text: str
    at: CellRef
    duration: float = NOTIFICATION_SECONDS
    elapsed: float = 0.0
    expired: bool = False

    def update(self, dt: float) -> None:
        if self.expired:
            return
        self.elapsed += dt
        if self.elapsed >= self.duration:
            self.expired = True


class NotificationFeed:
    """Collects notifications and ages them out on ``update(dt)``.

    Expiry is purely cosmetic: nothing in the engine waits on it.
    """

    def __init__(self, duration: float = NOTIFICATION_SECONDS, max_items: int = 64) -> None:
        if max_items <= 0:
            raise ValueError("max_items must be positive")
        self.duration = duration
        self.max_items = max_items
        self._items: List[Notification] = []
        self._ids = count(1)

    def push(self, text: str, at: CellRef) -> Notification:
        if len(self._items) >= self.max_items:
            # Drop oldest to make room
            self._items.pop(0)
        note = Notification(id=next(self._ids), text=text, at=at, duration=self.duration)
        self._items.append(note)
        logger.debug("Notification #%d on floor %d: %s", note.id, at.floor, text)
        return note

    def update(self, dt: float) -> None:
        for note in self._items:
            note.update(dt)
        self._items = [n for n in self._items if not n.expired]

    def active(self, floor: int) -> List[Notification]:
        return [n for n in self._items if n.at.floor == floor and not n.expired]

    def all(self) -> List[Notification]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["Notification", "NotificationFeed"]
