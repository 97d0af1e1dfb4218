from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set

from ..config.loader import Difficulty
from ..constants import MAX_HEALTH
from ..core.events import EventBus, GameEvent
from ..dungeon.generator import Level
from ..dungeon.grid import CellRef, Point, TileGrid
from ..dungeon.tiles import TileKind
from .inventory import CardHand
from .notifications import NotificationFeed
from .prompts import Prompt

logger = logging.getLogger(__name__)


class RunPhase(str, Enum):
    MENU = "menu"
    PLAYING = "playing"
    GAME_OVER = "gameOver"
    VICTORY = "victory"

    @property
    def is_terminal(self) -> bool:
        return self in (RunPhase.GAME_OVER, RunPhase.VICTORY)


class EndReason(str, Enum):
    DEATH = "death"
    ESCAPE = "escape"


@dataclass
class GameState:
    """Everything that belongs to a single run.

    Systems mutate this object directly; it is the only writer-owned state.
    Observers get copies through ``Loot1004Game.snapshot()``.

    Position changes go through ``move_player_to`` so every change publishes
    ``PLAYER_MOVED`` on the bus, which is what the escape check listens to.
    """

    level: Level
    difficulty: Difficulty
    cards: CardHand
    bus: EventBus = field(default_factory=EventBus, repr=False)
    notifications: NotificationFeed = field(default_factory=NotificationFeed, repr=False)
    max_health: int = MAX_HEALTH

    floor: int = 0
    player: Point = field(init=False)
    health: int = field(init=False)
    score: int = 0
    multiplier: float = 1.0
    disarmed: Set[CellRef] = field(default_factory=set)
    pending_trap: Optional[CellRef] = None
    map_revealed: Set[Point] = field(default_factory=set)
    blocked: Set[CellRef] = field(default_factory=set)
    left_entrance: bool = False
    phase: RunPhase = RunPhase.PLAYING
    end_reason: Optional[EndReason] = None
    prompt: Optional[Prompt] = None
    editor_mode: bool = False
    selected_tile: Optional[TileKind] = None

    def __post_init__(self) -> None:
        self.player = self.level.entrance
        self.health = self.max_health

    # ---- Derived ---------------------------------------------------------
    @property
    def grid(self) -> TileGrid:
        return self.level.floors[self.floor]

    @property
    def entrance(self) -> Point:
        return self.level.entrance

    @property
    def last_floor(self) -> int:
        return self.level.last_floor

    @property
    def at_entrance(self) -> bool:
        return self.floor == 0 and self.player == self.level.entrance

    @property
    def is_playing(self) -> bool:
        return self.phase is RunPhase.PLAYING

    @property
    def has_pending_trap(self) -> bool:
        return self.pending_trap is not None

    def cell(self, x: int, y: int, floor: Optional[int] = None) -> CellRef:
        return CellRef(self.floor if floor is None else floor, x, y)

    @property
    def player_cell(self) -> CellRef:
        return self.cell(self.player.x, self.player.y)

    # ---- Mutations -------------------------------------------------------
    def move_player_to(self, target: Point, floor: Optional[int] = None) -> None:
        prev_floor, prev_pos = self.floor, self.player
        if prev_floor == 0 and prev_pos == self.level.entrance:
            if floor not in (None, 0) or target != prev_pos:
                self.left_entrance = True
        if floor is not None and floor != self.floor:
            self.floor = floor
            self.map_revealed.clear()
            logger.info("Floor changed %d -> %d", prev_floor, floor)
            self.bus.emit(GameEvent.FLOOR_CHANGED, floor=floor, previous=prev_floor)
        self.player = target
        logger.debug("Player moved to %s on floor %d", target, self.floor)
        self.bus.emit(GameEvent.PLAYER_MOVED, floor=self.floor, position=target)

    def damage(self, amount: int = 1) -> int:
        self.health = max(0, self.health - amount)
        logger.debug("Player took %d damage, health=%d", amount, self.health)
        return self.health

    def heal(self, amount: int = 1) -> int:
        self.health = min(self.max_health, self.health + amount)
        return self.health

    def add_score(self, points: int) -> int:
        if points > 0:
            self.score += points
        return self.score

    def mark_blocked(self, x: int, y: int) -> bool:
        """Remember a bump at (x, y). Returns True the first time only."""
        ref = self.cell(x, y)
        if ref in self.blocked:
            return False
        self.blocked.add(ref)
        return True

    def notify(self, text: str) -> None:
        note = self.notifications.push(text, self.player_cell)
        self.bus.emit(GameEvent.NOTIFICATION, notification=note)

    def end(self, phase: RunPhase, reason: Optional[EndReason] = None) -> None:
        if not self.is_playing:
            return
        self.phase = phase
        self.end_reason = reason
        logger.info("Run ended: %s (%s) score=%d", phase.value, reason.value if reason else "-", self.score)
        self.bus.emit(GameEvent.PHASE_CHANGED, phase=phase, reason=reason)

    def evaluate_phase(self) -> bool:
        """Apply death / victory rules. Returns True if the run just ended."""
        if not self.is_playing:
            return False
        if self.health <= 0:
            self.end(RunPhase.GAME_OVER, EndReason.DEATH)
            return True
        if self.score >= self.difficulty.target:
            self.end(RunPhase.VICTORY)
            return True
        return False


__all__ = ["EndReason", "GameState", "RunPhase"]
