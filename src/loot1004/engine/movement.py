from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..core.events import GameEvent
from ..dungeon.grid import Point
from ..dungeon.tiles import TileKind
from .interactions import InteractionResolver
from .prompts import Prompt, PromptBroker, PromptKind
from .state import EndReason, GameState, RunPhase

logger = logging.getLogger(__name__)


class MoveStatus(str, Enum):
    MOVED = "moved"
    BLOCKED = "blocked"
    # An effect is waiting on the pending prompt; the player did not move
    PROMPT = "prompt"
    # Request was not applicable (diagonal, wrong phase, prompt outstanding)
    IGNORED = "ignored"


@dataclass
class MoveResult:
    status: MoveStatus
    position: Point
    prompt: Optional[Prompt] = None

    @property
    def moved(self) -> bool:
        return self.status is MoveStatus.MOVED


class MovementEngine:
    """Resolves a single step of the player on the current floor.

    The engine only does bounds/wall checks and dispatch; effects live in
    InteractionResolver. It also owns the escape check, which is subscribed
    to ``PLAYER_MOVED`` so it fires after any position change, whoever made it.
    """

    def __init__(self, state: GameState, resolver: InteractionResolver, prompts: PromptBroker) -> None:
        self.state = state
        self.resolver = resolver
        self.prompts = prompts
        state.bus.subscribe(GameEvent.PLAYER_MOVED, self._on_player_moved)

    def detach(self) -> None:
        self.state.bus.unsubscribe(GameEvent.PLAYER_MOVED, self._on_player_moved)

    def attempt_move(self, dx: int, dy: int) -> MoveResult:
        state = self.state
        if abs(dx) + abs(dy) != 1:
            # Only cardinal movement allowed
            logger.debug("Ignoring non-cardinal move (%d, %d)", dx, dy)
            return self._result(MoveStatus.IGNORED)

        target = state.player.offset(dx, dy)
        grid = state.grid
        tile = grid.safe_get(target.x, target.y)
        if tile is None or tile is TileKind.WALL:
            if state.mark_blocked(target.x, target.y):
                state.bus.emit(GameEvent.MOVE_BLOCKED, cell=state.cell(target.x, target.y))
            logger.debug("Blocked move to (%d,%d): %s", target.x, target.y, "wall" if tile else "out of bounds")
            return self._result(MoveStatus.BLOCKED)

        if tile.is_scoring:
            self.resolver.collect_score(tile, target.x, target.y)
        elif tile.is_utility:
            self.resolver.collect_utility(tile, target.x, target.y)
        elif tile is TileKind.TRAP:
            if self.resolver.is_disarmed(target.x, target.y):
                self.resolver.clear_disarmed_trap(target.x, target.y)
            else:
                return self._result(MoveStatus.PROMPT, self.resolver.propose_trap(target.x, target.y))
        elif tile is TileKind.STAIRS_DOWN and state.floor < state.last_floor:
            return self._result(MoveStatus.PROMPT, self.resolver.propose_stairs(going_down=True))
        elif tile is TileKind.STAIRS_UP and state.floor > 0:
            return self._result(MoveStatus.PROMPT, self.resolver.propose_stairs(going_down=False))

        grid.reveal(target.x, target.y)
        state.move_player_to(target)
        return self._result(MoveStatus.MOVED, state.prompt)

    def _result(self, status: MoveStatus, prompt: Optional[Prompt] = None) -> MoveResult:
        return MoveResult(status=status, position=self.state.player, prompt=prompt)

    # ---- Escape ----------------------------------------------------------
    def _on_player_moved(self, **_: Any) -> None:
        state = self.state
        if not state.is_playing or not state.at_entrance or not state.left_entrance:
            return
        self.propose_escape()

    def propose_escape(self) -> Optional[Prompt]:
        state = self.state
        if not state.at_entrance or not state.left_entrance:
            return None
        return self.prompts.propose(
            PromptKind.ESCAPE,
            "Entrance reached!",
            "You are back at the entrance.\nEscape the dungeon?",
            on_accept=lambda: state.end(RunPhase.GAME_OVER, EndReason.ESCAPE),
            at=state.player_cell,
        )


__all__ = ["MoveResult", "MoveStatus", "MovementEngine"]
