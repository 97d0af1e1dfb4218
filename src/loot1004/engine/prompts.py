from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from ..core.events import EventBus, GameEvent
from ..dungeon.grid import CellRef

if TYPE_CHECKING:  # pragma: no cover
    from .state import GameState

logger = logging.getLogger(__name__)

Continuation = Callable[[], None]


class PromptKind(str, Enum):
    TRAP = "trap"
    STAIRS_DOWN = "stairs_down"
    STAIRS_UP = "stairs_up"
    ESCAPE = "escape"


def _noop() -> None:
    return None


@dataclass(eq=False)
class Prompt:
    """A proposed effect waiting for the player to accept or decline.

    The effect is only applied once ``accept()`` or ``decline()`` is called
    (directly or through ``Loot1004Game.resolve_prompt``).
    """

    kind: PromptKind
    title: str
    message: str
    at: Optional[CellRef] = None
    on_accept: Continuation = field(default=_noop, repr=False)
    on_decline: Continuation = field(default=_noop, repr=False)
    resolved: bool = False
    _broker: Optional["PromptBroker"] = field(default=None, repr=False)

    def accept(self) -> bool:
        return self._settle(True)

    def decline(self) -> bool:
        return self._settle(False)

    def _settle(self, accepted: bool) -> bool:
        if self._broker is None:
            return False
        return self._broker.settle(self, accepted)


class PromptBroker:
    """Owns the single pending-prompt slot stored on GameState.

    Only one prompt may be outstanding; ``propose`` refuses a second one
    instead of overwriting it. ``after_resolve`` runs once the continuation
    has been applied, so the run phase can be re-evaluated.
    """

    def __init__(self, state: "GameState", bus: EventBus, after_resolve: Optional[Callable[[], None]] = None) -> None:
        self.state = state
        self.bus = bus
        self._after_resolve = after_resolve

    @property
    def pending(self) -> Optional[Prompt]:
        return self.state.prompt

    def propose(
        self,
        kind: PromptKind,
        title: str,
        message: str,
        on_accept: Continuation,
        on_decline: Continuation = _noop,
        at: Optional[CellRef] = None,
    ) -> Optional[Prompt]:
        if self.state.prompt is not None:
            logger.warning(
                "Rejected %s prompt while %s prompt is still pending", kind.value, self.state.prompt.kind.value
            )
            return None
        prompt = Prompt(kind=kind, title=title, message=message, at=at, on_accept=on_accept, on_decline=on_decline)
        prompt._broker = self
        self.state.prompt = prompt
        logger.debug("Prompt raised: %s", prompt)
        self.bus.emit(GameEvent.PROMPT_RAISED, prompt=prompt)
        return prompt

    def resolve(self, accept: bool) -> bool:
        """Resolve whichever prompt is pending. Returns False if none is."""
        prompt = self.state.prompt
        if prompt is None:
            logger.debug("resolve(%s) ignored: no pending prompt", accept)
            return False
        return self.settle(prompt, accept)

    def settle(self, prompt: Prompt, accepted: bool) -> bool:
        if prompt.resolved or self.state.prompt is not prompt:
            logger.debug("Ignoring stale prompt %s", prompt.kind.value)
            return False
        prompt.resolved = True
        self.state.prompt = None
        logger.debug("Prompt %s %s", prompt.kind.value, "accepted" if accepted else "declined")
        (prompt.on_accept if accepted else prompt.on_decline)()
        self.bus.emit(GameEvent.PROMPT_RESOLVED, prompt=prompt, accepted=accepted)
        if self._after_resolve is not None:
            self._after_resolve()
        return True

    def discard(self) -> None:
        """Drop the pending prompt without running either continuation."""
        if self.state.prompt is not None:
            self.state.prompt.resolved = True
            self.state.prompt = None


__all__ = ["Prompt", "PromptBroker", "PromptKind"]
