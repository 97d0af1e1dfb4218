from __future__ import annotations

import logging
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class GameEvent(str, Enum):
    """Channels published by the engine on its EventBus."""

    RUN_STARTED = "run_started"
    RUN_RESET = "run_reset"
    PHASE_CHANGED = "phase_changed"
    PLAYER_MOVED = "player_moved"
    FLOOR_CHANGED = "floor_changed"
    MOVE_BLOCKED = "move_blocked"
    TILE_CONSUMED = "tile_consumed"
    TRAP_TRIGGERED = "trap_triggered"
    CARD_USED = "card_used"
    PROMPT_RAISED = "prompt_raised"
    PROMPT_RESOLVED = "prompt_resolved"
    NOTIFICATION = "notification"
    TILE_PAINTED = "tile_painted"


ErrorHook = Callable[[str, Exception], None]


class EventBus:
    """Lightweight publish/subscribe event bus.

    Provides a minimal integration point so gameplay systems and the
    presentation layer can communicate without tight coupling. Handlers are
    called synchronously in subscription order. A failing handler is logged
    (and reported to ``on_error`` if given) and never interrupts the emitter.
    """

    def __init__(self, on_error: Optional[ErrorHook] = None) -> None:
        self._handlers: Dict[str, List[Callable[..., Any]]] = {}
        self._lock = RLock()
        self._on_error = on_error

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe a handler to an event channel.

        Args:
            event: Event channel name (a GameEvent or plain string).
            handler: Callable that accepts keyword arguments of event payload.
        """
        channel = _channel(event)
        with self._lock:
            handlers = self._handlers.setdefault(channel, [])
            if handler not in handlers:
                handlers.append(handler)
                logger.debug("Subscribed handler %s to event '%s'", handler, channel)

    def unsubscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Unsubscribe a handler from an event channel."""
        channel = _channel(event)
        with self._lock:
            handlers = self._handlers.get(channel)
            if not handlers:
                return
            if handler in handlers:
                handlers.remove(handler)
                logger.debug("Unsubscribed handler %s from event '%s'", handler, channel)
            if not handlers:
                del self._handlers[channel]

    def clear(self) -> None:
        """Remove all handlers for all events (useful in tests)."""
        with self._lock:
            self._handlers.clear()

    def emit(self, event: str, **kwargs: Any) -> List[Any]:
        """Emit an event with payload to all subscribed handlers.

        Returns:
            List of return values from handlers that did not raise.
        """
        channel = _channel(event)
        with self._lock:
            handlers = list(self._handlers.get(channel, []))
        if not handlers:
            logger.debug("Emitting '%s' with no subscribers. Payload=%s", channel, kwargs)
            return []
        logger.debug("Emitting '%s' to %d handlers. Payload=%s", channel, len(handlers), kwargs)
        results: List[Any] = []
        for handler in handlers:
            try:
                results.append(handler(**kwargs))
            except Exception as exc:
                logger.exception("Error in handler %s for event '%s': %s", handler, channel, exc)
                if self._on_error is not None:
                    self._on_error(channel, exc)
        return results


def _channel(event: Any) -> str:
    return event.value if isinstance(event, Enum) else str(event)


__all__ = ["EventBus", "GameEvent"]
