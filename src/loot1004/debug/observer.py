from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)


class DebugObserver(Protocol):
    """Development hook notified about lifecycle, error and timing events.

    Observers only receive copies of data. The engine behaves identically
    with ``NullDebugObserver``.
    """

    def on_lifecycle(self, event: str, details: Mapping[str, Any]) -> None: ...
    def on_error(self, where: str, exc: BaseException) -> None: ...
    def on_perf(self, label: str, elapsed_ms: float) -> None: ...


class NullDebugObserver:
    def on_lifecycle(self, event: str, details: Mapping[str, Any]) -> None:
        pass

    def on_error(self, where: str, exc: BaseException) -> None:
        pass

    def on_perf(self, label: str, elapsed_ms: float) -> None:
        pass


class LoggingDebugObserver:
    """Writes every debug event to a dedicated logger."""

    def __init__(self, name: str = "loot1004.debug", slow_ms: float = 16.0) -> None:
        self.log = logging.getLogger(name)
        self.slow_ms = slow_ms

    def on_lifecycle(self, event: str, details: Mapping[str, Any]) -> None:
        self.log.info("[lifecycle] %s %s", event, dict(details))

    def on_error(self, where: str, exc: BaseException) -> None:
        self.log.error("[error] in %s: %r", where, exc)

    def on_perf(self, label: str, elapsed_ms: float) -> None:
        level = logging.WARNING if elapsed_ms > self.slow_ms else logging.DEBUG
        self.log.log(level, "[perf] %s took %.2f ms", label, elapsed_ms)


@dataclass(frozen=True)
class StateChange:
    field: str
    before: Any
    after: Any
    timestamp: str


class StateChangeTracker(NullDebugObserver):
    """Keeps a bounded history of state snapshots and field-level diffs.

    Feed it plain mappings (``GameSnapshot.as_dict()``) through ``record``;
    each call compares against the previous snapshot.
    """

    def __init__(self, max_history: int = 200) -> None:
        if max_history <= 0:
            raise ValueError("max_history must be positive")
        self._history: Deque[Dict[str, Any]] = deque(maxlen=max_history)
        self._changes: Deque[StateChange] = deque(maxlen=max_history)
        self._current: Optional[Dict[str, Any]] = None
        self.errors: List[str] = []

    def record(self, snapshot: Mapping[str, Any]) -> List[StateChange]:
        new = dict(snapshot)
        ts = datetime.now(timezone.utc).isoformat()
        changes: List[StateChange] = []
        if self._current is not None:
            for key in sorted(set(self._current) | set(new)):
                before, after = self._current.get(key), new.get(key)
                if before != after:
                    changes.append(StateChange(key, before, after, ts))
        self._current = new
        self._history.append(new)
        self._changes.extend(changes)
        if changes:
            logger.debug("State changes: %s", ", ".join(c.field for c in changes))
        return changes

    def history(self) -> List[Dict[str, Any]]:
        return list(self._history)

    def changes(self, field: Optional[str] = None) -> List[StateChange]:
        if field is None:
            return list(self._changes)
        return [c for c in self._changes if c.field == field]

    def on_lifecycle(self, event: str, details: Mapping[str, Any]) -> None:
        snapshot = details.get("snapshot")
        if isinstance(snapshot, Mapping):
            self.record(snapshot)

    def on_error(self, where: str, exc: BaseException) -> None:
        self.errors.append(f"{where}: {exc!r}")

    def clear(self) -> None:
        self._history.clear()
        self._changes.clear()
        self._current = None
        self.errors.clear()


__all__ = [
    "DebugObserver",
    "LoggingDebugObserver",
    "NullDebugObserver",
    "StateChange",
    "StateChangeTracker",
]
