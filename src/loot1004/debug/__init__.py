from .observer import (
    DebugObserver,
    LoggingDebugObserver,
    NullDebugObserver,
    StateChange,
    StateChangeTracker,
)

__all__ = [
    "DebugObserver",
    "LoggingDebugObserver",
    "NullDebugObserver",
    "StateChange",
    "StateChangeTracker",
]
