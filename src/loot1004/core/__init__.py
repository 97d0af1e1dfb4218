from .events import EventBus, GameEvent
from .random import RandomSource

__all__ = ["EventBus", "GameEvent", "RandomSource"]
