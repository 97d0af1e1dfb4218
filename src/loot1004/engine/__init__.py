from .cards import CardSystem
from .editor import MapEditor
from .interactions import InteractionResolver
from .inventory import CardHand, CardKind
from .movement import MoveResult, MoveStatus, MovementEngine
from .notifications import Notification, NotificationFeed
from .prompts import Prompt, PromptBroker, PromptKind
from .state import EndReason, GameState, RunPhase

__all__ = [
    "CardHand",
    "CardKind",
    "CardSystem",
    "EndReason",
    "GameState",
    "InteractionResolver",
    "MapEditor",
    "MoveResult",
    "MoveStatus",
    "MovementEngine",
    "Notification",
    "NotificationFeed",
    "Prompt",
    "PromptBroker",
    "PromptKind",
    "RunPhase",
]
