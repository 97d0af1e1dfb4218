from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .config.loader import GameConfig, load_config
from .constants import DIRECTIONS
from .core.events import EventBus, GameEvent
from .core.random import RandomSource
from .debug.observer import DebugObserver, NullDebugObserver
from .dungeon.generator import LevelGenerator
from .dungeon.grid import CellRef, ItemMarker, Point
from .dungeon.tiles import TileKind
from .engine.cards import CardSystem
from .engine.editor import MapEditor
from .engine.interactions import InteractionResolver
from .engine.inventory import CardHand
from .engine.movement import MoveResult, MoveStatus, MovementEngine
from .engine.notifications import Notification, NotificationFeed
from .engine.prompts import Prompt, PromptBroker
from .engine.state import GameState, RunPhase

logger = logging.getLogger(__name__)

Direction = Union[str, Tuple[int, int]]


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of the run handed to renderers and debug tools."""

    phase: str
    end_reason: Optional[str]
    difficulty: Optional[str]
    target: Optional[int]
    floor: int
    player: Optional[Tuple[int, int]]
    entrance: Optional[Tuple[int, int]]
    health: int
    score: int
    multiplier: float
    cards: Dict[str, int]
    pending_trap: bool
    prompt: Optional[str]
    editor_mode: bool
    selected_tile: Optional[str]
    revealed_cells: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Loot1004Game:
    """The in-process API the presentation layer talks to.

    A run is created by ``start_run`` and thrown away by ``reset_run``. All
    intents are synchronous. Intents that do not apply (wrong phase, unknown
    direction or card, pending prompt, empty hand...) are silently ignored
    and report that through their return value.

    The engine only emits through module loggers. Hosts call
    ``loot1004.logging_config.configure_logging()`` once at startup to get
    output, and may pass ``LoggingDebugObserver()`` as ``observer``.

    Example:

        configure_logging()
        game = Loot1004Game()
        game.start_run("normal")
        result = game.move("right")
        if result.prompt is not None:
            game.resolve_prompt(True)
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        rng: Optional[RandomSource] = None,
        generator: Optional[LevelGenerator] = None,
        observer: Optional[DebugObserver] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.config = config or load_config()
        self.rng = rng or RandomSource()
        self.generator = generator or LevelGenerator(self.rng)
        self.observer: DebugObserver = observer or NullDebugObserver()
        self.bus = bus or EventBus(on_error=self._report_error)
        self.difficulty_key = self.config.default_difficulty
        self.state: Optional[GameState] = None
        self._prompts: Optional[PromptBroker] = None
        self._movement: Optional[MovementEngine] = None
        self._cards: Optional[CardSystem] = None
        self._editor: Optional[MapEditor] = None
        self.bus.subscribe(GameEvent.PHASE_CHANGED, self._on_phase_changed)

    # ---- Lifecycle -------------------------------------------------------
    @property
    def phase(self) -> RunPhase:
        return RunPhase.MENU if self.state is None else self.state.phase

    def start_run(self, difficulty: Optional[str] = None) -> bool:
        if self.state is not None:
            logger.debug("start_run ignored: a run is already in progress (%s)", self.phase.value)
            return False
        key = difficulty or self.difficulty_key
        preset = self.config.difficulty(key)
        if preset is None:
            logger.debug("start_run ignored: unknown difficulty %r", key)
            return False
        self.difficulty_key = key

        started = time.perf_counter()
        level = self.generator.generate()
        self._report_perf("generate_level", (time.perf_counter() - started) * 1000.0)

        state = GameState(
            level=level,
            difficulty=preset,
            cards=CardHand(self.config.starting_cards),
            bus=self.bus,
            notifications=NotificationFeed(self.config.notification_seconds),
            max_health=self.config.max_health,
        )
        prompts = PromptBroker(state, self.bus, after_resolve=self._after_mutation)
        resolver = InteractionResolver(state, prompts, self.rng)
        self.state = state
        self._prompts = prompts
        self._movement = MovementEngine(state, resolver, prompts)
        self._cards = CardSystem(state)
        self._editor = MapEditor(state)
        logger.info("Run started on %s (target %d), entrance %s", preset.label, preset.target, level.entrance)
        self.bus.emit(GameEvent.RUN_STARTED, difficulty=preset)
        self._report_lifecycle("run_started", difficulty=key)
        return True

    def reset_run(self) -> None:
        if self.state is None:
            return
        if self._prompts is not None:
            self._prompts.discard()
        if self._movement is not None:
            self._movement.detach()
        self.state = None
        self._prompts = self._movement = self._cards = self._editor = None
        logger.info("Run reset; back to menu")
        self.bus.emit(GameEvent.RUN_RESET)
        self._report_lifecycle("run_reset")

    # ---- Intents ---------------------------------------------------------
    def move(self, direction: Direction) -> MoveResult:
        delta = _parse_direction(direction)
        if not self._can_act() or delta is None:
            position = self.state.player if self.state is not None else Point(0, 0)
            prompt = self.state.prompt if self.state is not None else None
            return MoveResult(MoveStatus.IGNORED, position, prompt)
        result = self._movement.attempt_move(*delta)
        self._after_mutation()
        return result

    def resolve_prompt(self, accept: bool) -> bool:
        if self.state is None or not self.state.is_playing or self._prompts is None:
            return False
        return self._prompts.resolve(bool(accept))

    def use_card(self, kind: object) -> bool:
        if not self._can_act():
            return False
        used = self._cards.use(kind)
        if used:
            self._after_mutation()
        return used

    def escape(self) -> Optional[Prompt]:
        """Raise the escape prompt when standing on the floor-0 entrance after leaving it."""
        if not self._can_act():
            return None
        return self._movement.propose_escape()

    def toggle_editor(self) -> bool:
        if self.state is None or not self.state.is_playing:
            return False
        return self._editor.toggle()

    def set_selected_tile(self, kind: object) -> Optional[TileKind]:
        if self._editor is None:
            return None
        return self._editor.select(kind)

    def paint_tile(self, x: int, y: int, kind: object = None) -> bool:
        if not self._can_act():
            return False
        return self._editor.paint(x, y, kind)

    def update(self, dt: float) -> None:
        """Advance cosmetic timers (notification expiry)."""
        if self.state is not None:
            self.state.notifications.update(dt)

    # ---- Observers -------------------------------------------------------
    @property
    def pending_prompt(self) -> Optional[Prompt]:
        return self.state.prompt if self.state is not None else None

    @property
    def health(self) -> int:
        return self.state.health if self.state is not None else 0

    @property
    def score(self) -> int:
        return self.state.score if self.state is not None else 0

    @property
    def multiplier(self) -> float:
        return self.state.multiplier if self.state is not None else 1.0

    @property
    def cards(self) -> Dict[str, int]:
        return self.state.cards.as_dict() if self.state is not None else {}

    @property
    def has_pending_trap(self) -> bool:
        return self.state is not None and self.state.has_pending_trap

    @property
    def player(self) -> Optional[Point]:
        return self.state.player if self.state is not None else None

    @property
    def floor(self) -> int:
        return self.state.floor if self.state is not None else 0

    def is_cell_visible(self, x: int, y: int) -> bool:
        state = self.state
        if state is None:
            return False
        if state.editor_mode:
            return state.grid.is_within(x, y)
        return state.grid.is_revealed(x, y) or Point(x, y) in state.map_revealed

    def visible_tiles(self) -> List[List[Optional[TileKind]]]:
        """Current floor as rows of kinds, None where fog still covers the cell."""
        state = self.state
        if state is None:
            return []
        grid = state.grid
        return [
            [grid.get(x, y) if self.is_cell_visible(x, y) else None for x in range(grid.size)]
            for y in range(grid.size)
        ]

    def item_markers(self) -> List[ItemMarker]:
        if self.state is None:
            return []
        return [m for m in self.state.grid.items() if self.is_cell_visible(m.x, m.y)]

    def active_notifications(self) -> List[Notification]:
        if self.state is None:
            return []
        return self.state.notifications.active(self.state.floor)

    def blocked_markers(self) -> List[CellRef]:
        if self.state is None:
            return []
        return sorted(
            (c for c in self.state.blocked if c.floor == self.state.floor),
            key=lambda c: (c.y, c.x),
        )

    def snapshot(self) -> GameSnapshot:
        state = self.state
        if state is None:
            return GameSnapshot(
                phase=RunPhase.MENU.value, end_reason=None, difficulty=None, target=None, floor=0,
                player=None, entrance=None, health=0, score=0, multiplier=1.0, cards={},
                pending_trap=False, prompt=None, editor_mode=False, selected_tile=None, revealed_cells=0,
            )
        return GameSnapshot(
            phase=state.phase.value,
            end_reason=state.end_reason.value if state.end_reason else None,
            difficulty=state.difficulty.key,
            target=state.difficulty.target,
            floor=state.floor,
            player=(state.player.x, state.player.y),
            entrance=(state.entrance.x, state.entrance.y),
            health=state.health,
            score=state.score,
            multiplier=state.multiplier,
            cards=state.cards.as_dict(),
            pending_trap=state.has_pending_trap,
            prompt=state.prompt.kind.value if state.prompt else None,
            editor_mode=state.editor_mode,
            selected_tile=state.selected_tile.value if state.selected_tile else None,
            revealed_cells=sum(row.count(True) for row in state.grid.revealed_mask()),
        )

    # ---- Internals -------------------------------------------------------
    def _can_act(self) -> bool:
        state = self.state
        if state is None or not state.is_playing:
            return False
        if state.prompt is not None:
            logger.debug("Intent ignored while %s prompt is pending", state.prompt.kind.value)
            return False
        return True

    def _after_mutation(self) -> None:
        if self.state is None:
            return
        self.state.evaluate_phase()
        self._report_lifecycle("state_changed")

    def _on_phase_changed(self, phase: RunPhase, reason: Any = None, **_: Any) -> None:
        self._report_lifecycle("phase_changed", phase=phase.value, reason=getattr(reason, "value", reason))

    def _report_lifecycle(self, event: str, **details: Any) -> None:
        details["snapshot"] = self.snapshot().as_dict()
        try:
            self.observer.on_lifecycle(event, details)
        except Exception:
            logger.exception("Debug observer failed on lifecycle event '%s'", event)

    def _report_perf(self, label: str, elapsed_ms: float) -> None:
        try:
            self.observer.on_perf(label, elapsed_ms)
        except Exception:
            logger.exception("Debug observer failed on perf event '%s'", label)

    def _report_error(self, where: str, exc: Exception) -> None:
        try:
            self.observer.on_error(where, exc)
        except Exception:
            logger.exception("Debug observer failed while reporting an error from '%s'", where)


def _parse_direction(direction: Direction) -> Optional[Tuple[int, int]]:
    if isinstance(direction, str):
        return DIRECTIONS.get(direction.lower())
    if isinstance(direction, Sequence) and len(direction) == 2:
        dx, dy = direction
        if isinstance(dx, int) and isinstance(dy, int) and abs(dx) + abs(dy) == 1:
            return dx, dy
    return None


__all__ = ["GameSnapshot", "Loot1004Game", "MoveResult", "MoveStatus"]
