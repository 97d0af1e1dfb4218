from conftest import FixedLevelGenerator, walk

from loot1004.config.loader import GameConfig
from loot1004.core.random import RandomSource
from loot1004.dungeon.grid import Point
from loot1004.engine.inventory import CardKind
from loot1004.engine.movement import MoveStatus
from loot1004.engine.prompts import PromptKind
from loot1004.engine.state import EndReason, RunPhase
from loot1004.game import Loot1004Game


def _low_target_config(target=10):
    return GameConfig.from_dict(
        {
            "difficulties": {"tiny": {"label": "Tiny", "target": target}},
            "default_difficulty": "tiny",
        }
    )


def test_new_game_sits_in_menu(config, rng, generator):
    game = Loot1004Game(config, rng=rng, generator=generator)
    assert game.phase is RunPhase.MENU
    assert game.state is None
    assert game.move("up").status is MoveStatus.IGNORED
    assert game.use_card("heal") is False
    assert game.escape() is None
    assert game.resolve_prompt(True) is False
    assert game.visible_tiles() == []
    assert game.snapshot().phase == "menu"


def test_start_run_initial_state(game):
    state = game.state
    assert game.phase is RunPhase.PLAYING
    assert state.health == 3
    assert state.score == 0
    assert state.multiplier == 1.0
    assert state.floor == 0
    assert state.difficulty.target == 10000
    assert state.pending_trap is None
    assert state.prompt is None


def test_unknown_difficulty_is_ignored(config, rng, generator):
    game = Loot1004Game(config, rng=rng, generator=generator)
    assert game.start_run("nightmare") is False
    assert game.phase is RunPhase.MENU
    assert generator.calls == 0


def test_default_difficulty_from_config(config, rng, generator):
    game = Loot1004Game(config, rng=rng, generator=generator)
    assert game.start_run() is True
    assert game.state.difficulty.key == "normal"


def test_second_start_is_ignored(game, generator):
    walk(game, "up")
    assert game.start_run("easy") is False
    assert game.state.player == Point(3, 5)
    assert generator.calls == 1


def test_reset_returns_to_menu_and_allows_fresh_run(game, generator):
    walk(game, "up", "left")
    game.reset_run()
    assert game.phase is RunPhase.MENU
    assert game.state is None

    assert game.start_run("hard") is True
    assert generator.calls == 2
    state = game.state
    assert state.difficulty.target == 20000
    assert state.multiplier == 1.0
    assert state.player == Point(3, 6)


def test_reset_drops_pending_prompt_and_listeners(game):
    walk(game, "up", "right")
    game.move("right")
    old_state = game.state
    game.reset_run()
    assert old_state.prompt is None
    game.start_run("normal")
    # Only the new run's escape listener should fire
    walk(game, "up", "down")
    assert game.pending_prompt.kind is PromptKind.ESCAPE


def test_reaching_target_is_victory():
    game = Loot1004Game(_low_target_config(), rng=RandomSource(1), generator=FixedLevelGenerator())
    game.start_run()
    walk(game, "up", "up", "left")
    assert game.phase is RunPhase.VICTORY
    assert game.state.end_reason is None
    assert game.move("right").status is MoveStatus.IGNORED


def test_escape_prompt_after_returning_to_entrance(game):
    walk(game, "up")
    result = game.move("down")
    assert result.status is MoveStatus.MOVED
    assert result.prompt is not None
    assert result.prompt.kind is PromptKind.ESCAPE

    game.resolve_prompt(True)
    assert game.phase is RunPhase.GAME_OVER
    assert game.state.end_reason is EndReason.ESCAPE
    assert game.snapshot().phase == "gameOver"
    assert game.snapshot().end_reason == "escape"


def test_escape_decline_keeps_playing(game):
    walk(game, "up", "down")
    game.resolve_prompt(False)
    assert game.phase is RunPhase.PLAYING
    assert game.state.player == Point(3, 6)

    # Asking again from the same cell raises the prompt again
    prompt = game.escape()
    assert prompt is not None and prompt.kind is PromptKind.ESCAPE
    prompt.accept()
    assert game.phase is RunPhase.GAME_OVER


def test_escape_needs_to_have_left_the_entrance(game):
    assert game.escape() is None
    # A blocked move does not count as leaving
    game.move("left")
    assert game.escape() is None
    assert game.pending_prompt is None


def test_escape_is_not_offered_away_from_the_entrance(game):
    walk(game, "up")
    assert game.escape() is None


def test_death_wins_over_victory(config, rng, generator):
    game = Loot1004Game(_low_target_config(), rng=rng, generator=generator)
    game.start_run()
    game.state.health = 0
    game.state.score = 100
    game.state.evaluate_phase()
    assert game.phase is RunPhase.GAME_OVER
    assert game.state.end_reason is EndReason.DEATH


def test_snapshot_reflects_state(game):
    walk(game, "up", "left")
    snap = game.snapshot()
    assert snap.phase == "playing"
    assert snap.difficulty == "normal"
    assert snap.target == 10000
    assert snap.player == (2, 5)
    assert snap.entrance == (3, 6)
    assert snap.multiplier == 1.5
    assert snap.cards["trap_disarm"] == 3
    assert snap.pending_trap is False
    assert snap.prompt is None
    assert snap.revealed_cells == 3

    data = snap.as_dict()
    data["cards"]["heal"] = 99
    assert game.state.cards.count(CardKind.HEAL) != 99


def test_read_only_properties(game):
    walk(game, "up", "left")
    assert game.health == 3
    assert game.score == 0
    assert game.multiplier == 1.5
    assert game.cards["map"] == 2
    assert game.has_pending_trap is False
    assert game.player == Point(2, 5)
    assert game.floor == 0

    game.reset_run()
    assert game.player is None
    assert game.cards == {}
