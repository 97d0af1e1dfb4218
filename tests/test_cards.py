from conftest import walk

from loot1004.dungeon.grid import CellRef, Point
from loot1004.dungeon.tiles import TileKind
from loot1004.engine.inventory import CardHand, CardKind, parse_card_kind
from loot1004.engine.movement import MoveStatus


def test_starting_hand(game):
    assert game.state.cards.as_dict() == {"heal": 2, "trap_disarm": 3, "map": 2, "multiplier_card": 1}


def test_heal_at_full_health_is_a_noop(game):
    assert game.use_card("heal") is False
    assert game.state.health == 3
    assert game.state.cards.count(CardKind.HEAL) == 2


def test_heal_restores_one(game):
    game.state.health = 1
    assert game.use_card(CardKind.HEAL) is True
    assert game.state.health == 2
    assert game.state.cards.count(CardKind.HEAL) == 1
    assert any("Heal card used" in n.text for n in game.active_notifications())


def test_heal_with_empty_hand_is_a_noop(game):
    game.state.health = 1
    game.state.cards.take(CardKind.HEAL)
    game.state.cards.take(CardKind.HEAL)
    assert game.use_card("heal") is False
    assert game.state.health == 1


def test_trap_disarm_without_pending_trap_is_a_noop(game):
    assert game.use_card("trap_disarm") is False
    assert game.state.cards.count(CardKind.TRAP_DISARM) == 3


def test_trap_disarm_on_pending_trap(game):
    walk(game, "up", "up", "up")
    game.move("left")
    game.resolve_prompt(False)
    assert game.state.has_pending_trap

    assert game.use_card("trap_disarm") is True
    assert game.state.pending_trap is None
    assert CellRef(0, 2, 3) in game.state.disarmed
    assert game.state.cards.count(CardKind.TRAP_DISARM) == 2

    # Now the trap is harmless and gets cleared on the way through
    result = game.move("left")
    assert result.status is MoveStatus.MOVED
    assert game.state.health == 2
    assert game.state.grid.get(2, 3) is TileKind.EMPTY


def test_map_reveals_moore_neighbourhood_clipped(game):
    # From the bottom edge only five neighbours exist
    assert game.use_card("map") is True
    expected = {Point(2, 5), Point(3, 5), Point(4, 5), Point(2, 6), Point(4, 6)}
    assert game.state.map_revealed == expected
    for p in expected:
        assert game.state.grid.is_revealed(p.x, p.y)
    assert game.state.cards.count(CardKind.MAP) == 1

    tiles = game.visible_tiles()
    assert tiles[5][2] is TileKind.MULTIPLIER
    assert tiles[6][2] is TileKind.WALL
    assert tiles[0][0] is None
    kinds = {m.kind for m in game.item_markers()}
    assert kinds == {TileKind.MULTIPLIER}


def test_map_in_open_area_reveals_eight(game):
    walk(game, "up", "up", "up")
    game.use_card("map")
    assert len(game.state.map_revealed) == 8
    assert Point(3, 3) not in game.state.map_revealed


def test_map_with_empty_hand_is_a_noop(game):
    game.use_card("map")
    game.use_card("map")
    mask = game.state.grid.revealed_mask()
    assert game.use_card("map") is False
    assert game.state.grid.revealed_mask() == mask


def test_multiplier_card(game):
    assert game.use_card("multiplier_card") is True
    assert game.state.multiplier == 2.0
    assert game.use_card("multiplier_card") is False
    assert game.state.multiplier == 2.0


def test_unknown_and_score_cards_are_ignored(game):
    assert game.use_card("score") is False
    assert game.use_card("joker") is False
    assert game.use_card(None) is False


def test_cards_are_ignored_while_prompt_is_pending(game):
    game.state.health = 2
    walk(game, "up", "up", "up")
    game.move("left")
    assert game.use_card("heal") is False
    assert game.state.cards.count(CardKind.HEAL) == 2


def test_card_hand_basics():
    hand = CardHand({"heal": 1, "score": 5, "bogus": 2})
    assert hand.as_dict() == {"heal": 1, "trap_disarm": 0, "map": 0, "multiplier_card": 0}
    assert hand.take(CardKind.HEAL) is True
    assert hand.take(CardKind.HEAL) is False
    assert hand.count(CardKind.HEAL) == 0
    hand.add(CardKind.SCORE)
    assert "score" not in hand.as_dict()
    assert parse_card_kind("multiplier_card") is CardKind.MULTIPLIER
    assert parse_card_kind(CardKind.SCORE) is None
