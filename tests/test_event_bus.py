from loot1004.core.events import EventBus, GameEvent


def test_subscribe_and_emit_in_order():
    bus = EventBus()
    calls = []
    bus.subscribe(GameEvent.PLAYER_MOVED, lambda **kw: calls.append(("a", kw["position"])) or "a")
    bus.subscribe("player_moved", lambda **kw: calls.append(("b", kw["position"])) or "b")
    results = bus.emit(GameEvent.PLAYER_MOVED, position=(1, 2))
    assert calls == [("a", (1, 2)), ("b", (1, 2))]
    assert results == ["a", "b"]


def test_duplicate_subscription_is_ignored():
    bus = EventBus()
    calls = []

    def handler(**_):
        calls.append(1)

    bus.subscribe(GameEvent.CARD_USED, handler)
    bus.subscribe(GameEvent.CARD_USED, handler)
    bus.emit(GameEvent.CARD_USED)
    assert calls == [1]


def test_unsubscribe_and_clear():
    bus = EventBus()
    calls = []

    def handler(**_):
        calls.append(1)

    bus.subscribe(GameEvent.CARD_USED, handler)
    bus.unsubscribe(GameEvent.CARD_USED, handler)
    bus.unsubscribe(GameEvent.CARD_USED, handler)
    assert bus.emit(GameEvent.CARD_USED) == []

    bus.subscribe(GameEvent.CARD_USED, handler)
    bus.clear()
    bus.emit(GameEvent.CARD_USED)
    assert calls == []


def test_failing_handler_is_isolated_and_reported(caplog):
    errors = []
    bus = EventBus(on_error=lambda where, exc: errors.append((where, type(exc))))
    calls = []

    def boom(**_):
        raise RuntimeError("boom")

    bus.subscribe(GameEvent.TILE_CONSUMED, boom)
    bus.subscribe(GameEvent.TILE_CONSUMED, lambda **_: calls.append("after"))
    with caplog.at_level("ERROR"):
        bus.emit(GameEvent.TILE_CONSUMED)
    assert calls == ["after"]
    assert errors == [("tile_consumed", RuntimeError)]
    assert "boom" in caplog.text


def test_failing_listener_does_not_break_a_move(game):
    def boom(**_):
        raise RuntimeError("listener failure")

    game.bus.subscribe(GameEvent.PLAYER_MOVED, boom)
    result = game.move("up")
    assert result.moved
