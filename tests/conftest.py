import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from loot1004.config.loader import GameConfig, load_config  # noqa: E402
from loot1004.core.random import RandomSource  # noqa: E402
from loot1004.dungeon.generator import Level  # noqa: E402
from loot1004.dungeon.grid import Point, TileGrid  # noqa: E402
from loot1004.engine.movement import MoveStatus  # noqa: E402
from loot1004.game import Loot1004Game  # noqa: E402

# Hand-built run used by most engine tests. Entrance is (3, 6).
#
# Floor 0 landmarks: wall (2,6), card (5,6), multiplier (2,5), stairs down (5,5),
# treasure (2,4), potion (4,4), trap (2,3), big treasure (4,3).
FLOOR_0 = [
    ".......",
    ".......",
    ".......",
    "..^.&..",
    "..$.p..",
    "..x..>.",
    "..#E.c.",
]
FLOOR_1 = [
    ".......",
    ".<.....",
    ".......",
    ".......",
    "...$...",
    ".....>.",
    ".......",
]
FLOOR_2 = [
    ".......",
    ".<.....",
    ".......",
    "....*..",
    ".......",
    ".......",
    ".......",
]
ENTRANCE = Point(3, 6)


class FixedLevelGenerator:
    """Stands in for LevelGenerator and always returns the layout above."""

    def __init__(self, floors=(FLOOR_0, FLOOR_1, FLOOR_2), entrance=ENTRANCE):
        self.floors = floors
        self.entrance = entrance
        self.calls = 0

    def generate(self) -> Level:
        self.calls += 1
        grids = [TileGrid.from_lines(lines) for lines in self.floors]
        grids[0].reveal(self.entrance.x, self.entrance.y)
        return Level(floors=grids, entrance=self.entrance)


def walk(game, *directions):
    """Move through a sequence of directions, asserting every step lands."""
    for direction in directions:
        result = game.move(direction)
        assert result.status is MoveStatus.MOVED, (direction, result)
    return game.state.player


@pytest.fixture
def config() -> GameConfig:
    return load_config(env={})


@pytest.fixture
def rng() -> RandomSource:
    return RandomSource(seed=1004)


@pytest.fixture
def generator() -> FixedLevelGenerator:
    return FixedLevelGenerator()


@pytest.fixture
def game(config, rng, generator) -> Loot1004Game:
    g = Loot1004Game(config, rng=rng, generator=generator)
    assert g.start_run("normal") is True
    return g
