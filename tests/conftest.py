import sys
from pathlib import Path
from typing import Iterable, Optional

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from halls.combat.weapons import Weapon, WeaponKind  # noqa: E402
from halls.config import WorldConfig  # noqa: E402
from halls.dungeon.level import Level, Terrain  # noqa: E402
from halls.entities import Warrior  # noqa: E402
from halls.geometry import Point  # noqa: E402
from halls.state.world import World  # noqa: E402

TERRAIN_CHARS = {"#": Terrain.WALL, ".": Terrain.FLOOR, "+": Terrain.DOOR, "$": Terrain.COIN}


def level_from_ascii(rows: Iterable[str], depth: int = 0) -> Level:
    rows = list(rows)
    level = Level(depth=depth, width=max(len(r) for r in rows), height=len(rows))
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            terrain = TERRAIN_CHARS.get(ch)
            if terrain is not None:
                level.set_terrain(Point(x, y), terrain)
    return level


def make_world(levels, position: Point, weapon: Optional[Weapon] = None, config: Optional[WorldConfig] = None, **kw) -> World:
    config = config or WorldConfig(level_count=len(levels))
    warrior = Warrior(position=position, hp=kw.pop("hp", 30), max_hp=30, weapon=weapon, capacity=config.inventory_capacity)
    return World(config=config, seed=1, dungeon=tuple(levels), warrior=warrior, **kw)


ROOM_ROWS = [
    "#######",
    "#.....#",
    "#.....#",
    "#.....#",
    "#.....#",
    "#.....#",
    "#######",
]


@pytest.fixture
def small_config() -> WorldConfig:
    return WorldConfig(
        level_count=3,
        map_width=48,
        map_height=32,
        max_room_width=12,
        max_room_height=9,
        room_attempts=30,
    )


@pytest.fixture
def room_level() -> Level:
    return level_from_ascii(ROOM_ROWS)


@pytest.fixture
def sword() -> Weapon:
    return Weapon(WeaponKind.SWORD)
