import pytest

from conftest import level_from_ascii, make_world

from halls.entities import Creature
from halls.geometry import Direction, Point, chebyshev_distance
from halls.state import entity_at, find_path, illuminated_set, is_blocked, new_world, viewed_set


@pytest.fixture
def world(small_config):
    return new_world(small_config, seed=3)


def test_new_world_starts_on_the_entrance(world, small_config):
    entrance = world.dungeon[0].entrance
    assert entrance is not None
    assert world.warrior.position == entrance.point
    assert world.warrior.hp == small_config.warrior_hp
    assert world.warrior.capacity == small_config.inventory_capacity
    assert len(world.dungeon) == small_config.level_count
    assert world.depth == 0 and world.age == 0


def test_initial_visibility_is_remembered(world):
    lit = illuminated_set(world)
    assert world.warrior.position in lit
    assert lit <= viewed_set(world.level)
    # read-only copy
    lit.clear()
    assert world.illuminated


def test_entity_and_blocking_queries(room_level):
    room_level.creatures = [Creature(cid=4, position=Point(4, 4), facing=Direction.NONE, hp=3, attack=1, defense=0)]
    world = make_world([room_level], Point(2, 2))
    assert entity_at(Point(2, 2), world) is world.warrior
    assert entity_at(Point(4, 4), world).cid == 4
    assert entity_at(Point(3, 3), world) is None
    assert is_blocked(Point(0, 0), world)
    assert is_blocked(Point(4, 4), world)
    assert not is_blocked(Point(3, 3), world)
    assert not is_blocked(Point(2, 2), world)


def test_find_path_properties(room_level):
    world = make_world([room_level], Point(1, 1))
    assert find_path(Point(1, 1), Point(1, 1), world) == []
    path = find_path(Point(1, 1), Point(5, 4), world)
    assert len(path) == chebyshev_distance(Point(1, 1), Point(5, 4))


def test_find_path_to_enclosed_cell_is_empty():
    level = level_from_ascii(
        [
            "#########",
            "#...#####",
            "#...##.##",
            "#...#####",
            "#########",
        ]
    )
    world = make_world([level], Point(1, 1))
    assert find_path(Point(1, 1), Point(6, 2), world) == []


def test_world_generation_is_reproducible(small_config):
    a = new_world(small_config, seed=11)
    b = new_world(small_config, seed=11)
    assert a.warrior.position == b.warrior.position
    assert [lvl.to_dict() for lvl in a.dungeon] == [lvl.to_dict() for lvl in b.dungeon]
