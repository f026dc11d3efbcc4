from halls.dungeon.builder import LevelBuilder
from halls.dungeon.corridors import (
    bridge_room,
    carve_corridor,
    connect_rooms,
    corridor_direction,
    corridor_offset,
    geometry_hash,
    plan_edges,
)
from halls.dungeon.level import Level
from halls.dungeon.pathfinding import connected_component
from halls.geometry import Direction, Point
from halls.dungeon.rooms import Room


def _level(rooms, width=24, height=16):
    level = Level(depth=0, width=width, height=height)
    LevelBuilder.extrude(level, rooms)
    return level


def test_direction_requires_interior_overlap():
    a = Room(Point(1, 1), 5, 5)
    assert corridor_direction(a, Room(Point(10, 1), 5, 5)) is Direction.E
    assert corridor_direction(Room(Point(10, 1), 5, 5), a) is Direction.W
    assert corridor_direction(a, Room(Point(2, 9), 5, 5)) is Direction.S
    # diagonal neighbours share no interior row or column
    assert corridor_direction(a, Room(Point(10, 9), 5, 5)) is None


def test_offset_is_a_pure_function_of_geometry():
    a, b = Room(Point(1, 1), 5, 7), Room(Point(10, 2), 6, 6)
    assert geometry_hash(a, b) == geometry_hash(Room(Point(1, 1), 5, 7), Room(Point(10, 2), 6, 6))
    off = corridor_offset(a, b, Direction.E)
    assert off == corridor_offset(a, b, Direction.E)
    assert 3 <= off <= 6


def test_plan_edges_nearest_first():
    a = Room(Point(1, 1), 5, 5)
    near = Room(Point(8, 1), 5, 5)
    far = Room(Point(16, 1), 5, 5)
    assert plan_edges([a, far, near]) == [(0, 2), (1, 2), (0, 1)]


def test_carve_corridor_joins_two_rooms_with_a_door():
    a, b = Room(Point(1, 1), 5, 5), Room(Point(10, 1), 5, 5)
    level = _level([a, b])
    corridor = carve_corridor(level, a, b)
    assert corridor is not None and corridor.connected
    assert corridor.door is not None and corridor.door.x == a.right
    assert corridor.door in level.doors
    component = connected_component(a.center, level.is_passable)
    assert b.center in component
    # every carved cell is fenced
    for cell in corridor.cells[1:]:
        assert level.is_passable(cell)
        for d in (Direction.N, Direction.S):
            assert level.terrain_at(cell.step(d)) is not None


def test_connect_rooms_links_every_joinable_room():
    rooms = [
        Room(Point(1, 1), 5, 5),
        Room(Point(10, 1), 5, 5),
        Room(Point(10, 9), 5, 5),
        Room(Point(18, 9), 5, 5),
    ]
    level = _level(rooms)
    corridors = connect_rooms(level, rooms)
    assert len(corridors) == 3
    component = connected_component(rooms[0].center, level.is_passable)
    assert all(r.center in component for r in rooms)


def test_connect_rooms_is_deterministic():
    rooms = [Room(Point(1, 1), 6, 5), Room(Point(11, 2), 5, 6), Room(Point(2, 9), 7, 5)]
    first, second = _level(rooms), _level(rooms)
    connect_rooms(first, rooms)
    connect_rooms(second, rooms)
    assert first.to_dict() == second.to_dict()


def test_diagonal_rooms_are_bridged_with_an_elbow():
    a, b = Room(Point(1, 1), 5, 5), Room(Point(10, 9), 5, 5)
    assert plan_edges([a, b]) == []
    level = _level([a, b])
    corridors = connect_rooms(level, [a, b])
    assert len(corridors) == 1
    bridge = corridors[0]
    assert bridge.connected
    assert bridge.door == Point(10, 11)
    assert bridge.door in level.doors
    # west along row 11 until level with a's centre, then north into a
    assert Point(3, 11) in bridge.cells
    assert bridge.cells[-1] == Point(3, 5)
    assert b.center in connected_component(a.center, level.is_passable)


def test_bridge_stops_at_the_first_foreign_cell():
    a, b = Room(Point(1, 1), 5, 5), Room(Point(10, 9), 5, 5)
    level = _level([a, b])
    bridge = bridge_room(level, b, a, 1, 0)
    assert bridge.connected
    assert all(not a.contains_interior(p) for p in bridge.cells)
