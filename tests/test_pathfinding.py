import pytest

from halls.dungeon.pathfinding import connected_component, find, seek
from halls.geometry import Point, chebyshev_distance, is_adjacent


def open_grid(p):
    return False


@pytest.mark.parametrize(
    "start,goal",
    [
        (Point(0, 0), Point(5, 0)),
        (Point(0, 0), Point(4, 7)),
        (Point(3, 3), Point(-2, 1)),
        (Point(1, 8), Point(1, 2)),
    ],
)
def test_open_grid_route_length_is_chebyshev(start, goal):
    path = seek(goal, start, open_grid)
    assert len(path) == chebyshev_distance(start, goal)
    assert path[-1] == goal
    assert start not in path
    prev = start
    for p in path:
        assert is_adjacent(prev, p)
        prev = p


def test_same_point_is_empty():
    assert seek(Point(2, 2), Point(2, 2), open_grid) == []


def test_ties_break_in_compass_order():
    assert seek(Point(2, 0), Point(0, 0), open_grid) == [Point(1, -1), Point(2, 0)]
    assert seek(Point(2, 0), Point(0, 0), open_grid, bounds=(5, 1)) == [Point(1, 0), Point(2, 0)]


def test_enclosed_goal_is_unreachable():
    goal = Point(5, 5)
    ring = {Point(goal.x + dx, goal.y + dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)} - {goal}
    assert seek(goal, Point(0, 0), lambda p: p in ring, bounds=(12, 12)) == []
    assert find(goal, Point(0, 0), lambda p: p in ring, bounds=(12, 12)) is None


def test_goal_is_admitted_even_when_blocked():
    goal = Point(3, 0)
    path = seek(goal, Point(0, 0), lambda p: p == goal, bounds=(6, 3))
    assert path[-1] == goal


def test_route_goes_around_a_wall():
    wall = {Point(2, y) for y in range(0, 4)}
    path = seek(Point(4, 0), Point(0, 0), lambda p: p in wall, bounds=(6, 6))
    assert path
    assert not wall & set(path)
    assert path[-1] == Point(4, 0)


def test_find_stops_next_to_goal():
    assert find(Point(1, 1), Point(0, 0), open_grid) == []
    route = find(Point(5, 0), Point(0, 0), open_grid, bounds=(8, 1))
    assert route == [Point(1, 0), Point(2, 0), Point(3, 0), Point(4, 0)]
    assert is_adjacent(route[-1], Point(5, 0))


def test_connected_component_flood():
    cells = {Point(x, 0) for x in range(4)} | {Point(10, 10)}
    assert connected_component(Point(0, 0), lambda p: p in cells) == {Point(x, 0) for x in range(4)}
    assert connected_component(Point(5, 5), lambda p: p in cells) == set()


def test_empty_bounds_are_rejected():
    with pytest.raises(ValueError):
        seek(Point(1, 0), Point(0, 0), open_grid, bounds=(0, 4))
    with pytest.raises(ValueError):
        find(Point(1, 0), Point(0, 0), open_grid, bounds=(4, 0))
