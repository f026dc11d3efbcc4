from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple


@dataclass(frozen=True, order=True)
class Point:
    """Integer grid coordinate. x grows to the right, y grows down."""

    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def step(self, direction: "Direction", times: int = 1) -> "Point":
        dx, dy = direction.delta
        return Point(self.x + dx * times, self.y + dy * times)

    def to_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


class Direction(Enum):
    """The 8 compass directions plus NONE. Values are (dx, dy)."""

    NONE = (0, 0)
    N = (0, -1)
    NE = (1, -1)
    E = (1, 0)
    SE = (1, 1)
    S = (0, 1)
    SW = (-1, 1)
    W = (-1, 0)
    NW = (-1, -1)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    def clockwise(self) -> "Direction":
        if self is Direction.NONE:
            return self
        index = COMPASS.index(self)
        return COMPASS[(index + 1) % len(COMPASS)]

    @classmethod
    def between(cls, a: Point, b: Point) -> "Direction":
        """Direction of a single step from a towards b (sign of each axis)."""
        dx = (b.x > a.x) - (b.x < a.x)
        dy = (b.y > a.y) - (b.y < a.y)
        return cls((dx, dy))


# Fixed enumeration order for neighbour expansion; pathfinding tie-breaks depend on it.
COMPASS: Tuple[Direction, ...] = (
    Direction.N,
    Direction.NE,
    Direction.E,
    Direction.SE,
    Direction.S,
    Direction.SW,
    Direction.W,
    Direction.NW,
)

CARDINALS: Tuple[Direction, ...] = (Direction.N, Direction.E, Direction.S, Direction.W)


def chebyshev_distance(a: Point, b: Point) -> int:
    return max(abs(a.x - b.x), abs(a.y - b.y))


def manhattan_distance(a: Point, b: Point) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def squared_distance(a: Point, b: Point) -> int:
    return (a.x - b.x) ** 2 + (a.y - b.y) ** 2


def is_adjacent(a: Point, b: Point) -> bool:
    return chebyshev_distance(a, b) == 1


def neighbors8(p: Point) -> Iterator[Point]:
    for direction in COMPASS:
        yield p.step(direction)


def bresenham_line(start: Point, end: Point) -> List[Point]:
    """
    Bresenham's line algorithm. Returns the list of points from start to end inclusive.
    """
    points: List[Point] = []

    x0, y0 = start.x, start.y
    x1, y1 = end.x, end.y
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        points.append(Point(x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy

    return points


def rectangle_perimeter(center: Point, half_width: int, half_height: int) -> List[Point]:
    """Points on the border of the rectangle centred on `center`, clockwise from the top-left."""
    left, right = center.x - half_width, center.x + half_width
    top, bottom = center.y - half_height, center.y + half_height
    if half_width == 0 or half_height == 0:
        return sorted({Point(x, y) for x in range(left, right + 1) for y in range(top, bottom + 1)})
    points: List[Point] = []
    for x in range(left, right + 1):
        points.append(Point(x, top))
    for y in range(top + 1, bottom + 1):
        points.append(Point(right, y))
    for x in range(right - 1, left - 1, -1):
        points.append(Point(x, bottom))
    for y in range(bottom - 1, top, -1):
        points.append(Point(left, y))
    return points


__all__ = [
    "CARDINALS",
    "COMPASS",
    "Direction",
    "Point",
    "bresenham_line",
    "chebyshev_distance",
    "is_adjacent",
    "manhattan_distance",
    "neighbors8",
    "rectangle_perimeter",
    "squared_distance",
]
