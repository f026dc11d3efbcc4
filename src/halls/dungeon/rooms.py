from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List

from ..config import WorldConfig
from ..geometry import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Room:
    """Axis-aligned room. The outer ring of the rectangle is wall, the rest is interior."""

    origin: Point
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 3 or self.height < 3:
            raise ValueError("room must be at least 3x3 to hold an interior")

    @property
    def left(self) -> int:
        return self.origin.x

    @property
    def top(self) -> int:
        return self.origin.y

    @property
    def right(self) -> int:
        return self.origin.x + self.width - 1

    @property
    def bottom(self) -> int:
        return self.origin.y + self.height - 1

    @property
    def center(self) -> Point:
        return Point(self.origin.x + self.width // 2, self.origin.y + self.height // 2)

    def intersects(self, other: "Room", padding: int = 1) -> bool:
        return not (
            self.left + self.width + padding <= other.left
            or other.left + other.width + padding <= self.left
            or self.top + self.height + padding <= other.top
            or other.top + other.height + padding <= self.top
        )

    def interior(self) -> Iterator[Point]:
        for y in range(self.top + 1, self.bottom):
            for x in range(self.left + 1, self.right):
                yield Point(x, y)

    def border(self) -> Iterator[Point]:
        for y in range(self.top, self.bottom + 1):
            for x in range(self.left, self.right + 1):
                if x in (self.left, self.right) or y in (self.top, self.bottom):
                    yield Point(x, y)

    def contains_interior(self, p: Point) -> bool:
        return self.left < p.x < self.right and self.top < p.y < self.bottom

    def geometry(self) -> tuple:
        return (self.origin.x, self.origin.y, self.width, self.height)


def sample_room_candidates(rng: random.Random, config: WorldConfig) -> List[Room]:
    """Draw candidate rooms from the caller's seed stream.

    Candidates stay one cell inside the map so that fencing never leaves the bounds.
    """
    candidates: List[Room] = []
    for _ in range(config.room_attempts):
        w = rng.randint(config.min_room_size, config.max_room_width)
        h = rng.randint(config.min_room_size, config.max_room_height)
        x = rng.randint(1, max(1, config.map_width - w - 1))
        y = rng.randint(1, max(1, config.map_height - h - 1))
        candidates.append(Room(Point(x, y), w, h))
    return candidates


def layout_rooms(candidates: Iterable[Room], margin: int = 1) -> List[Room]:
    """Greedily accept candidates in input order, skipping any that overlap an accepted room plus margin."""
    accepted: List[Room] = []
    for candidate in candidates:
        if any(candidate.intersects(other, padding=margin) for other in accepted):
            continue
        accepted.append(candidate)
    logger.debug("layout_rooms: accepted %d rooms", len(accepted))
    return accepted


__all__ = ["Room", "layout_rooms", "sample_room_candidates"]
