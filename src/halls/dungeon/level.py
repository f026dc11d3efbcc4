from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Set

from ..entities import Creature
from ..geometry import Point, neighbors8
from ..items import PlacedItem
from .rooms import Room

logger = logging.getLogger(__name__)


class Terrain(str, Enum):
    WALL = "wall"
    FLOOR = "floor"
    DOOR = "door"
    COIN = "coin"


PASSABLE = frozenset({Terrain.FLOOR, Terrain.DOOR, Terrain.COIN})


@dataclass
class Entrance:
    point: Point
    opened: bool = False


@dataclass
class Pedestal:
    point: Point
    taken: bool = False


@dataclass
class Level:
    """One depth of the dungeon.

    Terrain lives in four mutually exclusive point sets; a point in none of them
    is solid rock outside the carved area. Creatures are owned here by value and
    addressed by id; nothing points back at the level.
    """

    depth: int
    width: int
    height: int
    walls: Set[Point] = field(default_factory=set)
    floors: Set[Point] = field(default_factory=set)
    doors: Set[Point] = field(default_factory=set)
    coins: Set[Point] = field(default_factory=set)
    creatures: List[Creature] = field(default_factory=list)
    items: List[PlacedItem] = field(default_factory=list)
    viewed: Set[Point] = field(default_factory=set)
    rooms: List[Room] = field(default_factory=list)
    upstairs: Optional[Point] = None
    downstairs: Optional[Point] = None
    entrance: Optional[Entrance] = None
    pedestal: Optional[Pedestal] = None

    # Terrain

    def in_bounds(self, p: Point) -> bool:
        return 0 <= p.x < self.width and 0 <= p.y < self.height

    def on_border(self, p: Point) -> bool:
        return p.x in (0, self.width - 1) or p.y in (0, self.height - 1)

    def terrain_at(self, p: Point) -> Optional[Terrain]:
        if p in self.floors:
            return Terrain.FLOOR
        if p in self.walls:
            return Terrain.WALL
        if p in self.doors:
            return Terrain.DOOR
        if p in self.coins:
            return Terrain.COIN
        return None

    def _set_for(self, terrain: Terrain) -> Set[Point]:
        return {
            Terrain.WALL: self.walls,
            Terrain.FLOOR: self.floors,
            Terrain.DOOR: self.doors,
            Terrain.COIN: self.coins,
        }[terrain]

    def set_terrain(self, p: Point, terrain: Optional[Terrain]) -> None:
        """Move ``p`` into exactly one terrain set, or into none when ``terrain`` is None."""
        self.walls.discard(p)
        self.floors.discard(p)
        self.doors.discard(p)
        self.coins.discard(p)
        if terrain is not None:
            self._set_for(terrain).add(p)

    def is_passable(self, p: Point) -> bool:
        return p in self.floors or p in self.doors or p in self.coins

    def is_wall(self, p: Point) -> bool:
        return p in self.walls

    def passable_cells(self) -> Set[Point]:
        return self.floors | self.doors | self.coins

    def fence(self, p: Point) -> None:
        """Wall off every empty in-bounds neighbour of ``p``."""
        for n in neighbors8(p):
            if self.in_bounds(n) and self.terrain_at(n) is None:
                self.walls.add(n)

    def carve(self, p: Point) -> None:
        self.set_terrain(p, Terrain.FLOOR)
        self.fence(p)

    # Special points

    @property
    def up_point(self) -> Optional[Point]:
        if self.entrance is not None:
            return self.entrance.point
        return self.upstairs

    @property
    def down_point(self) -> Optional[Point]:
        if self.pedestal is not None:
            return self.pedestal.point
        return self.downstairs

    def fallback_point(self) -> Point:
        """Landing cell used when an expected stairwell is missing: the smallest passable cell, else (0, 0)."""
        cells = self.passable_cells()
        if cells:
            return min(cells)
        return Point(0, 0)

    # Occupants

    def creature_at(self, p: Point) -> Optional[Creature]:
        for creature in self.creatures:
            if creature.position == p:
                return creature
        return None

    def creature_by_id(self, cid: int) -> Optional[Creature]:
        for creature in self.creatures:
            if creature.cid == cid:
                return creature
        return None

    def creature_positions(self) -> Set[Point]:
        return {c.position for c in self.creatures}

    def item_at(self, p: Point) -> Optional[PlacedItem]:
        for placed in self.items:
            if placed.point == p:
                return placed
        return None

    def blockers(self) -> Set[Point]:
        """Cells that stop sight: walls, doors and creatures."""
        return self.walls | self.doors | self.creature_positions()

    def room_interiors(self) -> Iterator[Point]:
        for room in self.rooms:
            yield from room.interior()

    def to_dict(self) -> dict:
        def pts(points) -> list:
            return [list(p.to_tuple()) for p in sorted(points)]

        return {
            "depth": self.depth,
            "width": self.width,
            "height": self.height,
            "walls": pts(self.walls),
            "floors": pts(self.floors),
            "doors": pts(self.doors),
            "coins": pts(self.coins),
            "viewed": pts(self.viewed),
            "rooms": [list(r.geometry()) for r in self.rooms],
            "creatures": [c.to_dict() for c in self.creatures],
            "items": [
                {"point": list(p.point.to_tuple()), "item": p.item.name} for p in self.items
            ],
            "upstairs": None if self.upstairs is None else list(self.upstairs.to_tuple()),
            "downstairs": None if self.downstairs is None else list(self.downstairs.to_tuple()),
            "entrance": None
            if self.entrance is None
            else {"point": list(self.entrance.point.to_tuple()), "opened": self.entrance.opened},
            "pedestal": None
            if self.pedestal is None
            else {"point": list(self.pedestal.point.to_tuple()), "taken": self.pedestal.taken},
        }


__all__ = ["Entrance", "Level", "PASSABLE", "Pedestal", "Terrain"]
