from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..geometry import Direction, Point, manhattan_distance, squared_distance
from ..rng import stable_hash
from .level import Level, Terrain
from .pathfinding import connected_component
from .rooms import Room

logger = logging.getLogger(__name__)


@dataclass
class Corridor:
    """Result of carving one edge."""

    a: int
    b: int
    direction: Direction
    cells: List[Point] = field(default_factory=list)
    door: Optional[Point] = None
    connected: bool = False


def corridor_direction(a: Room, b: Room) -> Optional[Direction]:
    """Cardinal direction from a to b, or None if no straight corridor can join their interiors."""
    if b.left > a.right or b.right < a.left:
        if overlap_range(a, b, Direction.E) is not None:
            return Direction.E if b.left > a.right else Direction.W
    if b.top > a.bottom or b.bottom < a.top:
        if overlap_range(a, b, Direction.S) is not None:
            return Direction.S if b.top > a.bottom else Direction.N
    return None


def overlap_range(a: Room, b: Room, direction: Direction) -> Optional[Tuple[int, int]]:
    """Shared interior coordinates on the axis perpendicular to ``direction``."""
    if direction in (Direction.E, Direction.W):
        lo = max(a.top, b.top) + 1
        hi = min(a.bottom, b.bottom) - 1
    else:
        lo = max(a.left, b.left) + 1
        hi = min(a.right, b.right) - 1
    if lo > hi:
        return None
    return (lo, hi)


def geometry_hash(a: Room, b: Room) -> int:
    return stable_hash("corridor", a.geometry(), b.geometry())


def corridor_offset(a: Room, b: Room, direction: Direction) -> Optional[int]:
    """Pick the corridor's perpendicular coordinate as a pure function of both rooms."""
    span = overlap_range(a, b, direction)
    if span is None:
        return None
    lo, hi = span
    return lo + geometry_hash(a, b) % (hi - lo + 1)


def corridor_origin(a: Room, direction: Direction, offset: int) -> Point:
    if direction is Direction.E:
        return Point(a.right, offset)
    if direction is Direction.W:
        return Point(a.left, offset)
    if direction is Direction.S:
        return Point(offset, a.bottom)
    return Point(offset, a.top)


def plan_edges(rooms: Sequence[Room]) -> List[Tuple[int, int]]:
    """Every joinable pair, nearest first; ties break on room indices."""
    pairs = []
    for i in range(len(rooms)):
        for j in range(i + 1, len(rooms)):
            if corridor_direction(rooms[i], rooms[j]) is None:
                continue
            pairs.append((squared_distance(rooms[i].center, rooms[j].center), i, j))
    pairs.sort()
    return [(i, j) for _, i, j in pairs]


def carve_corridor(level: Level, a: Room, b: Room, ia: int = 0, ib: int = 1) -> Optional[Corridor]:
    """Carve a straight corridor from a's wall towards b.

    Stops when the next cell is already passable or when the step budget (the
    Manhattan distance between the centres) runs out. The origin cell on a's
    wall becomes a door.
    """
    direction = corridor_direction(a, b)
    if direction is None:
        return None
    offset = corridor_offset(a, b, direction)
    if offset is None:
        return None
    origin = corridor_origin(a, direction, offset)
    budget = manhattan_distance(a.center, b.center)
    corridor = Corridor(a=ia, b=ib, direction=direction)

    pos = origin
    for _ in range(budget):
        level.carve(pos)
        corridor.cells.append(pos)
        nxt = pos.step(direction)
        if not level.in_bounds(nxt) or level.on_border(nxt):
            break
        if level.is_passable(nxt):
            corridor.connected = True
            break
        pos = nxt

    if corridor.cells:
        level.set_terrain(origin, Terrain.DOOR)
        corridor.door = origin
    logger.debug(
        "Corridor %d->%d %s from %s: %d cells, connected=%s",
        ia,
        ib,
        direction.name,
        origin,
        len(corridor.cells),
        corridor.connected,
    )
    return corridor


def _elbow_directions(a: Room, b: Room) -> List[Direction]:
    """Dominant axis first, then the other one, both heading from a's centre to b's."""
    dx = b.center.x - a.center.x
    dy = b.center.y - a.center.y
    horizontal = Direction.E if dx > 0 else Direction.W
    vertical = Direction.S if dy > 0 else Direction.N
    if abs(dx) >= abs(dy):
        return [horizontal, vertical]
    return [vertical, horizontal]


def bridge_room(level: Level, room: Room, target: Room, ia: int = 0, ib: int = 1) -> Corridor:
    """Carve an elbow corridor from ``room`` towards ``target``'s centre.

    The walk runs along the dominant axis until it is level with the target
    centre, then turns. It passes through cells already joined to ``room`` and
    stops at the first passable cell of any other component. The first carved
    cell on the room's wall becomes a door.
    """
    own = connected_component(room.center, level.is_passable)
    first, second = _elbow_directions(room, target)
    corridor = Corridor(a=ia, b=ib, direction=first)
    goal = target.center
    pos = room.center
    while pos != goal:
        if first in (Direction.E, Direction.W) and pos.x != goal.x:
            direction = first
        elif first in (Direction.N, Direction.S) and pos.y != goal.y:
            direction = first
        else:
            direction = second
        nxt = pos.step(direction)
        if level.is_passable(nxt) and nxt not in own:
            corridor.connected = True
            break
        if not level.is_passable(nxt):
            level.carve(nxt)
            own.add(nxt)
            corridor.cells.append(nxt)
        pos = nxt

    if corridor.cells and corridor.cells[0] in set(room.border()):
        level.set_terrain(corridor.cells[0], Terrain.DOOR)
        corridor.door = corridor.cells[0]
    logger.debug(
        "Bridge %d->%d from %s: %d cells, connected=%s", ia, ib, room.center, len(corridor.cells), corridor.connected
    )
    return corridor


def _room_components(level: Level, rooms: Sequence[Room]) -> List[int]:
    labels = [-1] * len(rooms)
    for i, room in enumerate(rooms):
        if labels[i] != -1:
            continue
        component = connected_component(room.center, level.is_passable)
        for j, other in enumerate(rooms):
            if labels[j] == -1 and other.center in component:
                labels[j] = i
    return labels


def _nearest(rooms: Sequence[Room], i: int, candidates: Sequence[int]) -> int:
    return min(candidates, key=lambda j: (squared_distance(rooms[i].center, rooms[j].center), j))


def connect_rooms(level: Level, rooms: Sequence[Room]) -> List[Corridor]:
    """Carve corridors until every room shares room 0's component.

    Straight edges are taken nearest first and skipped when both rooms are
    already connected. Rooms still apart afterwards, such as diagonal
    neighbours with no shared row or column, are bridged with an elbow
    corridor towards the nearest room already joined to room 0. The same room
    list always yields the same network.
    """
    corridors: List[Corridor] = []
    labels = _room_components(level, rooms)
    for i, j in plan_edges(rooms):
        if labels[i] == labels[j]:
            continue
        corridor = carve_corridor(level, rooms[i], rooms[j], i, j)
        if corridor is None:
            continue
        corridors.append(corridor)
        labels = _room_components(level, rooms)

    # each bridge merges at least two components
    for _ in range(len(rooms)):
        joined = [j for j, label in enumerate(labels) if label == labels[0]]
        apart = [i for i, label in enumerate(labels) if label != labels[0]]
        if not apart:
            break
        i = apart[0]
        j = _nearest(rooms, i, joined)
        corridors.append(bridge_room(level, rooms[i], rooms[j], i, j))
        labels = _room_components(level, rooms)
    if len(set(labels)) > 1:
        logger.warning("connect_rooms: %d components remain after bridging", len(set(labels)))
    return corridors


__all__ = [
    "Corridor",
    "bridge_room",
    "carve_corridor",
    "connect_rooms",
    "corridor_direction",
    "corridor_offset",
    "geometry_hash",
    "overlap_range",
    "plan_edges",
]
