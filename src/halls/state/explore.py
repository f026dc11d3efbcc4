"""Travel and auto-explore helpers that turn a goal into the next Move."""
from __future__ import annotations

import logging
from collections import deque
from typing import Dict, Optional

from ..geometry import Direction, Point, neighbors8
from .actions import Move
from .world import World, find_path, is_blocked

logger = logging.getLogger(__name__)


def travel_step(world: World, destination: Point) -> Optional[Move]:
    """First step of the shortest route to ``destination``, or None when unreachable or already there."""
    start = world.warrior.position
    path = find_path(start, destination, world)
    if not path:
        return None
    return Move(Direction.between(start, path[0]))


def explore_step(world: World) -> Optional[Move]:
    """Step toward the nearest passable cell that has never been seen.

    Creatures block the search. Returns None when every reachable cell has
    been viewed.
    """
    level = world.level
    start = world.warrior.position
    parents: Dict[Point, Point] = {}
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current != start and current not in level.viewed:
            node = current
            while parents[node] != start:
                node = parents[node]
            return Move(Direction.between(start, node))
        for n in neighbors8(current):
            if n in seen or not level.in_bounds(n) or is_blocked(n, world):
                continue
            seen.add(n)
            parents[n] = current
            queue.append(n)
    logger.debug("explore_step: depth %d fully explored", world.depth)
    return None


__all__ = ["explore_step", "travel_step"]
