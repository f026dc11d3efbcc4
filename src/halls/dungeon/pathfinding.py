"""Breadth-first grid search.

Both entry points expand neighbours in the fixed ``COMPASS`` order
(N, NE, E, SE, S, SW, W, NW), so equal-length routes always resolve the same
way. With uniform step cost, BFS returns a shortest route in move count.
An unreachable goal is a normal outcome, reported as an empty result.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..geometry import Point, is_adjacent, neighbors8

logger = logging.getLogger(__name__)

Blocked = Callable[[Point], bool]
Bounds = Tuple[int, int]

# Hard cap on expansions when no bounds are given.
MAX_EXPANSIONS = 250_000


def _in_bounds(p: Point, bounds: Optional[Bounds]) -> bool:
    if bounds is None:
        return True
    width, height = bounds
    return 0 <= p.x < width and 0 <= p.y < height


def _check_bounds(bounds: Optional[Bounds]) -> None:
    if bounds is not None and (bounds[0] <= 0 or bounds[1] <= 0):
        raise ValueError(f"bounds must be positive, got {bounds!r}")


def _trace(parents: Dict[Point, Optional[Point]], end: Point) -> List[Point]:
    path: List[Point] = []
    node: Optional[Point] = end
    while node is not None and parents[node] is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


def find(goal: Point, start: Point, is_blocked: Blocked, bounds: Optional[Bounds] = None) -> Optional[List[Point]]:
    """Route (start exclusive) to the first expanded point that neighbours ``goal``.

    Returns [] when ``start`` already neighbours the goal and None when no
    neighbour of the goal can be reached. The goal itself is never entered.
    The level builder uses it to confirm the down stairwell can be reached.
    """
    _check_bounds(bounds)
    parents: Dict[Point, Optional[Point]] = {start: None}
    queue = deque([start])
    expansions = 0
    while queue:
        current = queue.popleft()
        if is_adjacent(current, goal):
            return _trace(parents, current)
        expansions += 1
        if bounds is None and expansions > MAX_EXPANSIONS:
            logger.warning("find: expansion cap reached searching %s -> %s", start, goal)
            return None
        for n in neighbors8(current):
            if n in parents or n == goal or not _in_bounds(n, bounds) or is_blocked(n):
                continue
            parents[n] = current
            queue.append(n)
    return None


def seek(goal: Point, start: Point, is_blocked: Blocked, bounds: Optional[Bounds] = None) -> List[Point]:
    """Shortest route from ``start`` (exclusive) to ``goal`` (inclusive).

    The goal cell is admitted even when ``is_blocked`` rejects it, so a route can
    end on a creature or a closed entrance. Returns [] when start == goal or no
    route exists.
    """
    _check_bounds(bounds)
    if start == goal:
        return []
    parents: Dict[Point, Optional[Point]] = {start: None}
    queue = deque([start])
    expansions = 0
    while queue:
        current = queue.popleft()
        expansions += 1
        if bounds is None and expansions > MAX_EXPANSIONS:
            logger.warning("seek: expansion cap reached searching %s -> %s", start, goal)
            return []
        for n in neighbors8(current):
            if n in parents or not _in_bounds(n, bounds):
                continue
            if n == goal:
                parents[n] = current
                return _trace(parents, n)
            if is_blocked(n):
                continue
            parents[n] = current
            queue.append(n)
    logger.debug("seek: no route %s -> %s", start, goal)
    return []


def connected_component(start: Point, is_passable: Callable[[Point], bool]) -> Set[Point]:
    """Every cell 8-connected to ``start`` through passable cells (start included when passable)."""
    if not is_passable(start):
        return set()
    seen: Set[Point] = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for n in neighbors8(current):
            if n not in seen and is_passable(n):
                seen.add(n)
                queue.append(n)
    return seen


__all__ = ["connected_component", "find", "seek"]
