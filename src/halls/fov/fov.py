from __future__ import annotations

import logging
from typing import AbstractSet, Set

from ..geometry import Point, bresenham_line, rectangle_perimeter

logger = logging.getLogger(__name__)


def cast_ray(source: Point, target: Point, blockers: AbstractSet[Point]) -> Set[Point]:
    """Cells walked from source (exclusive) towards target, stopping on and including the first blocker."""
    lit: Set[Point] = set()
    for p in bresenham_line(source, target)[1:]:
        lit.add(p)
        if p in blockers:
            break
    return lit


def illuminate(
    source: Point,
    blockers: AbstractSet[Point],
    power: int,
    view_width: int,
    view_height: int,
) -> Set[Point]:
    """
    Cells lit from ``source``.

    A ray is traced to every cell on the perimeter of a rectangle centred on the
    source with half extents ``min(view_width // 2, power)`` and
    ``min(view_height // 2, power)``. Each ray stops at the first blocker, which
    is itself lit. The source cell is not part of the result.
    """
    half_w = max(0, min(view_width // 2, power))
    half_h = max(0, min(view_height // 2, power))
    lit: Set[Point] = set()
    for target in rectangle_perimeter(source, half_w, half_h):
        lit |= cast_ray(source, target, blockers)
    lit.discard(source)
    logger.debug("illuminate %s power=%d: %d cells", source, power, len(lit))
    return lit


__all__ = ["cast_ray", "illuminate"]
