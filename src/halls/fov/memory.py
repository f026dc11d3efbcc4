"""Auto-map memory: what the warrior has seen on each level."""
from __future__ import annotations

from typing import AbstractSet, Set

from ..dungeon.level import Level
from ..geometry import neighbors8


def remember(level: Level, lit: AbstractSet) -> None:
    """Union ``lit`` into the level's viewed set. Viewed cells are never forgotten."""
    level.viewed |= set(lit)


def viewed_set(level: Level, reveal_all: bool = False) -> Set:
    """Cells to draw as remembered.

    With ``reveal_all`` the result also holds every terrain cell next to a
    viewed passable cell. This is a read-time view only; ``level.viewed`` is
    left untouched.
    """
    viewed = set(level.viewed)
    if not reveal_all:
        return viewed
    extra = set()
    for p in viewed:
        if not level.is_passable(p):
            continue
        for n in neighbors8(p):
            if level.terrain_at(n) is not None:
                extra.add(n)
    return viewed | extra


__all__ = ["remember", "viewed_set"]
