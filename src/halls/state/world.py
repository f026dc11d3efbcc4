from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, Union

from ..combat.weapons import Weapon, WeaponKind
from ..config import WorldConfig
from ..dungeon.builder import Dungeon, generate
from ..dungeon.level import Level
from ..dungeon.pathfinding import seek
from ..entities import ArchetypeSelector, Creature, Warrior, default_archetype
from ..fov.fov import illuminate
from ..fov.memory import remember, viewed_set
from ..geometry import Point

logger = logging.getLogger(__name__)

EvolveHook = Callable[["World"], None]


def no_evolve(world: "World") -> None:
    """Default evolve hook: the dungeon does not change over time."""
    return None


@dataclass
class World:
    """Everything the turn protocol reads and mutates."""

    config: WorldConfig
    seed: int
    dungeon: Dungeon
    warrior: Warrior
    depth: int = 0
    age: int = 0
    illuminated: Set[Point] = field(default_factory=set)
    dead: bool = False
    escaped: bool = False
    evolve: EvolveHook = no_evolve

    @property
    def level(self) -> Level:
        return self.dungeon[self.depth]

    @property
    def terminal(self) -> bool:
        return self.dead or self.escaped


def vision_power(world: World) -> int:
    return world.config.base_vision + world.warrior.vision_bonus


def refresh_visibility(world: World) -> Set[Point]:
    """Recompute the lit set around the warrior and add it to the level memory.

    The warrior's own cell is always lit.
    """
    level = world.level
    lit = illuminate(
        world.warrior.position,
        level.blockers(),
        vision_power(world),
        world.config.view_width,
        world.config.view_height,
    )
    lit.add(world.warrior.position)
    world.illuminated = lit
    remember(level, lit)
    return lit


def new_world(
    config: WorldConfig,
    seed: Optional[int] = None,
    archetypes: ArchetypeSelector = default_archetype,
    evolve: EvolveHook = no_evolve,
) -> World:
    """Generate a dungeon and stand a fresh warrior on the entrance."""
    seed = config.seed if seed is None else seed
    dungeon = generate(config.level_count, seed, config, archetypes)
    start = dungeon[0].up_point or dungeon[0].fallback_point()
    warrior = Warrior(
        position=start,
        hp=config.warrior_hp,
        max_hp=config.warrior_hp,
        weapon=Weapon(WeaponKind.SWORD),
        capacity=config.inventory_capacity,
    )
    world = World(config=config, seed=seed, dungeon=dungeon, warrior=warrior, evolve=evolve)
    refresh_visibility(world)
    logger.info("New world: seed=%s levels=%d start=%s", seed, len(dungeon), start)
    return world


# Queries


def entity_at(point: Point, world: World) -> Optional[Union[Warrior, Creature]]:
    if world.warrior.position == point:
        return world.warrior
    return world.level.creature_at(point)


def is_blocked(point: Point, world: World) -> bool:
    """True for impassable terrain or a cell held by a creature."""
    level = world.level
    return not level.is_passable(point) or level.creature_at(point) is not None


def find_path(src: Point, dst: Point, world: World) -> List[Point]:
    """Steps from src (exclusive) to dst (inclusive) on the current level; [] when there is no route."""
    level = world.level
    return seek(dst, src, lambda p: is_blocked(p, world), (level.width, level.height))


def illuminated_set(world: World) -> Set[Point]:
    return set(world.illuminated)


__all__ = [
    "EvolveHook",
    "World",
    "entity_at",
    "find_path",
    "illuminated_set",
    "is_blocked",
    "new_world",
    "no_evolve",
    "refresh_visibility",
    "viewed_set",
    "vision_power",
]
