"""Level generation pipeline.

extrude rooms -> carve corridors -> prune unreachable rooms -> spawn creatures
-> place stairwells -> drop coins -> scatter loot.

Every random draw comes from a stream derived from ``(seed, domain, depth)``,
so a level depends only on the master seed, its depth and the config.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Set, Tuple

from ..config import WorldConfig
from ..entities import ArchetypeSelector, Creature, default_archetype
from ..geometry import COMPASS, Direction, Point, squared_distance
from ..items import PlacedItem, roll_loot
from ..rng import RNGManager
from .corridors import connect_rooms
from .level import Entrance, Level, Pedestal, Terrain
from .pathfinding import connected_component, find, seek
from .rooms import Room, layout_rooms, sample_room_candidates

logger = logging.getLogger(__name__)

Dungeon = Tuple[Level, ...]


def _floor_neighbours(level: Level, p: Point) -> int:
    return sum(1 for d in COMPASS if p.step(d) in level.floors)


def _is_strict_stair(level: Level, p: Point) -> bool:
    """Dead-end shape: one floor neighbour and walls on exactly one axis."""
    if _floor_neighbours(level, p) != 1:
        return False
    ns = level.is_wall(p.step(Direction.N)) or level.is_wall(p.step(Direction.S))
    ew = level.is_wall(p.step(Direction.E)) or level.is_wall(p.step(Direction.W))
    return ns != ew


def stair_candidates(level: Level, strict: bool = True) -> List[Point]:
    """Wall cells eligible for a stairwell, in sorted order."""
    out = []
    for p in sorted(level.walls):
        if level.on_border(p):
            continue
        if strict:
            if _is_strict_stair(level, p):
                out.append(p)
        elif _floor_neighbours(level, p) == 1:
            out.append(p)
    return out


def farthest_pair(points: Sequence[Point]) -> Optional[Tuple[Point, Point]]:
    """The two points furthest apart, smaller point first. None with fewer than two points."""
    best: Optional[Tuple[Point, Point]] = None
    best_d = -1
    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            d = squared_distance(points[i], points[j])
            if d > best_d:
                best_d = d
                best = (points[i], points[j])
    if best is None:
        return None
    a, b = best
    return (a, b) if a <= b else (b, a)


class LevelBuilder:
    """Builds one level at a time from a config and a master seed."""

    def __init__(self, config: WorldConfig, seed: int, archetypes: ArchetypeSelector = default_archetype) -> None:
        self.config = config
        self.rngs = RNGManager(seed)
        self.archetypes = archetypes

    def build(self, depth: int, first_cid: int = 0) -> Level:
        cfg = self.config
        level = Level(depth=depth, width=cfg.map_width, height=cfg.map_height)
        rooms = layout_rooms(sample_room_candidates(self.rngs.context_rng("rooms", depth), cfg))
        if not rooms:
            w = max(3, min(cfg.max_room_width, cfg.map_width // 2))
            h = max(3, min(cfg.max_room_height, cfg.map_height // 2))
            rooms = [Room(Point((cfg.map_width - w) // 2, (cfg.map_height - h) // 2), w, h)]
            logger.warning("Depth %d: no rooms accepted, using a centred room", depth)

        self.extrude(level, rooms)
        connect_rooms(level, rooms)
        level.rooms = self.prune(level, rooms)
        self.spawn_creatures(level, first_cid)
        self.place_stairs(level, last=depth == cfg.level_count - 1)
        self.drop_coins(level)
        self.scatter_loot(level)
        logger.debug(
            "Depth %d built: %d rooms, %d creatures, %d coins",
            depth,
            len(level.rooms),
            len(level.creatures),
            len(level.coins),
        )
        return level

    @staticmethod
    def extrude(level: Level, rooms: Sequence[Room]) -> None:
        for room in rooms:
            for p in room.interior():
                level.set_terrain(p, Terrain.FLOOR)
            for p in room.border():
                if level.terrain_at(p) is None:
                    level.walls.add(p)

    @staticmethod
    def prune(level: Level, rooms: Sequence[Room]) -> List[Room]:
        """Keep rooms reachable from room 0; clear the cells of everything else."""
        component = connected_component(rooms[0].center, level.is_passable)
        kept = [r for r in rooms if r.center in component]
        if len(kept) == len(rooms):
            return kept
        logger.warning("Depth %d: dropping %d unreachable rooms", level.depth, len(rooms) - len(kept))
        for p in level.passable_cells() - component:
            level.set_terrain(p, None)
        orphans = [w for w in level.walls if not any(n in component for n in (w.step(d) for d in COMPASS))]
        for w in orphans:
            level.walls.discard(w)
        return kept

    def spawn_creatures(self, level: Level, first_cid: int) -> None:
        rng = self.rngs.context_rng("facing", level.depth)
        for index, room in enumerate(level.rooms):
            archetype = self.archetypes(index, level.depth)
            facing = rng.choice(COMPASS)
            level.creatures.append(Creature.spawn(first_cid + index, room.center, facing, archetype))

    def place_stairs(self, level: Level, last: bool) -> None:
        pair = farthest_pair(stair_candidates(level, strict=True))
        if pair is None:
            pair = farthest_pair(stair_candidates(level, strict=False))
            if pair is not None:
                logger.warning("Depth %d: relaxed stairwell rule", level.depth)
        if pair is None:
            first, final = level.rooms[0], level.rooms[-1]
            up, down = first.center, final.center
            if up == down:
                cells = list(first.interior())
                up, down = cells[0], cells[-1]
            pair = (up, down) if up <= down else (down, up)
            logger.warning("Depth %d: stairwells fall back to room centres", level.depth)

        up, down = pair
        if level.depth == 0:
            level.entrance = Entrance(up)
        else:
            level.upstairs = up
        if last:
            level.pedestal = Pedestal(down)
        else:
            level.downstairs = down
        level.carve(up)
        level.carve(down)
        self._clear_stairwells(level)
        bounds = (level.width, level.height)
        if find(down, up, lambda p: not level.is_passable(p), bounds) is None:
            logger.warning("Depth %d: stairwell %s is not reachable from %s", level.depth, down, up)
        logger.debug("Depth %d: up=%s down=%s", level.depth, up, down)

    @staticmethod
    def _clear_stairwells(level: Level) -> None:
        """Move creatures that spawned on a stairwell to a free floor cell of their room."""
        stairs = {level.up_point, level.down_point}
        for creature, room in zip(level.creatures, level.rooms):
            if creature.position not in stairs:
                continue
            taken = stairs | level.creature_positions()
            free = [p for p in room.interior() if p in level.floors and p not in taken]
            if free:
                creature.position = free[0]
            else:
                logger.warning("Depth %d: creature %d stays on a stairwell", level.depth, creature.cid)

    @staticmethod
    def drop_coins(level: Level) -> None:
        up, down = level.up_point, level.down_point
        if up is None or down is None:
            return
        path = seek(down, up, lambda p: not level.is_passable(p), (level.width, level.height))
        stride = len(path) // 3
        if stride == 0:
            return
        occupied = level.creature_positions()
        # path excludes up; the last cell is down
        for k in range(stride, len(path), stride):
            p = path[k - 1]
            if p in level.floors and p not in occupied:
                level.set_terrain(p, Terrain.COIN)

    def scatter_loot(self, level: Level) -> None:
        rng = self.rngs.context_rng("loot", level.depth)
        room = level.rooms[rng.randrange(len(level.rooms))]
        taken: Set[Point] = level.creature_positions() | {p for p in (level.up_point, level.down_point) if p}
        free = [p for p in room.interior() if p in level.floors and p not in taken]
        if not free:
            logger.debug("Depth %d: no free cell for loot", level.depth)
            return
        level.items.append(PlacedItem(rng.choice(free), roll_loot(rng, level.depth)))


def generate(
    level_count: int,
    seed: int,
    config: Optional[WorldConfig] = None,
    archetypes: ArchetypeSelector = default_archetype,
) -> Dungeon:
    """Build every level of a dungeon. Creature ids are unique across levels."""
    if level_count < 1:
        raise ValueError("level_count must be at least 1")
    if config is None:
        config = WorldConfig(level_count=level_count, seed=seed)
    elif config.level_count != level_count:
        config = replace(config, level_count=level_count)
    builder = LevelBuilder(config, seed, archetypes)
    levels: List[Level] = []
    next_cid = 0
    for depth in range(level_count):
        level = builder.build(depth, next_cid)
        next_cid += len(level.creatures)
        levels.append(level)
    logger.info("Generated dungeon: %d levels, seed=%s", level_count, seed)
    return tuple(levels)


__all__ = ["Dungeon", "LevelBuilder", "farthest_pair", "generate", "stair_candidates"]
