"""Turn protocol.

``apply_action`` resolves one warrior action and then lets the level react:

1. a pick digs into a non-border wall and the warrior steps onto it;
2. otherwise any creature on the destination or in the weapon's threat cells
   is attacked and the warrior stays put;
3. otherwise the warrior moves if the cell is passable, then stairwells, the
   pedestal and the entrance are resolved, then coin and item pickup.

Every action ages the world by one and fires the evolve hook every
``evolve_interval`` actions. Creatures then walk along their facing, dead
creatures are purged and a warrior at hp <= 0 is reported dead. The world is
mutated in place and returned with the ordered events.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from ..combat.damage import compute_hit, resolve_damage
from ..combat.weapons import can_dig, enchant, threat_cells
from ..dungeon.level import Level, Terrain
from ..entities import Creature
from ..events import Event, EventKind
from ..geometry import Direction, Point
from ..items import Armor, EnchantScroll, Helm, Potion, Ring, WeaponItem, item_kind
from ..rng import stable_hash
from .actions import Action, Move, UseItem, Wait
from .world import World, refresh_visibility

logger = logging.getLogger(__name__)


def _pt(p: Point) -> list:
    return [p.x, p.y]


def _hit_seeds(world: World, target_id: int) -> Tuple[int, int]:
    return stable_hash("hit", world.seed, world.depth), world.age * 65536 + target_id


def apply_action(action: Action, world: World) -> Tuple[World, List[Event]]:
    if world.terminal:
        logger.debug("Ignoring %r: run is over", action)
        return world, []

    events: List[Event] = []
    if isinstance(action, Move) and action.direction is not Direction.NONE:
        _warrior_move(world, action.direction, events)
    elif isinstance(action, UseItem):
        use_item(world, action.index)
    elif not isinstance(action, (Move, Wait)):
        raise TypeError(f"Unknown action: {action!r}")

    world.age += 1
    if world.age % world.config.evolve_interval == 0:
        logger.debug("Evolve hook at age %d", world.age)
        world.evolve(world)

    if not world.escaped:
        _creatures_step(world, events)
        events.extend(purge(world.level))
        if world.warrior.hp <= 0 and not world.dead:
            world.dead = True
            events.append(Event(EventKind.PLAYER_DEATH, {"depth": world.depth, "age": world.age}))
            logger.info("Warrior died on depth %d at age %d", world.depth, world.age)

    refresh_visibility(world)
    return world, events


def _warrior_move(world: World, direction: Direction, events: List[Event]) -> None:
    warrior = world.warrior
    level = world.level
    warrior.facing = direction
    dest = warrior.position.step(direction)

    if level.is_wall(dest) and can_dig(warrior.weapon) and not level.on_border(dest):
        level.carve(dest)
        warrior.position = dest
        warrior.steps += 1
        logger.debug("Dug through %s", dest)
        return

    threatened = set(threat_cells(warrior.position, direction, warrior.weapon))
    threatened.add(dest)
    targets = [c for c in level.creatures if c.position in threatened]
    if targets:
        for creature in targets:
            _strike(world, creature, events)
        return

    if not level.is_passable(dest):
        logger.debug("Bumped into %s", dest)
        return
    warrior.position = dest
    warrior.steps += 1
    _resolve_landing(world, events)
    _pickup(world, events)


def _strike(world: World, creature: Creature, events: List[Event]) -> None:
    seed_a, seed_b = _hit_seeds(world, creature.cid)
    hit = compute_hit(world.warrior.weapon, creature.defense, seed_a, seed_b)
    creature.hp -= hit.final
    events.append(
        Event(
            EventKind.ATTACK,
            {"target": creature.cid, "rolled": hit.rolled, "damage": hit.final, "hp": creature.hp},
        )
    )


def _resolve_landing(world: World, events: List[Event]) -> None:
    level = world.level
    pos = world.warrior.position

    if level.upstairs is not None and pos == level.upstairs and world.depth > 0:
        world.depth -= 1
        upper = world.level
        world.warrior.position = upper.downstairs or upper.fallback_point()
        if upper.downstairs is None:
            logger.warning("Depth %d has no downstairs; landing on %s", world.depth, world.warrior.position)
        events.append(Event(EventKind.ASCEND, {"depth": world.depth}))
        logger.info("Ascended to depth %d", world.depth)
        return

    if level.downstairs is not None and pos == level.downstairs and world.depth + 1 < len(world.dungeon):
        world.depth += 1
        lower = world.level
        landing = lower.up_point
        world.warrior.position = landing or lower.fallback_point()
        if landing is None:
            logger.warning("Depth %d has no upstairs; landing on %s", world.depth, world.warrior.position)
        events.append(Event(EventKind.DESCEND, {"depth": world.depth}))
        logger.info("Descended to depth %d", world.depth)
        return

    if level.pedestal is not None and pos == level.pedestal.point and not level.pedestal.taken:
        level.pedestal.taken = True
        entrance = world.dungeon[0].entrance
        if entrance is not None:
            entrance.opened = True
        events.append(Event(EventKind.ARTIFACT_TAKEN, {"depth": world.depth}))
        logger.info("Crystal taken on depth %d", world.depth)
        return

    if level.entrance is not None and pos == level.entrance.point and level.entrance.opened:
        world.escaped = True
        events.append(Event(EventKind.HALLS_ESCAPED, {"age": world.age + 1, "gold": world.warrior.gold}))
        logger.info("Escaped the halls with %d gold", world.warrior.gold)


def _pickup(world: World, events: List[Event]) -> None:
    level = world.level
    warrior = world.warrior
    pos = warrior.position
    if pos in level.coins:
        level.set_terrain(pos, Terrain.FLOOR)
        warrior.gold += world.config.coin_value
        events.append(Event(EventKind.PICKUP_COIN, {"point": _pt(pos), "amount": world.config.coin_value}))
    placed = level.item_at(pos)
    if placed is not None and warrior.pick_up(placed.item):
        level.items.remove(placed)
        events.append(
            Event(EventKind.PICKUP_ITEM, {"point": _pt(pos), "kind": item_kind(placed.item), "name": placed.item.name})
        )


def use_item(world: World, index: int) -> bool:
    """Equip, drink or read the inventory item at ``index``. Returns False when nothing happened."""
    warrior = world.warrior
    if not 0 <= index < len(warrior.inventory):
        logger.debug("UseItem: no item at %d", index)
        return False
    item = warrior.inventory[index]

    if isinstance(item, WeaponItem):
        previous = warrior.weapon
        warrior.weapon = item.weapon
        _swap_back(warrior.inventory, index, WeaponItem(previous) if previous is not None else None)
    elif isinstance(item, Armor):
        previous_armor = warrior.armor
        warrior.armor = item
        _swap_back(warrior.inventory, index, previous_armor)
    elif isinstance(item, Ring):
        previous_ring = warrior.ring
        warrior.ring = item
        _swap_back(warrior.inventory, index, previous_ring)
    elif isinstance(item, Helm):
        previous_helm = warrior.helm
        warrior.helm = item
        _swap_back(warrior.inventory, index, previous_helm)
    elif isinstance(item, Potion):
        warrior.hp = min(warrior.max_hp, warrior.hp + item.heal)
        del warrior.inventory[index]
    elif isinstance(item, EnchantScroll):
        if warrior.weapon is None:
            logger.debug("UseItem: nothing to enchant")
            return False
        warrior.weapon = enchant(warrior.weapon)
        del warrior.inventory[index]
    else:
        raise TypeError(f"Unknown item variant: {item!r}")
    logger.debug("Used %s", item.name)
    return True


def _swap_back(inventory: list, index: int, previous) -> None:
    if previous is None:
        del inventory[index]
    else:
        inventory[index] = previous


def _creatures_step(world: World, events: List[Event]) -> None:
    level = world.level
    warrior = world.warrior
    for creature in level.creatures:
        if not creature.alive or creature.facing is Direction.NONE:
            continue
        nxt = creature.position.step(creature.facing)
        if nxt == warrior.position:
            damage = resolve_damage(creature.attack, warrior.defense)
            warrior.hp -= damage
            events.append(
                Event(EventKind.DEFEND, {"attacker": creature.cid, "damage": damage, "hp": warrior.hp})
            )
            if warrior.hp <= 0:
                break
        elif not _creature_can_enter(level, nxt):
            creature.facing = creature.facing.clockwise()
        else:
            creature.position = nxt


def _creature_can_enter(level: Level, p: Point) -> bool:
    """Creatures keep to plain floor: no doors, coins or stairwells, and one per cell."""
    if p not in level.floors or p in (level.up_point, level.down_point):
        return False
    return level.creature_at(p) is None


def purge(level: Level) -> List[Event]:
    """Drop creatures at hp <= 0, one kill event each; survivors keep their order."""
    events: List[Event] = []
    survivors: List[Creature] = []
    for creature in level.creatures:
        if creature.hp <= 0:
            events.append(
                Event(
                    EventKind.KILL_ENEMY,
                    {"id": creature.cid, "archetype": creature.archetype, "point": _pt(creature.position)},
                )
            )
        else:
            survivors.append(creature)
    if events:
        logger.debug("Purged %d creatures on depth %d", len(events), level.depth)
    level.creatures = survivors
    return events


__all__ = ["apply_action", "purge", "use_item"]
