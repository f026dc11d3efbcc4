"""
Item variants carried in level item lists and the warrior's inventory.

Items are a closed tagged union of frozen dataclasses; callers dispatch with
``isinstance`` over the ``Item`` members rather than through methods.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Tuple, Union

from .combat.weapons import Weapon, WeaponKind
from .geometry import Point


@dataclass(frozen=True)
class WeaponItem:
    weapon: Weapon

    @property
    def name(self) -> str:
        return self.weapon.name


@dataclass(frozen=True)
class Armor:
    defense: int

    @property
    def name(self) -> str:
        return f"armor [{self.defense}]"


@dataclass(frozen=True)
class Ring:
    vision: int

    @property
    def name(self) -> str:
        return f"ring of sight +{self.vision}"


@dataclass(frozen=True)
class Helm:
    defense: int
    vision: int

    @property
    def name(self) -> str:
        return f"helm [{self.defense}] +{self.vision}"


@dataclass(frozen=True)
class Potion:
    heal: int

    @property
    def name(self) -> str:
        return f"potion ({self.heal})"


@dataclass(frozen=True)
class EnchantScroll:
    @property
    def name(self) -> str:
        return "scroll of enchant weapon"


Item = Union[WeaponItem, Armor, Ring, Helm, Potion, EnchantScroll]


@dataclass(frozen=True)
class PlacedItem:
    """An item lying on a level cell."""

    point: Point
    item: Item


def item_kind(item: Item) -> str:
    if isinstance(item, WeaponItem):
        return "weapon"
    if isinstance(item, Armor):
        return "armor"
    if isinstance(item, Ring):
        return "ring"
    if isinstance(item, Helm):
        return "helm"
    if isinstance(item, Potion):
        return "potion"
    if isinstance(item, EnchantScroll):
        return "scroll"
    raise TypeError(f"Unknown item variant: {item!r}")


def item_to_dict(item: Item) -> dict:
    data: dict = {"kind": item_kind(item), "name": item.name}
    if isinstance(item, WeaponItem):
        data.update(weapon=item.weapon.kind.value, enchant=item.weapon.enchant)
    elif isinstance(item, (Armor, Helm)):
        data["defense"] = item.defense
    if isinstance(item, (Ring, Helm)):
        data["vision"] = item.vision
    if isinstance(item, Potion):
        data["heal"] = item.heal
    return data


# (weight, kind) rows; deeper levels add their depth to numeric stats.
LOOT_TABLE: Tuple[Tuple[int, str], ...] = (
    (4, "potion"),
    (2, "weapon"),
    (2, "armor"),
    (1, "ring"),
    (1, "helm"),
    (2, "scroll"),
)


def roll_loot(rng: random.Random, depth: int) -> Item:
    """Draw one item from the loot table using the level's seed stream."""
    weights: List[int] = [w for w, _ in LOOT_TABLE]
    kind = rng.choices([k for _, k in LOOT_TABLE], weights=weights, k=1)[0]
    if kind == "weapon":
        weapon_kind = rng.choice(list(WeaponKind))
        return WeaponItem(Weapon(weapon_kind, enchant=rng.randint(0, depth)))
    if kind == "armor":
        return Armor(defense=1 + depth // 2 + rng.randint(0, 1))
    if kind == "ring":
        return Ring(vision=1 + rng.randint(0, 1))
    if kind == "helm":
        return Helm(defense=1, vision=1)
    if kind == "scroll":
        return EnchantScroll()
    return Potion(heal=8 + 2 * depth)


__all__ = [
    "Armor",
    "EnchantScroll",
    "Helm",
    "Item",
    "LOOT_TABLE",
    "PlacedItem",
    "Potion",
    "Ring",
    "WeaponItem",
    "item_kind",
    "item_to_dict",
    "roll_loot",
]
