from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .combat.weapons import Weapon
from .geometry import Direction, Point
from .items import Armor, Helm, Item, Ring, item_to_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Archetype:
    name: str
    glyph: str
    hp: int
    attack: int
    defense: int


# Ordered table; selection is a pure function of (room index, depth).
ARCHETYPES: Tuple[Archetype, ...] = (
    Archetype("ghoul", "g", hp=6, attack=2, defense=0),
    Archetype("cave rat", "r", hp=3, attack=1, defense=0),
    Archetype("skeleton", "s", hp=8, attack=3, defense=1),
)

ArchetypeSelector = Callable[[int, int], Archetype]


def default_archetype(room_index: int, depth: int) -> Archetype:
    """Cycle through the table by room, starting one row further per depth, and scale with depth."""
    base = ARCHETYPES[(room_index + depth) % len(ARCHETYPES)]
    return Archetype(
        name=base.name,
        glyph=base.glyph,
        hp=base.hp + 2 * depth,
        attack=base.attack + depth,
        defense=base.defense + depth // 2,
    )


@dataclass
class Creature:
    """A creature owned by its level's creature list; addressed by ``cid``."""

    cid: int
    position: Point
    facing: Direction
    hp: int
    attack: int
    defense: int
    glyph: str = "g"
    archetype: str = "ghoul"

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @classmethod
    def spawn(cls, cid: int, position: Point, facing: Direction, archetype: Archetype) -> "Creature":
        return cls(
            cid=cid,
            position=position,
            facing=facing,
            hp=archetype.hp,
            attack=archetype.attack,
            defense=archetype.defense,
            glyph=archetype.glyph,
            archetype=archetype.name,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.cid,
            "position": list(self.position.to_tuple()),
            "facing": self.facing.name,
            "hp": self.hp,
            "attack": self.attack,
            "defense": self.defense,
            "glyph": self.glyph,
            "archetype": self.archetype,
        }


@dataclass
class Warrior:
    """The player character. Persists for the whole run; only fields mutate."""

    position: Point
    hp: int
    max_hp: int
    facing: Direction = Direction.S
    gold: int = 0
    weapon: Optional[Weapon] = None
    armor: Optional[Armor] = None
    ring: Optional[Ring] = None
    helm: Optional[Helm] = None
    inventory: List[Item] = field(default_factory=list)
    capacity: int = 8
    steps: int = 0

    def __post_init__(self) -> None:
        if self.max_hp <= 0:
            raise ValueError("max_hp must be positive")

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def defense(self) -> int:
        total = 0
        if self.armor is not None:
            total += self.armor.defense
        if self.helm is not None:
            total += self.helm.defense
        return total

    @property
    def vision_bonus(self) -> int:
        total = 0
        if self.ring is not None:
            total += self.ring.vision
        if self.helm is not None:
            total += self.helm.vision
        return total

    def has_room(self) -> bool:
        return len(self.inventory) < self.capacity

    def pick_up(self, item: Item) -> bool:
        if not self.has_room():
            logger.warning("Inventory full: cannot pick up %s", item.name)
            return False
        self.inventory.append(item)
        logger.debug("Picked up %s", item.name)
        return True

    def to_dict(self) -> dict:
        return {
            "position": list(self.position.to_tuple()),
            "facing": self.facing.name,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "gold": self.gold,
            "weapon": None if self.weapon is None else {"kind": self.weapon.kind.value, "enchant": self.weapon.enchant},
            "armor": None if self.armor is None else item_to_dict(self.armor),
            "ring": None if self.ring is None else item_to_dict(self.ring),
            "helm": None if self.helm is None else item_to_dict(self.helm),
            "inventory": [item_to_dict(i) for i in self.inventory],
            "steps": self.steps,
        }


__all__ = [
    "ARCHETYPES",
    "Archetype",
    "ArchetypeSelector",
    "Creature",
    "Warrior",
    "default_archetype",
]
