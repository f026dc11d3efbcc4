from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..geometry import COMPASS, Direction, Point


class WeaponKind(str, Enum):
    SWORD = "sword"
    AXE = "axe"
    DAGGER = "dagger"
    WHIP = "whip"
    PICK = "pick"


# Inclusive (low, high) damage before enchantment.
BASE_DAMAGE: Dict[WeaponKind, Tuple[int, int]] = {
    WeaponKind.SWORD: (2, 8),
    WeaponKind.AXE: (2, 6),
    WeaponKind.DAGGER: (1, 4),
    WeaponKind.WHIP: (1, 3),
    WeaponKind.PICK: (1, 4),
}
UNARMED_DAMAGE: Tuple[int, int] = (1, 2)
WHIP_REACH = 3


@dataclass(frozen=True)
class Weapon:
    """A weapon kind plus a flat enchantment bonus.

    Enchanting never nests: ``enchant(enchant(sword))`` is still a sword, with bonus 2.
    """

    kind: WeaponKind
    enchant: int = 0

    def __post_init__(self) -> None:
        if self.enchant < 0:
            raise ValueError("enchant must be >= 0")

    @property
    def name(self) -> str:
        if self.enchant:
            return f"+{self.enchant} {self.kind.value}"
        return self.kind.value


def enchant(weapon: Weapon, amount: int = 1) -> Weapon:
    return Weapon(weapon.kind, weapon.enchant + amount)


def can_dig(weapon: Optional[Weapon]) -> bool:
    """Only picks break walls."""
    return weapon is not None and weapon.kind is WeaponKind.PICK


def damage_range(weapon: Optional[Weapon]) -> Tuple[int, int]:
    if weapon is None:
        return UNARMED_DAMAGE
    low, high = BASE_DAMAGE[weapon.kind]
    return (low + weapon.enchant, high + weapon.enchant)


def threat_cells(position: Point, facing: Direction, weapon: Optional[Weapon]) -> List[Point]:
    """Cells struck by one attack from ``position`` facing ``facing``.

    Axes sweep all 8 neighbours regardless of facing; whips reach three cells
    ahead; everything else, including bare hands, hits the cell directly ahead.
    """
    if weapon is not None and weapon.kind is WeaponKind.AXE:
        return [position.step(d) for d in COMPASS]
    if facing is Direction.NONE:
        return []
    if weapon is not None and weapon.kind is WeaponKind.WHIP:
        return [position.step(facing, n) for n in range(1, WHIP_REACH + 1)]
    return [position.step(facing)]


__all__ = [
    "BASE_DAMAGE",
    "UNARMED_DAMAGE",
    "Weapon",
    "WeaponKind",
    "can_dig",
    "damage_range",
    "enchant",
    "threat_cells",
]
