from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..rng import stable_hash
from .weapons import Weapon, damage_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DamageBreakdown:
    """Details of a resolved hit.

    Attributes:
        rolled: The weapon damage before defense.
        defense: The defender's defense value.
        final: The damage applied (never negative).
    """

    rolled: int
    defense: int
    final: int


def sample_range(seed_a: int, seed_b: int, bounds: Tuple[int, int]) -> int:
    """Deterministically pick a value in the inclusive range from two integer seeds."""
    low, high = sorted(bounds)
    span = high - low + 1
    return low + stable_hash("damage", seed_a, seed_b) % span


def roll_damage(weapon: Optional[Weapon], seed_a: int, seed_b: int) -> int:
    return sample_range(seed_a, seed_b, damage_range(weapon))


def average_damage(weapon: Optional[Weapon]) -> float:
    """Midpoint of the sorted damage range, used for display and estimates."""
    low, high = sorted(damage_range(weapon))
    return (low + high) / 2


def resolve_damage(amount: float, defense: int) -> int:
    """Damage after defense, floored at zero."""
    return max(0, int(amount) - max(0, defense))


def compute_hit(weapon: Optional[Weapon], defense: int, seed_a: int, seed_b: int) -> DamageBreakdown:
    rolled = roll_damage(weapon, seed_a, seed_b)
    final = resolve_damage(rolled, defense)
    logger.debug("Hit with %s: rolled=%d defense=%d final=%d", weapon.name if weapon else "fists", rolled, defense, final)
    return DamageBreakdown(rolled=rolled, defense=defense, final=final)


__all__ = [
    "DamageBreakdown",
    "average_damage",
    "compute_hit",
    "resolve_damage",
    "roll_damage",
    "sample_range",
]
