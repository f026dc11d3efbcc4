"""Weapon threat geometry and damage arithmetic."""

from .damage import DamageBreakdown, average_damage, compute_hit, resolve_damage, roll_damage
from .weapons import Weapon, WeaponKind, can_dig, damage_range, enchant, threat_cells

__all__ = [
    "DamageBreakdown",
    "Weapon",
    "WeaponKind",
    "average_damage",
    "can_dig",
    "compute_hit",
    "damage_range",
    "enchant",
    "resolve_damage",
    "roll_damage",
    "threat_cells",
]
