import pytest

from halls.combat.weapons import Weapon, WeaponKind, can_dig, damage_range, enchant, threat_cells
from halls.geometry import Direction, Point, neighbors8

ORIGIN = Point(5, 5)


def test_enchant_is_cumulative_and_keeps_kind():
    sword = Weapon(WeaponKind.SWORD)
    twice = enchant(enchant(sword))
    assert twice.kind is WeaponKind.SWORD
    assert twice.enchant == 2
    assert damage_range(twice) == (4, 10)
    assert twice.name == "+2 sword"


def test_negative_enchant_rejected():
    with pytest.raises(ValueError):
        Weapon(WeaponKind.DAGGER, enchant=-1)


@pytest.mark.parametrize(
    "kind,expected",
    [
        (WeaponKind.SWORD, (2, 8)),
        (WeaponKind.AXE, (2, 6)),
        (WeaponKind.DAGGER, (1, 4)),
        (WeaponKind.WHIP, (1, 3)),
        (WeaponKind.PICK, (1, 4)),
    ],
)
def test_base_ranges(kind, expected):
    assert damage_range(Weapon(kind)) == expected


def test_bare_hands():
    assert damage_range(None) == (1, 2)
    assert threat_cells(ORIGIN, Direction.E, None) == [Point(6, 5)]


@pytest.mark.parametrize("kind", [WeaponKind.SWORD, WeaponKind.DAGGER, WeaponKind.PICK])
def test_single_cell_weapons(kind):
    assert threat_cells(ORIGIN, Direction.SW, Weapon(kind)) == [Point(4, 6)]


def test_axe_sweeps_every_neighbour_regardless_of_facing():
    axe = Weapon(WeaponKind.AXE, enchant=3)
    for facing in (Direction.N, Direction.SE, Direction.NONE):
        assert set(threat_cells(ORIGIN, facing, axe)) == set(neighbors8(ORIGIN))


def test_whip_reaches_three_cells():
    assert threat_cells(ORIGIN, Direction.N, Weapon(WeaponKind.WHIP)) == [Point(5, 4), Point(5, 3), Point(5, 2)]


def test_only_picks_dig():
    assert can_dig(Weapon(WeaponKind.PICK))
    assert not any(can_dig(Weapon(k)) for k in WeaponKind if k is not WeaponKind.PICK)
    assert not can_dig(None)
