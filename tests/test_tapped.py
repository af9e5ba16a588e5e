"""Enters-tapped policy per land archetype."""

from manasim.engine.tapped import check_land_subtypes, does_land_enter_tapped
from manasim.model.card import LandArchetype as LA


def test_non_land_never_enters_tapped(cards):
    assert does_land_enter_tapped(cards.spell("Opt", "{U}"), [], 1) is False


def test_plain_land_untapped_unless_flagged(cards):
    assert does_land_enter_tapped(cards.basic("G"), [], 1) is False
    tapland = cards.land("Jungle Hollow", ("B", "G"), enters_tapped_always=True)
    assert does_land_enter_tapped(tapland, [], 1) is True


def test_shock_and_mdfc_report_tapped(cards):
    shock = cards.land("Watery Grave", ("U", "B"), LA.SHOCK)
    mdfc = cards.land("Emeria's Call", ("W",), LA.MDFC)
    assert does_land_enter_tapped(shock, [], 1) is True
    assert does_land_enter_tapped(mdfc, [], 1) is True


def test_fast_land_threshold(cards):
    fast = cards.land("Darkslick Shores", ("U", "B"), LA.FAST)
    two = cards.perms(cards.basic("U"), cards.basic("B"))
    three = two + cards.perms(cards.basic("G"))
    assert does_land_enter_tapped(fast, two, 3) is False
    assert does_land_enter_tapped(fast, three, 4) is True


def test_slow_land_threshold(cards):
    slow = cards.land("Deathcap Glade", ("B", "G"), LA.SLOW)
    assert does_land_enter_tapped(slow, cards.perms(cards.basic("B")), 2) is True
    assert does_land_enter_tapped(slow, cards.perms(cards.basic("B"), cards.basic("G")), 3) is False


def test_battle_land_counts_basics_only(cards):
    battle = cards.land("Prairie Stream", ("W", "U"), LA.BATTLE, subtypes=("Plains", "Island"))
    nonbasic = cards.land("Hallowed Fountain", ("W", "U"), LA.SHOCK, subtypes=("Plains", "Island"))
    assert does_land_enter_tapped(battle, cards.perms(cards.basic("W"), nonbasic), 3) is True
    assert does_land_enter_tapped(battle, cards.perms(cards.basic("W"), cards.basic("U")), 3) is False


def test_check_land_uses_subtypes(cards):
    check = cards.land("Glacial Fortress", ("W", "U"), LA.CHECK)
    assert check_land_subtypes(check) == ["Plains", "Island"]
    assert does_land_enter_tapped(check, cards.perms(cards.basic("G")), 2) is True
    assert does_land_enter_tapped(check, cards.perms(cards.basic("U")), 2) is False


def test_check_land_explicit_types(cards):
    check = cards.land("Odd Check", ("W", "U"), LA.CHECK, check_types=("Forest",))
    assert does_land_enter_tapped(check, cards.perms(cards.basic("U")), 2) is True
    assert does_land_enter_tapped(check, cards.perms(cards.basic("G")), 2) is False


def test_crowd_land_depends_on_commander(cards):
    crowd = cards.land("Morphic Pool", ("U", "B"), LA.CROWD)
    assert does_land_enter_tapped(crowd, [], 1) is True
    assert does_land_enter_tapped(crowd, [], 1, commander_mode=True) is False
