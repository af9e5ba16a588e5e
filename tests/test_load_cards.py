"""CSV decklist loading."""

import os

import pytest

from manasim.io.load_cards import _as_bool, _as_int, _as_tuple, load_deck, row_to_card
from manasim.model.card import (
    Card, DrawSpell, Exploration, Land, LandArchetype as LA, ManaArtifact, ManaCreature,
    RampSpell, Ritual,
)

SAMPLE_DECK = os.path.join(os.path.dirname(__file__), "..", "decks", "sample_deck.csv")


def test_coercion_helpers():
    assert _as_int(" 3 ") == 3
    assert _as_int("x", 7) == 7
    assert _as_bool("Yes") is True and _as_bool("0") is False
    assert _as_bool("", True) is True
    assert _as_tuple("W| U |") == ("W", "U")
    assert _as_tuple(None) == ()


def test_row_types():
    assert isinstance(row_to_card({"name": "Forest", "type": "land"}), Land)
    assert isinstance(row_to_card({"name": "Sol Ring", "type": "artifact"}), ManaArtifact)
    assert isinstance(row_to_card({"name": "Elf", "type": "creature"}), ManaCreature)
    assert isinstance(row_to_card({"name": "Azusa", "type": "exploration"}), Exploration)
    assert isinstance(row_to_card({"name": "Cultivate", "type": "ramp"}), RampSpell)
    assert isinstance(row_to_card({"name": "Dark Ritual", "type": "ritual"}), Ritual)
    assert type(row_to_card({"name": "Goyf", "type": "planeswalker?"})) is Card


def test_unknown_archetype_is_plain():
    land = row_to_card({"name": "Odd Land", "type": "land", "archetype": "mystery"})
    assert land.archetype is LA.PLAIN


def test_nameless_row_rejected():
    with pytest.raises(ValueError):
        row_to_card({"name": "", "type": "land"})


def test_load_deck(tmp_path):
    path = tmp_path / "deck.csv"
    path.write_text(
        "Name,Quantity,Type,CMC,Mana_Cost,Produces,Archetype,Subtypes,Fetch_Colors,Fetch_Type,Lifeloss\n"
        "Watery Grave,2,land,0,,U|B,shock,Island|Swamp,,,\n"
        "Polluted Delta,1,land,0,,,fetch,,U|B,classic,\n"
        "Ancient Tomb,1,land,0,,C,always_painful,,,,2\n"
        "Counterspell,0,spell,2,{U}{U},,,,,,\n"
        "Opt,4,spell,1,{U},,,,,,\n",
        encoding="utf-8",
    )
    deck = load_deck(str(path))
    assert [(e.card.name, e.quantity) for e in deck] == [
        ("Watery Grave", 2), ("Polluted Delta", 1), ("Ancient Tomb", 1), ("Opt", 4),
    ]
    grave, delta, tomb, opt = (e.card for e in deck)
    assert grave.is_shock and grave.produces == ("U", "B") and grave.subtypes == ("Island", "Swamp")
    assert grave.lifeloss is None and grave.enters_tapped_always is None
    assert delta.is_fetch and delta.fetch_ability.colors == ("U", "B")
    assert tomb.lifeloss == 2
    assert opt.mana_cost == "{U}" and opt.cmc == 1


def test_sample_deck_has_sixty_cards():
    deck = load_deck(SAMPLE_DECK)
    assert sum(e.quantity for e in deck) == 60
    by_name = {e.card.name: e.card for e in deck}
    assert by_name["Sol Ring"].mana_amount == 2
    assert by_name["Lotus Petal"].burst is True
    assert by_name["Simic Growth Chamber"].enters_tapped_always is True
    assert by_name["Azusa, Lost but Seeking"].lands_per_turn == 3
    assert by_name["Cultivate"].lands_to_hand == 1


def test_supplemental_columns():
    vault = row_to_card({"name": "Mana Vault", "type": "artifact", "mana_amount": "3",
                         "doesnt_untap": "true", "upkeep_damage": "1"})
    assert vault.doesnt_untap is True and vault.upkeep_damage == 1 and vault.mana_amount == 3
    cradle = row_to_card({"name": "Gaea's Cradle", "type": "land", "produces": "G",
                          "archetype": "turn_scaling", "mana_floor": "0", "is_legendary": "yes"})
    assert cradle.archetype is LA.TURN_SCALING and cradle.mana_floor == 0 and cradle.is_legendary
    arena = row_to_card({"name": "Phyrexian Arena", "type": "draw", "per_turn": "1"})
    assert isinstance(arena, DrawSpell) and arena.per_turn == 1.0 and arena.stays_on_battlefield
    div = row_to_card({"name": "Divination", "type": "draw", "cards_drawn": "2", "per_turn": "x"})
    assert div.cards_drawn == 2 and not div.stays_on_battlefield
    assert row_to_card({"name": "Opt"}).is_legendary is False
