"""Deck building, opening hands with mulligans, and turn boundaries."""

import itertools
import random

import pytest

from manasim.config import Config
from manasim.engine.rounds import end_of_turn, start_of_turn
from manasim.engine.setup import (
    MAX_MULLIGANS, build_deck, draw, filter_entries, setup, should_mulligan, shuffle,
)
from manasim.model.card import DeckEntry
from manasim.model.zones import Permanent


def _deck(cards, lands=24, spells=36):
    return [DeckEntry(cards.basic("G"), lands), DeckEntry(cards.spell("Grizzly Bears", "{1}{G}"), spells)]


class TestShuffle:

    def test_returns_new_permutation(self):
        items = [1, 2, 3, 4]
        out = shuffle(items, random.Random(3))
        assert out is not items
        assert sorted(out) == items
        assert items == [1, 2, 3, 4]

    def test_every_permutation_reachable(self):
        rng = random.Random(11)
        seen = {tuple(shuffle([1, 2, 3], rng)) for _ in range(600)}
        assert seen == set(itertools.permutations([1, 2, 3]))


class TestBuildDeck:

    def test_copies_are_distinct_objects(self, cards):
        deck = build_deck([DeckEntry(cards.basic("G"), 3)])
        assert len(deck) == 3
        assert len({id(c) for c in deck}) == 3
        assert {c.name for c in deck} == {"Forest"}

    def test_zero_quantity(self, cards):
        assert build_deck([DeckEntry(cards.basic("G"), 0)]) == []


class TestMulligans:

    @pytest.mark.parametrize("strategy,lands,cheap,expected", [
        ("none", 0, False, False),
        ("conservative", 0, False, True),
        ("conservative", 1, False, False),
        ("balanced", 1, True, False),
        ("balanced", 1, False, True),
        ("aggressive", 5, True, True),
        ("aggressive", 3, False, False),
    ])
    def test_should_mulligan(self, cards, strategy, lands, cheap, expected):
        hand = [cards.basic("G") for _ in range(lands)]
        filler = cards.spell("Bolt", "{R}") if cheap else cards.spell("Ugin", "{8}")
        hand += [filler] * (7 - lands)
        assert should_mulligan(hand, strategy) is expected

    @pytest.mark.parametrize("rule", ["london", "vancouver"])
    def test_landless_deck_mulligans_to_the_limit(self, cards, rule):
        cfg = Config(mulligan_strategy="conservative", mulligan_rule=rule)
        g = setup(cfg, [DeckEntry(cards.spell("Bolt", "{R}"), 60)])
        assert g.mulligans == MAX_MULLIGANS
        assert len(g.hand) == 7 - MAX_MULLIGANS
        assert len(g.hand) + len(g.library) == 60

    def test_commander_first_mulligan_is_free(self, cards):
        cfg = Config(mulligan_strategy="conservative", commander_mode=True)
        g = setup(cfg, [DeckEntry(cards.spell("Bolt", "{R}"), 60)])
        assert len(g.hand) == 7 - (MAX_MULLIGANS - 1)


def test_setup_deals_opening_hand(cards):
    g = setup(Config(), _deck(cards))
    assert len(g.hand) == 7 and len(g.library) == 53
    assert g.opening_hand == [c.name for c in g.hand]
    assert g.turn == 0 and g.mulligans == 0


def test_setup_is_seeded(cards):
    a = setup(Config(seed=5), _deck(cards))
    b = setup(Config(seed=5), _deck(cards))
    assert a.opening_hand == b.opening_hand


def test_draw_from_empty_library(game):
    assert draw(game, 2) == []


class TestTurns:

    def test_first_turn_on_the_play_skips_draw(self, cards, game):
        game.library.extend([cards.basic("G"), cards.basic("U")])
        game.battlefield.append(Permanent(cards.creature(), tapped=True, summoning_sick=True))
        rec = start_of_turn(game)
        assert game.turn == 1 and rec.turn == 1
        assert game.hand == []
        assert game.battlefield[0].tapped is False and game.battlefield[0].summoning_sick is False
        start_of_turn(game)
        assert [c.name for c in game.hand] == ["Forest"]
        assert len(game.log.records) == 2

    def test_commander_draws_on_turn_one(self, cards, game):
        game.cfg.commander_mode = True
        game.library.append(cards.basic("G"))
        rec = start_of_turn(game)
        assert rec.actions == ["Drew: Forest"]

    def test_discard_priciest_spell(self, cards, game):
        game.cfg.hand_size = 2
        forest, bolt, ugin = cards.basic("G"), cards.spell("Bolt", "{R}"), cards.spell("Ugin", "{8}")
        game.hand.extend([forest, bolt, ugin])
        rec = start_of_turn(game)
        end_of_turn(game, rec)
        assert game.hand == [forest, bolt]
        assert game.graveyard == [ugin]
        assert rec.actions[-1] == "Discarded Ugin (hand size)"

    def test_discard_lands_when_flooded(self, cards, game):
        game.cfg.hand_size = 1
        game.cfg.flood_lands = 2
        game.battlefield.extend(cards.perms(cards.basic("G"), cards.basic("G")))
        forest, ugin = cards.basic("G"), cards.spell("Ugin", "{8}")
        game.hand.extend([forest, ugin])
        end_of_turn(game, start_of_turn(game))
        assert game.hand == [ugin]

    def test_mana_vault_stays_tapped_and_hurts(self, cards, game):
        vault = cards.artifact("Mana Vault", "{1}", mana_amount=3, doesnt_untap=True, upkeep_damage=1)
        game.battlefield.extend([Permanent(vault, tapped=True), Permanent(cards.basic("G"), tapped=True)])
        rec = start_of_turn(game)
        assert game.battlefield[0].tapped is True
        assert game.battlefield[1].tapped is False
        assert game.life_lost == 1 and rec.life_loss == 1
        assert rec.actions == ["Mana Vault upkeep damage: -1 life"]

    def test_draw_permanent_draws_each_upkeep(self, cards, game):
        arena = cards.draw_spell("Phyrexian Arena", "{1}{B}{B}", per_turn=1.0)
        game.battlefield.append(Permanent(arena))
        game.library.extend([cards.basic("G"), cards.basic("U"), cards.basic("B")])
        game.turn = 1
        rec = start_of_turn(game)
        assert rec.actions == ["Phyrexian Arena: drew 1 card", "Drew: Island"]
        assert len(game.hand) == 2

    def test_fractional_draws_average_out(self, cards, game):
        engine = cards.draw_spell("Howling Mine", "{2}", per_turn=1.5)
        game.battlefield.append(Permanent(engine))
        game.library.extend(cards.basic("G") for _ in range(400))
        for _ in range(100):
            start_of_turn(game)
        # 100 upkeep draws of 1 or 2, plus 99 normal draws
        extra = len(game.hand) - 99
        assert 100 <= extra <= 200
        assert 120 < extra < 180

    def test_disabled_draw_permanent(self, cards, game):
        arena = cards.draw_spell("Phyrexian Arena", "{1}{B}{B}", per_turn=1.0)
        game.cfg.disabled_draw_spells = frozenset({"Phyrexian Arena"})
        game.battlefield.append(Permanent(arena))
        game.library.append(cards.basic("G"))
        assert start_of_turn(game).actions == []


class TestCustomMulligan:

    def _hand(self, cards, lands, filler_cost="{5}"):
        return [cards.basic("G") for _ in range(lands)] + \
            [cards.spell("Filler", filler_cost) for _ in range(7 - lands)]

    @pytest.mark.parametrize("kw,lands,expected", [
        ({}, 0, True),
        ({"mull_zero_lands": False}, 0, False),
        ({}, 7, True),
        ({"mull_all_lands": False}, 7, False),
        ({"mull_min_lands": 3}, 2, True),
        ({"mull_min_lands": 3}, 3, False),
        ({"mull_max_lands": 4}, 5, True),
        ({"mull_max_lands": 4}, 4, False),
        ({}, 3, False),
    ])
    def test_land_rules(self, cards, kw, lands, expected):
        rules = Config(mulligan_strategy="custom", **kw)
        assert should_mulligan(self._hand(cards, lands), "custom", rules) is expected

    def test_no_cheap_play(self, cards):
        rules = Config(mulligan_strategy="custom", mull_no_play_cmc=2)
        assert should_mulligan(self._hand(cards, 3), "custom", rules) is True
        assert should_mulligan(self._hand(cards, 3, "{1}{G}"), "custom", rules) is False

    def test_setup_uses_custom_rules(self, cards):
        cfg = Config(mulligan_strategy="custom", mull_zero_lands=True)
        g = setup(cfg, [DeckEntry(cards.spell("Bolt", "{R}"), 60)])
        assert g.mulligans == MAX_MULLIGANS


def test_filter_entries_drops_categories_and_names(cards):
    entries = [
        DeckEntry(cards.basic("G"), 20),
        DeckEntry(cards.artifact("Sol Ring", "{1}"), 1),
        DeckEntry(cards.artifact("Mind Stone", "{2}"), 1),
        DeckEntry(cards.creature(), 4),
        DeckEntry(cards.ritual(), 2),
        DeckEntry(cards.draw_spell(), 2),
        DeckEntry(cards.spell("Bolt", "{R}"), 4),
    ]
    cfg = Config(disabled_artifacts=frozenset({"Mind Stone"}), include_creatures=False,
                 include_rituals=False, disabled_draw_spells=frozenset({"Divination"}))
    kept = [e.card.name for e in filter_entries(cfg, entries)]
    assert kept == ["Forest", "Sol Ring", "Bolt"]
    assert len(filter_entries(Config(), entries)) == len(entries)
