# src/manasim/engine/setup.py
from __future__ import annotations
import random
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from manasim.config import Config
from manasim.model.card import (
    Card, DeckEntry, DrawSpell, Exploration, ManaArtifact, ManaCreature, RampSpell, Ritual,
)
from manasim.model.game import GameState as Game
from manasim.model.zones import Zones

MAX_MULLIGANS = 6

# card variant -> (include flag, disabled-names field) on Config
_CATEGORIES = (
    (ManaArtifact, "include_artifacts", "disabled_artifacts"),
    (ManaCreature, "include_creatures", "disabled_creatures"),
    (Exploration, "include_exploration", "disabled_exploration"),
    (RampSpell, "include_ramp_spells", "disabled_ramp_spells"),
    (Ritual, "include_rituals", "disabled_rituals"),
    (DrawSpell, "include_draw_spells", "disabled_draw_spells"),
)


# ---------------- Helpers (deck / draw) ----------------
def filter_entries(cfg, entries: Iterable[DeckEntry]) -> List[DeckEntry]:
    """Drop switched-off categories and disabled card names; lands and plain spells always stay."""
    out = []
    for e in entries:
        keep = True
        for cls, include, disabled in _CATEGORIES:
            if isinstance(e.card, cls):
                keep = getattr(cfg, include, True) and e.card.name not in getattr(cfg, disabled, ())
                break
        if keep:
            out.append(e)
    return out


def shuffle(items: Iterable, rng: Optional[random.Random] = None) -> list:
    """Return a shuffled copy; the input is left alone."""
    out = list(items)
    (rng or random).shuffle(out)
    return out


def build_deck(entries: Iterable[DeckEntry]) -> List[Card]:
    """Expand quantities into a flat card list (one object per physical card)."""
    deck: List[Card] = []
    for e in entries:
        for i in range(max(0, e.quantity)):
            # identity matters in zones, so every copy is its own object
            deck.append(e.card if i == 0 else replace(e.card))
    return deck


def draw(g: Game, n: int = 1) -> List[Card]:
    drawn = []
    for _ in range(n):
        if not g.library:
            break
        card = g.library.pop(0)
        g.hand.append(card)
        drawn.append(card)
    return drawn


# ---------------- Mulligans ----------------
def _custom_mulligan(hand: Sequence[Card], lands: int, rules) -> bool:
    if getattr(rules, "mull_zero_lands", False) and lands == 0:
        return True
    if getattr(rules, "mull_all_lands", False) and lands == len(hand):
        return True
    lo = getattr(rules, "mull_min_lands", None)
    if lo is not None and lands < lo:
        return True
    hi = getattr(rules, "mull_max_lands", None)
    if hi is not None and lands > hi:
        return True
    cmc = getattr(rules, "mull_no_play_cmc", None)
    if cmc is not None and not any(not c.is_land and c.cmc <= cmc for c in hand):
        return True
    return False


def should_mulligan(hand: Sequence[Card], strategy: str, rules=None) -> bool:
    """`rules` carries the mull_* fields of Config; only the "custom" strategy reads it."""
    lands = sum(1 for c in hand if c.is_land)
    size = len(hand)
    cheap_play = any(not c.is_land and c.cmc <= 2 for c in hand)

    if strategy == "custom":
        return _custom_mulligan(hand, lands, rules)
    if strategy == "conservative":
        return lands == 0 or lands == size
    if strategy == "balanced":
        if lands == 0 or lands == size:
            return True
        if lands < 2 or lands > 5:
            return not cheap_play
        return False
    if strategy == "aggressive":
        return lands < 2 or lands > 4
    return False


def _bottom_order(hand: List[Card]) -> List[Card]:
    """Order a London hand so the cards to put on the bottom come first."""
    lands = sum(1 for c in hand if c.is_land)

    def key(c: Card):
        if lands > 4:
            group = 0 if c.is_land else 1
        elif lands < 2:
            group = 0 if not c.is_land else 1
        else:
            group = 0
        return (group, -c.cmc)
    return sorted(hand, key=key)


def take_opening_hand(g: Game, deck: List[Card]) -> None:
    cfg = g.cfg
    size = cfg.hand_size
    cards = shuffle(deck, g.rng)
    g.zones.hand[:] = cards[:size]
    g.zones.library[:] = cards[size:]

    strategy = getattr(cfg, "mulligan_strategy", "none")
    while g.mulligans < MAX_MULLIGANS and should_mulligan(g.hand, strategy, cfg):
        g.mulligans += 1
        # first mulligan is free in commander
        to_bottom = max(0, g.mulligans - (1 if cfg.commander_mode else 0))
        cards = shuffle(deck, g.rng)
        if cfg.mulligan_rule == "london":
            ordered = _bottom_order(cards[:size])
            bottom = ordered[:to_bottom]
            g.zones.hand[:] = ordered[to_bottom:]
            g.zones.library[:] = cards[size:] + bottom
        else:
            keep = max(0, size - to_bottom)
            g.zones.hand[:] = cards[:keep]
            g.zones.library[:] = cards[keep:]


# ---------------- Setup ----------------
def setup(cfg: Config, entries: Sequence[DeckEntry], rng: Optional[random.Random] = None) -> Game:
    rng = rng or random.Random(cfg.seed)
    entries = filter_entries(cfg, entries)
    deck = build_deck(entries)

    g = Game(cfg=cfg, rng=rng, cards={e.card.name: e.card for e in entries}, zones=Zones())
    take_opening_hand(g, deck)
    g.opening_hand = [c.name for c in g.hand]
    return g
