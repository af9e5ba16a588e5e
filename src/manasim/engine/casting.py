# src/manasim/engine/casting.py
from __future__ import annotations
from typing import List

from manasim.constants import COLORS
from manasim.engine.availability import ManaAvailability
from manasim.engine.costs import color_pips, pip_counts, total_cost
from manasim.engine.pips import solve_color_pips
from manasim.model.card import Card, produces_color
from manasim.model.zones import Permanent


def can_play_card(card: Card, mana: ManaAvailability) -> bool:
    """Total-mana check, then colored pips against the source list (or the color counts)."""
    if card.cmc > mana.total:
        return False
    pips = color_pips(card.mana_cost)
    if not pips:
        return True

    if mana.sources is not None:
        return solve_color_pips(pips, mana.sources)

    for color, need in pip_counts(card.mana_cost).items():
        if need and mana.colors.get(color, 0) < need:
            return False
    return True


def _can_tap(p: Permanent) -> bool:
    if p.tapped or not p.card.produces_mana:
        return False
    return p.is_land or not p.summoning_sick


def tap_mana_sources(spell: Card, battlefield: List[Permanent]) -> None:
    """
    Greedily tap sources to pay `spell`: colored pips first, then the rest in
    battlefield order. Callers must already know the spell is castable.
    """
    needs = pip_counts(spell.mana_cost)
    remaining = max(total_cost(spell.mana_cost), spell.cmc)

    for color in COLORS:
        need = needs[color]
        if need == 0:
            continue
        for p in battlefield:
            if need <= 0:
                break
            if _can_tap(p) and produces_color(p.card, color):
                p.tapped = True
                need -= 1
                remaining -= max(1, getattr(p.card, "mana_amount", 1))

    for p in battlefield:
        if remaining <= 0:
            break
        if _can_tap(p):
            p.tapped = True
            remaining -= max(1, getattr(p.card, "mana_amount", 1))
