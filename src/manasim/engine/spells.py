# src/manasim/engine/spells.py
from __future__ import annotations
from typing import List, Optional, Sequence

from manasim.engine.availability import calculate_mana_availability, condition_met
from manasim.engine.casting import can_play_card, tap_mana_sources
from manasim.engine.lands import matches_ramp_filter
from manasim.model.card import (
    Card, DrawSpell, Exploration, LandArchetype as LA, ManaArtifact, ManaCreature, RampSpell,
)
from manasim.model.zones import Permanent
from manasim.utils.logging import TurnLog


def _cast_priority(card: Card) -> int:
    if isinstance(card, ManaArtifact) and card.mox_priority:
        return -1
    return card.cmc


def _pay_etb_cost(spell: Card, hand: List[Card], graveyard: List[Card]) -> Optional[str]:
    """
    Pay the enters-the-battlefield cost of `spell` from the hand.
    Returns the log note, or None when the cost can't be paid.
    """
    etb = getattr(spell, "etb_cost", None)
    if etb == "discard_land":
        lands = [c for c in hand if c.is_land]
        if not lands:
            return None
        pitched = next((l for l in lands if l.enters_tapped_always), lands[0])
        hand.remove(pitched)
        graveyard.append(pitched)
        return f" (discarded {pitched.name})"
    if etb == "imprint_nonland":
        others = [c for c in hand if not c.is_land and c is not spell]
        if not others:
            return None
        hand.remove(others[0])
        return f" (imprinted {others[0].name})"
    if etb == "discard_hand":
        rest = [c for c in hand if c is not spell]
        if not rest:
            return " (discarded empty hand)"
        graveyard.extend(rest)
        hand[:] = [spell]
        return f" (discarded hand: {', '.join(c.name for c in rest)})"
    if etb == "sacrifice":
        return " (sacrifice for mana)"
    return ""


def _condition_note(spell: Card, battlefield: List[Permanent], turn: int) -> str:
    """Annotate an unmet Mox condition; the permanent is already on `battlefield`."""
    if not isinstance(spell, ManaArtifact) or condition_met(spell, battlefield, turn):
        return ""
    if spell.condition == "metalcraft":
        return " [metalcraft not yet active]"
    return " [no legendary, no mana produced]"


def _cast_label(spell: Card) -> str:
    if isinstance(spell, ManaArtifact):
        return "artifact"
    if isinstance(spell, ManaCreature):
        return "creature"
    if isinstance(spell, Exploration):
        return "creature" if spell.is_creature else "artifact" if spell.is_artifact else "permanent"
    return "permanent"


def _resolve_permanent(spell: Card, hand, battlefield, note: str, log, turn) -> None:
    hand.remove(spell)
    tap_mana_sources(spell, battlefield)
    tapped = getattr(spell, "enters_tapped", False)
    battlefield.append(Permanent(
        spell,
        tapped=tapped,
        summoning_sick=isinstance(spell, (ManaCreature, Exploration)),
        entered_tapped=tapped,
    ))
    note += _condition_note(spell, battlefield, turn)
    if log is not None:
        extra = " (Exploration effect)" if isinstance(spell, Exploration) else ""
        if tapped:
            extra += " (enters tapped)"
        log.emit(f"Cast {_cast_label(spell)}: {spell.name}{extra}{note}")


# ----------------------------
# Exploration effects (right after the first land drop)
# ----------------------------

def cast_exploration(hand: List[Card], battlefield: List[Permanent], log: Optional[TurnLog] = None,
                     turn: int = 999, config=None) -> int:
    """
    Cast every castable extra-land-drop permanent in hand, cheapest first,
    so the extra drops are usable this turn. Nothing else is cast.
    """
    if not getattr(config, "include_exploration", True):
        return 0
    disabled = set(getattr(config, "disabled_exploration", ()) or ())
    cast = 0
    for spell in sorted((c for c in hand if isinstance(c, Exploration)), key=lambda c: c.cmc):
        if spell.name in disabled:
            continue
        if not can_play_card(spell, calculate_mana_availability(battlefield, turn)):
            continue
        _resolve_permanent(spell, hand, battlefield, "", log, turn)
        cast += 1
    return cast


# ----------------------------
# Phase 1: mana producers
# ----------------------------

def _cast_one_mana_producer(hand, battlefield, graveyard, log, turn) -> bool:
    mana = calculate_mana_availability(battlefield, turn)
    candidates = [
        c for c in hand
        if isinstance(c, (ManaCreature, Exploration))
        or (isinstance(c, ManaArtifact) and not c.burst)
    ]
    candidates.sort(key=_cast_priority)

    for spell in candidates:
        if not can_play_card(spell, mana):
            continue
        note = _pay_etb_cost(spell, hand, graveyard)
        if note is None:
            continue
        _resolve_permanent(spell, hand, battlefield, note, log, turn)
        return True
    return False


# ----------------------------
# Phase 2: ramp spells
# ----------------------------

def _land_to_sacrifice(battlefield: List[Permanent]) -> Optional[Permanent]:
    candidates = [p for p in battlefield if p.is_land and not p.card.is_fetch]
    basics = [p for p in candidates if p.card.is_basic]
    duals = [p for p in candidates if not p.card.is_basic and p.card.archetype is not LA.BOUNCE]
    bounces = [p for p in candidates if p.card.archetype is LA.BOUNCE]
    for group in (basics, duals, bounces):
        if group:
            return group[0]
    return None


def _take_matching(library: List[Card], ramp: RampSpell, n: int) -> List[Card]:
    taken = [c for c in library if matches_ramp_filter(c, ramp)][:max(0, n)]
    for c in taken:
        library.remove(c)
    return taken


def _cast_one_ramp_spell(hand, battlefield, graveyard, log, library, turn, disabled) -> bool:
    mana = calculate_mana_availability(battlefield, turn)
    ramp = sorted(
        (c for c in hand if isinstance(c, RampSpell) and c.name not in disabled),
        key=lambda c: c.cmc,
    )
    for spell in ramp:
        if not can_play_card(spell, mana):
            continue
        eligible = sum(1 for c in library if matches_ramp_filter(c, spell))
        min_needed = 1 + (1 if spell.lands_to_hand > 0 else 0)
        if eligible < min_needed:
            continue

        hand.remove(spell)
        graveyard.append(spell)
        tap_mana_sources(spell, battlefield)

        sacrificed = None
        if spell.sacrifice_land:
            victim = _land_to_sacrifice(battlefield)
            if victim is not None:
                battlefield.remove(victim)
                graveyard.append(victim.card)
                sacrificed = victim.card.name

        to_field = _take_matching(library, spell, spell.lands_to_add or 1)
        for land in to_field:
            battlefield.append(Permanent(land, tapped=spell.lands_tapped, entered_tapped=spell.lands_tapped))
        to_hand = _take_matching(library, spell, spell.lands_to_hand)
        hand.extend(to_hand)

        if log is not None:
            sac_note = f", sac'd {sacrificed}" if sacrificed else ""
            state = "tapped" if spell.lands_tapped else "untapped"
            field_note = (f" -> {', '.join(c.name for c in to_field)} ({state})"
                          if to_field else " -> no land found")
            hand_note = f"; {', '.join(c.name for c in to_hand)} to hand" if to_hand else ""
            log.emit(f"Cast ramp spell: {spell.name}{sac_note}{field_note}{hand_note}")
        return True
    return False


# ----------------------------
# Phase 3: card draw
# ----------------------------

def _cast_one_draw_spell(hand, battlefield, graveyard, log, library, turn, disabled) -> bool:
    mana = calculate_mana_availability(battlefield, turn)
    draws = sorted(
        (c for c in hand if isinstance(c, DrawSpell) and c.name not in disabled),
        key=lambda c: c.cmc,
    )
    for spell in draws:
        if not can_play_card(spell, mana):
            continue
        hand.remove(spell)
        tap_mana_sources(spell, battlefield)
        if spell.stays_on_battlefield:
            battlefield.append(Permanent(spell))
            if log is not None:
                log.emit(f"Cast draw permanent: {spell.name}")
            return True

        graveyard.append(spell)
        drawn = library[:max(0, spell.cards_drawn)]
        del library[:len(drawn)]
        hand.extend(drawn)
        if log is not None:
            log.emit(f"Cast draw spell: {spell.name} (drew {len(drawn)})")
        return True
    return False


def cast_spells(hand: List[Card], battlefield: List[Permanent], graveyard: List[Card],
                log: Optional[TurnLog] = None, key_card_names: Sequence[str] = (), deck=None,
                library: Optional[List[Card]] = None, turn: int = 999, config=None) -> int:
    """
    Cast mana producers, then ramp spells, then draw spells, each until a
    full scan finds nothing castable. Every action removes the cast card from
    `hand` and the action count is capped at the hand size at call time, so
    the loop ends even though draw spells refill the hand.

    `turn` is the 0-based turn index. `config` is any object with
    include_ramp_spells / disabled_ramp_spells (and optionally
    include_draw_spells / disabled_draw_spells).
    """
    include_ramp = getattr(config, "include_ramp_spells", True)
    disabled = set(getattr(config, "disabled_ramp_spells", ()) or ())
    include_draw = getattr(config, "include_draw_spells", True)
    disabled_draw = set(getattr(config, "disabled_draw_spells", ()) or ())
    library = library if library is not None else []
    budget = len(hand)
    actions = 0

    while actions < budget and _cast_one_mana_producer(hand, battlefield, graveyard, log, turn):
        actions += 1

    if include_ramp:
        while actions < budget and _cast_one_ramp_spell(hand, battlefield, graveyard, log, library, turn, disabled):
            actions += 1

    if include_draw:
        while actions < budget and _cast_one_draw_spell(hand, battlefield, graveyard, log, library, turn, disabled_draw):
            actions += 1

    return actions
