# src/manasim/engine/lands.py
from __future__ import annotations
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from manasim.constants import (
    CLASSIC_FETCH_LIFE, COLORS, DEFAULT_MDFC_LIFE, DEFAULT_SHOCK_LIFE,
    MDFC_UNTAPPED_LAST_TURN, SHOCK_UNTAPPED_LAST_TURN, SUBTYPE_TO_COLOR,
)
from manasim.engine.availability import calculate_mana_availability
from manasim.engine.costs import color_pips
from manasim.engine.tapped import does_land_enter_tapped
from manasim.model.card import Card, Land, LandArchetype as LA, RampSpell
from manasim.model.zones import Permanent
from manasim.utils.logging import TurnLog


# ----------------------------
# Small helpers
# ----------------------------

def _is_bounce(card: Card) -> bool:
    return isinstance(card, Land) and card.is_bounce


def _bounce_targets(battlefield: List[Permanent]) -> List[Permanent]:
    return [p for p in battlefield if p.is_land and not _is_bounce(p.card)]


def _state(p: Permanent) -> str:
    return "tapped" if p.tapped else "untapped"


def key_card_records(key_card_names: Sequence[str], deck) -> List[Card]:
    """
    Resolve key-card names against the deck, lowest cmc first. `deck` may be a
    name->Card mapping or an iterable of Cards / DeckEntries.
    """
    if not key_card_names or not deck:
        return []
    if isinstance(deck, dict):
        by_name = dict(deck)
    else:
        by_name = {}
        for item in deck:
            card = getattr(item, "card", item)
            by_name.setdefault(card.name, card)
    found = [by_name[n] for n in key_card_names if n in by_name]
    return sorted(found, key=lambda c: c.cmc)


def matches_ramp_filter(land: Card, ramp: RampSpell) -> bool:
    """Whether a library card satisfies a ramp spell's search restriction."""
    if not land.is_land:
        return False
    flt = getattr(ramp, "fetch_filter", "basic")
    if flt == "any":
        return True
    if flt == "subtype":
        wanted = getattr(ramp, "fetch_subtypes", ()) or ()
        return bool(set(wanted) & set(land.subtypes))
    if flt == "snow":
        return "snow" in (land.name or "").lower()
    return bool(land.is_basic)


# ----------------------------
# Land selection
# ----------------------------

def select_best_land(hand: List[Card], battlefield: List[Permanent],
                     library: Optional[List[Card]] = None, turn: int = 0) -> Optional[Land]:
    lands = [c for c in hand if c.is_land]
    if not lands:
        return None

    can_bounce = bool(_bounce_targets(battlefield))
    playable = [l for l in lands if can_bounce or not _is_bounce(l)]
    if not playable:
        return None

    fetches = [l for l in playable if l.is_fetch]
    untapped_lands = [p for p in battlefield if p.is_land and not p.tapped]
    if fetches and len(untapped_lands) >= fetches[0].fetch_ability.cost:
        return fetches[0]

    for l in playable:
        if l.enters_tapped_always is not True and not _is_bounce(l):
            return l
    for l in playable:
        if _is_bounce(l):
            return l
    return playable[0]


# ----------------------------
# Fetch targeting
# ----------------------------

def find_best_land_to_fetch(fetch_land: Land, library: List[Card], battlefield: List[Permanent],
                            key_card_names: Sequence[str] = (), deck=None,
                            turn: int = 1) -> Optional[Land]:
    ability = fetch_land.fetch_ability
    only_basics = ability.hideaway or ability.only_basics

    eligible = []
    for card in library:
        if not card.is_land:
            continue
        if only_basics and not card.is_basic:
            continue
        if any(SUBTYPE_TO_COLOR.get(t) in ability.colors for t in card.subtypes):
            eligible.append(card)
    if not eligible:
        return None

    needed = set()
    for kc in key_card_records(key_card_names, deck):
        needed.update(color_pips(kc.mana_cost))

    current = set()
    for p in battlefield:
        card = p.card
        if p.is_land or card.kind == "artifact" or (card.kind == "creature" and not p.summoning_sick):
            current.update(c for c in getattr(card, "produces", ()) if c in COLORS)
    missing = needed - current

    def score(land: Land) -> int:
        colors = [c for c in land.produces if c in COLORS]
        s = 0
        if any(c in missing for c in colors):
            s += 300
        if turn <= 2 and len(colors) > 1:
            s += 1000
        if turn >= 6 and land.is_shock:
            s -= 100
        if len(colors) >= 2:
            s += 100
        s += 250 * sum(1 for c in colors if c in missing)
        return s

    best, best_score = None, None
    for land in eligible:
        sc = score(land)
        if best_score is None or sc > best_score:
            best, best_score = land, sc
    return best


# ----------------------------
# Thriving lands
# ----------------------------

def choose_thriving_color(land: Land, key_card_names: Sequence[str], deck) -> str:
    primary = land.produces[0] if land.produces else None
    demand: Dict[str, int] = {c: 0 for c in COLORS}
    for kc in key_card_records(key_card_names, deck):
        for pip in color_pips(kc.mana_cost):
            demand[pip] += 1
    candidates = [c for c in COLORS if c != primary]
    # max() keeps the first of equal counts, so ties fall back to WUBRG order
    return max(candidates, key=lambda c: demand[c])


# ----------------------------
# Playing a land
# ----------------------------

def play_land(land: Land, hand: List[Card], battlefield: List[Permanent], library: List[Card],
              graveyard: List[Card], turn: int, log: Optional[TurnLog] = None,
              key_card_names: Sequence[str] = (), deck=None,
              commander_mode: bool = False) -> int:
    """
    Resolve one land drop on the 0-based turn index `turn`. Mutates hand,
    battlefield, library and graveyard.
    Returns the life paid. A bounce land with nothing to return is not played
    at all and every zone is left untouched.
    """
    if _is_bounce(land) and not _bounce_targets(battlefield):
        if log is not None:
            log.emit(f"Cannot play {land.name} (no non-bounce lands to bounce)")
        return 0

    if land in hand:
        hand.remove(land)
    life_loss = 0

    if land.archetype is not LA.SACRIFICE_ON_LAND:
        for city in [p for p in battlefield if p.is_land and p.card.archetype is LA.SACRIFICE_ON_LAND]:
            battlefield.remove(city)
            graveyard.append(city.card)
            if log is not None:
                log.emit(f"Sacrificed {city.card.name} (another land played)")

    if land.is_fetch:
        if land.fetch_ability.hideaway:
            fetched = find_best_land_to_fetch(land, library, battlefield, key_card_names, deck, turn)
            if fetched is not None:
                library.remove(fetched)
                battlefield.append(Permanent(fetched, tapped=True, entered_tapped=True))
                graveyard.append(land)
                if log is not None:
                    log.emit(f"Played {land.name}, sacrificed it to fetch {fetched.name} (tapped)")
            else:
                battlefield.append(Permanent(land, tapped=True, entered_tapped=True))
                if log is not None:
                    log.emit(f"Played {land.name} (tapped, no fetch targets)")
        else:
            tapped = does_land_enter_tapped(land, battlefield, turn, commander_mode)
            perm = Permanent(land, tapped=tapped, entered_tapped=tapped)
            battlefield.append(perm)
            if log is not None:
                log.emit(f"Played {land.name} (fetch land, {_state(perm)})")
        return life_loss

    tapped = does_land_enter_tapped(land, battlefield, turn, commander_mode)
    perm = Permanent(land, tapped=tapped, entered_tapped=tapped)
    battlefield.append(perm)

    if land.is_shock and turn <= SHOCK_UNTAPPED_LAST_TURN and perm.tapped:
        perm.tapped = perm.entered_tapped = False
        life_loss += land.lifeloss if land.lifeloss is not None else DEFAULT_SHOCK_LIFE

    if land.archetype is LA.MDFC:
        if turn <= MDFC_UNTAPPED_LAST_TURN:
            perm.tapped = perm.entered_tapped = False
            life_loss += land.lifeloss if land.lifeloss is not None else DEFAULT_MDFC_LIFE
        else:
            perm.tapped = perm.entered_tapped = True

    if land.archetype is LA.THRIVING:
        color = choose_thriving_color(land, key_card_names, deck)
        perm.card = replace(land, produces=tuple(land.produces[:1]) + (color,))
        if log is not None:
            log.emit(f"{land.name} chose {color}")

    if _is_bounce(land):
        targets = _bounce_targets(battlefield)
        tapped_targets = [p for p in targets if p.tapped]
        back = tapped_targets[0] if tapped_targets else targets[0]
        returned_state = _state(back)
        battlefield.remove(back)
        hand.append(back.card)
        if log is not None:
            log.emit(f"Played {land.name} ({_state(perm)}), bounced {back.card.name} ({returned_state})")
    elif log is not None:
        log.emit(f"Played {land.name} ({_state(perm)})")

    return life_loss


# ----------------------------
# Activating fetch lands already in play
# ----------------------------

def activate_fetch_lands(battlefield: List[Permanent], library: List[Card], graveyard: List[Card],
                         turn: int, log: Optional[TurnLog] = None,
                         key_card_names: Sequence[str] = (), deck=None,
                         commander_mode: bool = False) -> int:
    """
    Crack every untapped fetch land whose activation cost the other untapped
    lands can pay. Returns the life paid (classic fetch + shock untap).
    """
    life_loss = 0
    for fetch_perm in [p for p in battlefield if p.is_land and p.card.is_fetch and not p.tapped]:
        if fetch_perm not in battlefield or fetch_perm.tapped:
            continue
        ability = fetch_perm.card.fetch_ability
        payers = [p for p in battlefield if p is not fetch_perm and p.is_land and not p.tapped]
        if ability.cost and calculate_mana_availability(payers, turn).total < ability.cost:
            continue

        fetched = find_best_land_to_fetch(fetch_perm.card, library, battlefield, key_card_names, deck, turn)
        if fetched is None:
            if log is not None:
                log.emit(f"{fetch_perm.card.name} activated but no valid fetch targets in library")
            continue

        still_needed = ability.cost
        for p in payers:
            if still_needed <= 0:
                break
            p.tapped = True
            still_needed -= max(1, p.card.mana_amount)

        library.remove(fetched)
        battlefield.remove(fetch_perm)
        graveyard.append(fetch_perm.card)

        if ability.fetched_enters_tapped:
            tapped = True
        else:
            tapped = does_land_enter_tapped(fetched, battlefield, turn, commander_mode)
        perm = Permanent(fetched, tapped=tapped, entered_tapped=tapped)
        battlefield.append(perm)

        cost = 0
        if fetched.is_shock and tapped and not ability.fetched_enters_tapped and turn <= SHOCK_UNTAPPED_LAST_TURN:
            perm.tapped = perm.entered_tapped = False
            cost += fetched.lifeloss if fetched.lifeloss is not None else DEFAULT_SHOCK_LIFE
        if ability.fetch_type == "classic":
            cost += CLASSIC_FETCH_LIFE
        life_loss += cost

        if log is not None:
            suffix = f" [-{cost} life]" if cost else ""
            log.emit(f"Fetched {fetched.name} ({_state(perm)}){suffix}")
    return life_loss
