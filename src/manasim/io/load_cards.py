# src/manasim/io/load_cards.py
from __future__ import annotations
import csv
from typing import Dict, Iterable, List, Optional, Tuple
from manasim.model.card import (
    Card, DeckEntry, Exploration, FetchAbility, Land, LandArchetype,
    DrawSpell, ManaArtifact, ManaCreature, RampSpell, Ritual,
)

def _as_int(x, default=0):
    try:
        return int(str(x).strip())
    except (TypeError, ValueError):
        return default

def _as_float(x, default=0.0):
    try:
        return float(str(x).strip())
    except (TypeError, ValueError):
        return default

def _opt_int(x) -> Optional[int]:
    return _as_int(x, None) if str(x or "").strip() else None

def _as_bool(x, default=False):
    s = str(x if x is not None else "").strip().lower()
    if s in ("1","true","yes","y"): return True
    if s in ("0","false","no","n"): return False
    return default

def _opt_bool(x) -> Optional[bool]:
    return _as_bool(x, None) if str(x or "").strip() else None

def _as_tuple(x) -> Tuple[str, ...]:
    """'W|U' -> ('W', 'U'); empty cells become ()."""
    return tuple(p.strip() for p in str(x or "").split("|") if p.strip())

def _read_csv(path: str) -> Iterable[Dict[str,str]]:
    with open(path, newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            # normalize keys
            yield { (k.strip().lower() if k else k): (v.strip() if isinstance(v,str) else v)
                    for k,v in row.items() }

def _fetch_from_row(row: Dict[str,str]) -> Optional[FetchAbility]:
    if not (row.get("fetch_colors") or row.get("fetch_type") or row.get("hideaway")):
        return None
    return FetchAbility(
        colors=_as_tuple(row.get("fetch_colors")),
        only_basics=_as_bool(row.get("fetch_only_basics")),
        hideaway=_as_bool(row.get("hideaway")),
        cost=_as_int(row.get("fetch_cost"), 0),
        fetch_type=row.get("fetch_type") or "classic",
        fetched_enters_tapped=_as_bool(row.get("fetched_enters_tapped")),
    )

def row_to_card(row: Dict[str,str]) -> Card:
    """Build one classified card; unknown `type` values load as plain spells."""
    name = row.get("name","").strip()
    if not name:
        raise ValueError("card row without a name")
    base = dict(name=name, cmc=_as_int(row.get("cmc"), 0), mana_cost=row.get("mana_cost","") or "",
                is_legendary=_as_bool(row.get("is_legendary")))
    kind = (row.get("type") or "spell").lower()

    if kind == "land":
        return Land(
            **base,
            archetype=LandArchetype.parse(row.get("archetype")),
            produces=_as_tuple(row.get("produces")),
            mana_amount=_as_int(row.get("mana_amount"), 1),
            is_basic=_as_bool(row.get("is_basic")),
            subtypes=_as_tuple(row.get("subtypes")),
            enters_tapped_always=_opt_bool(row.get("enters_tapped")),
            lifeloss=_opt_int(row.get("lifeloss")),
            check_types=_as_tuple(row.get("check_types")),
            verge_requires=row.get("verge_requires") or None,
            fetch=_fetch_from_row(row),
            mana_floor=_as_int(row.get("mana_floor"), 1),
        )
    if kind == "artifact":
        return ManaArtifact(
            **base,
            produces=_as_tuple(row.get("produces")) or ("C",),
            mana_amount=_as_int(row.get("mana_amount"), 1),
            enters_tapped=_as_bool(row.get("enters_tapped")),
            etb_cost=row.get("etb_cost") or None,
            condition=row.get("condition") or None,
            mox_priority=_as_bool(row.get("mox_priority")),
            burst=_as_bool(row.get("burst")),
            is_talisman=_as_bool(row.get("is_talisman")),
            coin_flip=_as_bool(row.get("coin_flip")),
            lifeloss=_opt_int(row.get("lifeloss")),
            doesnt_untap=_as_bool(row.get("doesnt_untap")),
            upkeep_damage=_as_int(row.get("upkeep_damage"), 0),
        )
    if kind == "creature":
        return ManaCreature(
            **base,
            produces=_as_tuple(row.get("produces")) or ("G",),
            mana_amount=_as_int(row.get("mana_amount"), 1),
            enters_tapped=_as_bool(row.get("enters_tapped")),
        )
    if kind == "exploration":
        return Exploration(
            **base,
            lands_per_turn=_as_int(row.get("lands_per_turn"), 2),
            is_creature=_as_bool(row.get("is_creature")),
            is_artifact=_as_bool(row.get("is_artifact")),
            enters_tapped=_as_bool(row.get("enters_tapped")),
        )
    if kind in ("ramp", "rampspell"):
        return RampSpell(
            **base,
            lands_to_add=_as_int(row.get("lands_to_add"), 1),
            lands_tapped=_as_bool(row.get("lands_tapped"), True),
            lands_to_hand=_as_int(row.get("lands_to_hand"), 0),
            sacrifice_land=_as_bool(row.get("sacrifice_land")),
            fetch_filter=row.get("fetch_filter") or "basic",
            fetch_subtypes=_as_tuple(row.get("fetch_subtypes")),
        )
    if kind == "ritual":
        return Ritual(
            **base,
            net_gain=_as_int(row.get("net_gain"), 0),
            ritual_colors=_as_tuple(row.get("ritual_colors")),
        )
    if kind == "draw":
        return DrawSpell(
            **base,
            cards_drawn=_as_int(row.get("cards_drawn"), 1),
            per_turn=_as_float(row.get("per_turn"), 0.0),
        )
    return Card(**base)

def load_deck(path: str) -> List[DeckEntry]:
    """
    Load a classified decklist from CSV.
    Required columns: name. Everything else is optional:
      quantity,type,cmc,mana_cost,produces,archetype,... (list cells are '|'-separated)
    Rows with quantity 0 are skipped.
    """
    deck: List[DeckEntry] = []
    for row in _read_csv(path):
        qty = _as_int(row.get("quantity", 1), 1)
        if qty <= 0:
            continue
        deck.append(DeckEntry(card=row_to_card(row), quantity=qty))
    return deck
