# src/manasim/engine/tapped.py
from __future__ import annotations
from typing import List

from manasim.constants import COLOR_TO_SUBTYPE
from manasim.model.card import Card, LandArchetype as LA
from manasim.model.zones import Permanent


def _lands(battlefield: List[Permanent]) -> List[Permanent]:
    return [p for p in battlefield if p.is_land]


def check_land_subtypes(land) -> List[str]:
    """Basic subtypes a check land looks for: explicit, else one per produced color."""
    if land.check_types:
        return list(land.check_types)
    return [COLOR_TO_SUBTYPE[c] for c in land.produces if c in COLOR_TO_SUBTYPE]


def does_land_enter_tapped(land: Card, battlefield: List[Permanent], turn: int,
                           commander_mode: bool = False) -> bool:
    """
    Whether `land` would enter tapped right now. First matching rule wins.
    Shock and MDFC lands always report tapped here; play_land decides whether
    to pay life to untap them.
    """
    if not land.is_land:
        return False
    kind = land.archetype
    lands = _lands(battlefield)

    if kind is LA.SHOCK:
        return True
    if kind is LA.FAST:
        return len(lands) > 2
    if kind is LA.BATTLE:
        return sum(1 for p in lands if getattr(p.card, "is_basic", False)) < 2
    if kind is LA.CHECK:
        needs = check_land_subtypes(land)
        if not needs:
            return False
        return not any(
            set(getattr(p.card, "subtypes", ())) & set(needs) for p in lands
        )
    if kind is LA.CROWD:
        return not commander_mode
    if kind is LA.SLOW:
        return len(lands) < 2
    if kind is LA.MDFC:
        return True

    if land.enters_tapped_always is True:
        return True
    return False
