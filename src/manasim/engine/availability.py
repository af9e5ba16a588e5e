# src/manasim/engine/availability.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from manasim.constants import (
    ANY, COFFERS_ACTIVATION, COLORLESS, COLORS, COLOR_TO_SUBTYPE, METALCRAFT_ARTIFACTS,
    MOX_CONDITIONS_IGNORED_FROM_TURN, TEMPLE_MIN_LANDS,
)
from manasim.model.card import Exploration, Land, LandArchetype as LA, ManaArtifact, ManaCreature
from manasim.model.zones import Permanent


@dataclass(frozen=True)
class ManaSource:
    """One independently tappable unit of mana offering a choice of colors."""
    produces: Tuple[str, ...]

    def offers(self, color: str) -> bool:
        return color in self.produces or ANY in self.produces

    @property
    def colored(self) -> bool:
        return any(self.offers(c) for c in COLORS)


@dataclass
class ManaAvailability:
    total: int = 0
    colors: Dict[str, int] = field(default_factory=lambda: {c: 0 for c in COLORS + (COLORLESS,)})
    # None for hand-built availabilities; can_play_card then uses `colors` only
    sources: Optional[List[ManaSource]] = field(default_factory=list)


def _flexibility(src: ManaSource) -> int:
    if ANY in src.produces:
        return len(COLORS) + 1
    return len(src.produces)


def _verge_produces(land: Land, battlefield: List[Permanent]) -> Tuple[str, ...]:
    if not land.produces:
        return ()
    primary = land.produces[0]
    if len(land.produces) < 2:
        return (primary,)
    secondary = land.produces[1]
    needed = land.verge_requires or COLOR_TO_SUBTYPE.get(secondary)
    has_it = any(
        p.is_land and needed in getattr(p.card, "subtypes", ())
        for p in battlefield
    )
    return (primary, secondary) if has_it else (primary,)


def is_artifact_permanent(p: Permanent) -> bool:
    card = p.card
    return card.kind == "artifact" or getattr(card, "is_artifact", False)


def is_creature_permanent(p: Permanent) -> bool:
    card = p.card
    return isinstance(card, ManaCreature) or getattr(card, "is_creature", False)


def condition_met(card: ManaArtifact, battlefield: List[Permanent], turn: int) -> bool:
    """Mox Opal needs metalcraft, Mox Amber a legendary; both assumed met from turn index 2."""
    if turn >= MOX_CONDITIONS_IGNORED_FROM_TURN:
        return True
    if card.condition == "metalcraft":
        return sum(1 for p in battlefield if is_artifact_permanent(p)) >= METALCRAFT_ARTIFACTS
    if card.condition == "legendary":
        return any(p.card.is_legendary for p in battlefield)
    return True


def _scaling_land(land: Land, battlefield: List[Permanent], turn: int) -> Tuple[Tuple[str, ...], int]:
    """(colors, units) for lands whose output depends on the board or the turn."""
    kind = land.archetype
    lands = [p for p in battlefield if p.is_land]
    if kind is LA.SWAMP_SCALING:
        swamps = sum(1 for p in lands if "Swamp" in p.card.subtypes)
        return land.produces, max(0, swamps - COFFERS_ACTIVATION)
    if kind is LA.BASIC_SWAMP_SCALING:
        swamps = sum(1 for p in lands if p.card.is_basic and "Swamp" in p.card.subtypes)
        return land.produces, max(0, swamps - COFFERS_ACTIVATION)
    if kind is LA.PHYREXIAN_TOWER:
        # sacrifice a creature for {B}{B}, otherwise tap for {C}
        if any(is_creature_permanent(p) and not p.summoning_sick for p in battlefield):
            return ("B",), 2
        return (COLORLESS,), 1
    if kind is LA.TEMPLE_FALSE_GOD:
        return land.produces, (2 if len(lands) >= TEMPLE_MIN_LANDS else 0)
    # TURN_SCALING
    return land.produces, max(land.mana_floor, turn - 1)


_SCALING = (LA.SWAMP_SCALING, LA.BASIC_SWAMP_SCALING, LA.PHYREXIAN_TOWER,
            LA.TEMPLE_FALSE_GOD, LA.TURN_SCALING)


def _take(base: List[ManaSource], pick) -> Optional[ManaSource]:
    """Remove and return the least flexible base unit accepted by `pick`."""
    best = None
    for src in base:
        if pick(src) and (best is None or _flexibility(src) < _flexibility(best)):
            best = src
    if best is not None:
        base.remove(best)
    return best


def calculate_mana_availability(battlefield: List[Permanent], turn: int = 999) -> ManaAvailability:
    """
    Build the list of atomic mana units the battlefield can produce right now.

    Filter lands are resolved after every ordinary source so they can consume
    one of those units as their activation cost. `turn` is the 0-based turn
    index; it scales Cradle-style lands and switches off the Mox conditions.
    """
    base: List[ManaSource] = []
    filters: List[Land] = []

    for perm in battlefield:
        if perm.tapped:
            continue
        card = perm.card
        if isinstance(card, Exploration):
            continue
        if isinstance(card, ManaCreature) and perm.summoning_sick:
            continue
        if not card.produces_mana:
            continue

        if isinstance(card, Land):
            if card.archetype in (LA.FILTER, LA.ODYSSEY_FILTER):
                filters.append(card)
                continue
            if card.archetype is LA.VERGE:
                base.append(ManaSource(_verge_produces(card, battlefield)))
                continue
            if card.archetype in _SCALING:
                colors, units = _scaling_land(card, battlefield, turn)
                base.extend(ManaSource(tuple(colors)) for _ in range(units))
                continue
        elif isinstance(card, ManaArtifact) and not condition_met(card, battlefield, turn):
            continue

        produces = tuple(card.produces)
        for _ in range(max(0, card.mana_amount)):
            base.append(ManaSource(produces))

    outputs: List[ManaSource] = []
    for land in filters:
        own = tuple(c for c in land.produces if c in COLORS)
        if land.archetype is LA.FILTER:
            paid = _take(base, lambda s: any(s.offers(c) for c in own))
        else:
            paid = _take(base, lambda s: not s.colored) or _take(base, lambda s: True)
        if paid is not None and own:
            outputs.extend([ManaSource(own), ManaSource(own)])
        else:
            if paid is not None:
                base.append(paid)
            outputs.append(ManaSource((COLORLESS,)))

    sources = base + outputs
    mana = ManaAvailability(total=len(sources), sources=sources)
    for src in sources:
        if ANY in src.produces:
            for c in COLORS:
                mana.colors[c] += 1
            continue
        for c in src.produces:
            mana.colors[c] = mana.colors.get(c, 0) + 1
    return mana
