# src/manasim/engine/damage.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List

from manasim.constants import COIN_FLIP_DAMAGE, PAIN_LAND_LAST_TURN
from manasim.model.card import LandArchetype as LA
from manasim.model.zones import Permanent


@dataclass
class DamageReport:
    total: float = 0
    breakdown: List[str] = field(default_factory=list)

    def add(self, amount: float, label: str, avg: bool = False) -> None:
        if amount <= 0:
            return
        self.total += amount
        self.breakdown.append(f"{label} damage: -{amount:g} life" + (" (avg)" if avg else ""))


def _lands_of(battlefield: List[Permanent], archetype: LA, tapped_only: bool = False) -> List[Permanent]:
    return [
        p for p in battlefield
        if p.is_land and p.card.archetype is archetype and (p.tapped or not tapped_only)
    ]


def _life(p: Permanent, default: int) -> int:
    v = getattr(p.card, "lifeloss", None)
    return default if v is None else v


def calculate_battlefield_damage(battlefield: List[Permanent], turn: int) -> DamageReport:
    """
    Passive life loss from painful mana sources for the 0-based turn index
    `turn`. Pain lands and talismans only count through index 5 (the sixth
    turn); horizon and five-color pain lands count whenever they are tapped.
    """
    report = DamageReport()

    # one line per coin-flip artifact name
    flips: Dict[str, int] = {}
    for p in battlefield:
        if getattr(p.card, "coin_flip", False):
            flips[p.card.name] = flips.get(p.card.name, 0) + 1
    for name, n in flips.items():
        report.add(n * COIN_FLIP_DAMAGE, name, avg=True)

    report.add(sum(_life(p, 2) for p in _lands_of(battlefield, LA.ALWAYS_PAINFUL)), "Ancient Tomb")

    if turn <= PAIN_LAND_LAST_TURN:
        report.add(sum(_life(p, 1) for p in _lands_of(battlefield, LA.PAIN)), "Pain Land")
        talismans = [p for p in battlefield if getattr(p.card, "is_talisman", False)]
        report.add(sum(_life(p, 1) for p in talismans), "Talisman")

    report.add(sum(_life(p, 1) for p in _lands_of(battlefield, LA.FIVE_COLOR_PAIN, tapped_only=True)),
               "5-Color Pain Land")
    report.add(sum(_life(p, 1) for p in _lands_of(battlefield, LA.HORIZON, tapped_only=True)),
               "Horizon Land")
    return report


def upkeep_damage(battlefield: List[Permanent]) -> DamageReport:
    """Upkeep triggers of tapped artifacts that punish staying tapped (Mana Vault)."""
    report = DamageReport()
    for p in battlefield:
        if p.tapped and getattr(p.card, "upkeep_damage", 0):
            report.add(p.card.upkeep_damage, f"{p.card.name} upkeep")
    return report
