# src/manasim/engine/costs.py
from __future__ import annotations
import re
from typing import Dict, List

from manasim.constants import COLORS

_SYMBOL_RE = re.compile(r"\{([^}]+)\}")


def cost_symbols(mana_cost: str) -> List[str]:
    """'{2}{G}{G}' -> ['2', 'G', 'G']"""
    return _SYMBOL_RE.findall(mana_cost or "")


def color_pips(mana_cost: str) -> List[str]:
    """Colored pips only, in cost order. Hybrid/phyrexian symbols are ignored."""
    return [s for s in cost_symbols(mana_cost) if s in COLORS]


def pip_counts(mana_cost: str) -> Dict[str, int]:
    counts = {c: 0 for c in COLORS}
    for pip in color_pips(mana_cost):
        counts[pip] += 1
    return counts


def generic_amount(mana_cost: str) -> int:
    total = 0
    for s in cost_symbols(mana_cost):
        if s.isdigit():
            total += int(s)
    return total


def total_cost(mana_cost: str) -> int:
    return generic_amount(mana_cost) + len(color_pips(mana_cost))
