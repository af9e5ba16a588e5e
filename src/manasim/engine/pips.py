# src/manasim/engine/pips.py
from __future__ import annotations
from collections.abc import Mapping
from typing import List, Sequence

from manasim.constants import ANY


def _offers(source, color: str) -> bool:
    if isinstance(source, Mapping):
        produces = source.get("produces", ())
    else:
        produces = getattr(source, "produces", source)
    return color in produces or ANY in produces


def solve_color_pips(pips: Sequence[str], sources: Sequence) -> bool:
    """
    True when every pip can be paid by a distinct source offering its color.

    Kuhn's augmenting-path matching, pips on the left, sources on the right.
    One dual land offering {U,B} pays a U pip or a B pip, never both.
    Sources may be ManaSource objects, {"produces": [...]} mappings or
    plain color collections.
    """
    if len(pips) > len(sources):
        return False
    match_of: List[int] = [-1] * len(sources)  # source index -> pip index

    def augment(pip_idx: int, visited: List[bool]) -> bool:
        for s, src in enumerate(sources):
            if visited[s] or not _offers(src, pips[pip_idx]):
                continue
            visited[s] = True
            if match_of[s] == -1 or augment(match_of[s], visited):
                match_of[s] = pip_idx
                return True
        return False

    for i in range(len(pips)):
        if not augment(i, [False] * len(sources)):
            return False
    return True
