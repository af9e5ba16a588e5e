# src/manasim/engine/loop.py
from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, List, Sequence
import random

from manasim.constants import COLORS
from manasim.engine.availability import ManaAvailability, ManaSource, calculate_mana_availability
from manasim.engine.casting import can_play_card
from manasim.engine.damage import calculate_battlefield_damage
from manasim.engine.lands import activate_fetch_lands, play_land, select_best_land
from manasim.engine.rounds import start_of_turn, end_of_turn
from manasim.engine.setup import setup
from manasim.engine.spells import cast_exploration, cast_spells
from manasim.io.summaries import summarize, write_summaries
from manasim.model.card import DeckEntry, Exploration, ManaArtifact, Ritual
from manasim.model.game import GameState
from manasim.utils.logging import TurnLog

# g.turn counts from 1 for logs and stats; the engine takes the 0-based index.


def _idx(g: GameState) -> int:
    return g.turn - 1

def _land_drop(g: GameState, rec: TurnLog) -> bool:
    land = select_best_land(g.hand, g.battlefield, g.library, _idx(g))
    if land is None:
        return False
    ll = play_land(land, g.hand, g.battlefield, g.library, g.graveyard, _idx(g), rec,
                   g.key_cards, g.cards, g.cfg.commander_mode)
    if ll > 0:
        g.lose_life(ll, rec)
        if rec.actions:
            rec.actions[-1] += f" [-{ll} life]"
    return land not in g.hand

def _max_land_drops(g: GameState) -> int:
    n = 1
    if g.cfg.include_exploration:
        for p in g.battlefield:
            if isinstance(p.card, Exploration) and p.card.name not in g.cfg.disabled_exploration:
                n = max(n, p.card.lands_per_turn)
    return n

def _with_burst(g: GameState, mana: ManaAvailability) -> ManaAvailability:
    """Availability plus one-shot mana from burst artifacts and castable rituals in hand."""
    extra: List[ManaSource] = []
    for c in g.hand:
        if isinstance(c, ManaArtifact) and c.burst:
            extra += [ManaSource(tuple(c.produces))] * max(1, c.mana_amount)
        elif isinstance(c, Ritual) and c.net_gain > 0 and can_play_card(c, mana):
            colors = tuple(c.ritual_colors) or COLORS
            extra += [ManaSource(colors)] * c.net_gain
    if not extra:
        return mana
    sources = list(mana.sources or []) + extra
    colors = dict(mana.colors)
    for src in extra:
        for col in src.produces:
            colors[col] = colors.get(col, 0) + 1
    return ManaAvailability(total=mana.total + len(extra), colors=colors, sources=sources)

def on_curve_turn(cmc: int) -> int:
    """Turn index on which a card of this cmc is on curve; 0-drops count on the first turn."""
    return max(0, cmc - 1)

def _turn_row(g: GameState, game_idx: int) -> Dict[str, Any]:
    mana = calculate_mana_availability(g.battlefield, _idx(g))
    burst = _with_burst(g, mana)
    lands = [p for p in g.battlefield if p.is_land]
    row: Dict[str, Any] = {
        "game": game_idx,
        "turn": g.turn,
        "lands": len(lands),
        "untapped_lands": sum(1 for p in lands if not p.tapped),
        "total_mana": mana.total,
        "life_lost": g.life_lost,
        "mulligans": g.mulligans,
    }
    for c in COLORS:
        row[c] = mana.colors.get(c, 0)
    for name in g.key_cards:
        card = g.cards.get(name)
        castable = bool(card and can_play_card(card, mana))
        row[f"key:{name}"] = castable
        row[f"burst:{name}"] = bool(card and can_play_card(card, burst))
        row[f"curve:{name}"] = castable and _idx(g) == on_curve_turn(card.cmc)
    return row

def play_turn(g: GameState) -> TurnLog:
    """
    One turn: untap/upkeep/draw, first land, exploration effects, extra land
    drops, fetch activations, the cast loop, battlefield damage, cleanup.
    """
    cfg = g.cfg
    rec = start_of_turn(g)
    turn = _idx(g)

    played = 1 if _land_drop(g, rec) else 0
    cast_exploration(g.hand, g.battlefield, rec, turn, cfg)
    while played < _max_land_drops(g) and _land_drop(g, rec):
        played += 1

    ll = activate_fetch_lands(g.battlefield, g.library, g.graveyard, turn, rec,
                              g.key_cards, g.cards, cfg.commander_mode)
    g.lose_life(ll, rec)
    cast_spells(g.hand, g.battlefield, g.graveyard, rec, g.key_cards, g.cards,
                g.library, turn, cfg)

    dmg = calculate_battlefield_damage(g.battlefield, turn)
    if dmg.total > 0:
        g.lose_life(dmg.total, rec)
        for msg in dmg.breakdown:
            rec.emit(msg)

    end_of_turn(g, rec)
    return rec

def play_one(cfg, entries: Sequence[DeckEntry], game_idx: int = 0) -> Dict[str, Any]:
    g = setup(cfg, entries, random.Random(cfg.seed + game_idx))

    rows = []
    for _ in range(cfg.turns):
        play_turn(g)
        rows.append(_turn_row(g, game_idx))

    return {
        "rows": rows,
        "mulligans": g.mulligans,
        "opening_hand": g.opening_hand,
        "events": [asdict(r) for r in g.log.records],
    }

def run_many(cfg, entries: Sequence[DeckEntry], write: bool = True) -> Dict[str, Any]:
    outs = []
    for i in range(cfg.iterations):
        outs.append(play_one(cfg, entries, i))
        if cfg.progress_every and (i + 1) % cfg.progress_every == 0:
            print(f"[progress] finished {i+1}/{cfg.iterations} games")

    rows = [r for o in outs for r in o["rows"]]
    summary = summarize(cfg, rows)
    result = {
        "games": len(outs),
        "mulligans": sum(o["mulligans"] for o in outs),
        **summary,
        "example_game": outs[0]["events"] if outs else [],
    }
    if write:
        paths = write_summaries(cfg, rows)
        print(f"[summaries] wrote {', '.join(paths)}")
        result["logs"] = list(paths)
    return result
