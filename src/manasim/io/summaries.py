# src/manasim/io/summaries.py
from __future__ import annotations
import os
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd

from manasim.constants import COLORS

STAT_COLS = ["lands", "untapped_lands", "total_mana", *COLORS, "life_lost"]
TURN_COLS = ["turn"] + [f"{c}_{agg}" for c in STAT_COLS for agg in ("mean", "std")]
KEY_COLS = ["card", "turn", "castable_pct", "castable_with_burst_pct"]
CURVE_COLS = ["card", "on_curve_pct"]


def per_turn_table(rows: List[Dict[str,Any]]) -> pd.DataFrame:
    """Mean/std of every per-turn stat across games, one row per turn."""
    if not rows:
        return pd.DataFrame(columns=TURN_COLS)
    df = pd.DataFrame(rows)
    agg = df.groupby("turn")[STAT_COLS].agg(["mean", "std"])
    agg.columns = [f"{c}_{a}" for c, a in agg.columns]
    # std of a single game is NaN; report it as 0
    agg = agg.fillna(0).reset_index()
    return agg[TURN_COLS]


def key_card_table(rows: List[Dict[str,Any]], key_cards) -> pd.DataFrame:
    out = []
    if rows:
        df = pd.DataFrame(rows)
        for name in key_cards:
            plain, burst = f"key:{name}", f"burst:{name}"
            if plain not in df.columns:
                continue
            pct = df.groupby("turn")[[plain, burst]].mean() * 100
            for turn, r in pct.iterrows():
                out.append({
                    "card": name,
                    "turn": int(turn),
                    "castable_pct": float(r[plain]),
                    "castable_with_burst_pct": float(r[burst]),
                })
    if not out:
        return pd.DataFrame(columns=KEY_COLS)
    return pd.DataFrame(out)[KEY_COLS]


def on_curve_table(rows: List[Dict[str,Any]], key_cards) -> pd.DataFrame:
    """Percent of games in which each key card was castable on its own curve turn."""
    out = []
    if rows:
        df = pd.DataFrame(rows)
        games = df["game"].nunique()
        for name in key_cards:
            col = f"curve:{name}"
            if col not in df.columns:
                continue
            out.append({"card": name, "on_curve_pct": 100.0 * float(df[col].sum()) / games})
    if not out:
        return pd.DataFrame(columns=CURVE_COLS)
    return pd.DataFrame(out)[CURVE_COLS]


def _rate(rows: List[Dict[str,Any]], turn: int, hit) -> Optional[float]:
    at = [r["lands"] for r in rows if r["turn"] == turn]
    if not at:
        return None
    return 100.0 * sum(1 for n in at if hit(n)) / len(at)


def flood_screw_rates(cfg, rows: List[Dict[str,Any]]) -> Tuple[Optional[float], Optional[float]]:
    """Percent of games with >= flood_lands by flood_turn, and <= screw_lands by screw_turn."""
    flood = _rate(rows, cfg.flood_turn, lambda n: n >= cfg.flood_lands)
    screw = _rate(rows, cfg.screw_turn, lambda n: n <= cfg.screw_lands)
    return flood, screw


def summarize(cfg, rows: List[Dict[str,Any]]) -> Dict[str,Any]:
    flood, screw = flood_screw_rates(cfg, rows)
    return {
        "per_turn": per_turn_table(rows).to_dict(orient="records"),
        "key_cards": key_card_table(rows, cfg.key_cards).to_dict(orient="records"),
        "on_curve": on_curve_table(rows, cfg.key_cards).to_dict(orient="records"),
        "flood_rate": flood,
        "screw_rate": screw,
        "flood_threshold": {"lands": cfg.flood_lands, "turn": cfg.flood_turn},
        "screw_threshold": {"lands": cfg.screw_lands, "turn": cfg.screw_turn},
    }


def write_summaries(cfg, rows: List[Dict[str,Any]]) -> Tuple[str,str,str,str]:
    out_dir = getattr(cfg, "summaries_dir", "summaries")
    os.makedirs(out_dir, exist_ok=True)
    tag = f"{cfg.seed}_{cfg.iterations}games"
    turns_path = os.path.join(out_dir, f"summary_turns_{tag}.csv")
    keys_path  = os.path.join(out_dir, f"summary_keycards_{tag}.csv")
    curve_path = os.path.join(out_dir, f"summary_oncurve_{tag}.csv")
    rates_path = os.path.join(out_dir, f"summary_rates_{tag}.csv")

    per_turn_table(rows).to_csv(turns_path, index=False)
    key_card_table(rows, cfg.key_cards).to_csv(keys_path, index=False)
    on_curve_table(rows, cfg.key_cards).to_csv(curve_path, index=False)

    flood, screw = flood_screw_rates(cfg, rows)
    pd.DataFrame([
        {"metric": "flood", "lands": cfg.flood_lands, "turn": cfg.flood_turn, "rate_pct": flood},
        {"metric": "screw", "lands": cfg.screw_lands, "turn": cfg.screw_turn, "rate_pct": screw},
    ]).to_csv(rates_path, index=False)
    return turns_path, keys_path, curve_path, rates_path
