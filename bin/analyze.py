#!/usr/bin/env python3
import argparse, os, sys, glob, re
import pandas as pd

RUN_RE = re.compile(r"summary_(turns|keycards|oncurve|rates)_(?P<seed>\d+)_(?P<games>\d+)games\.csv$")

def df_to_md(df: pd.DataFrame) -> str:
    # to_markdown needs tabulate
    return df.to_markdown(index=False, floatfmt=".2f")

def _filter_runs(files, run_hint, seed_filter, games_filter):
    out = []
    for p in files:
        base = os.path.basename(p)
        if run_hint and run_hint not in base:
            continue
        m = RUN_RE.search(base)
        if not m:
            continue
        if seed_filter and m.group("seed") != str(seed_filter):
            continue
        if games_filter and m.group("games") != str(games_filter):
            continue
        out.append(p)
    return out

def _pick_one(matches, prefer_latest: bool):
    if not matches:
        return None
    if prefer_latest:
        return max(matches, key=os.path.getmtime)
    return sorted(matches)[-1]

def pick_run_files(summaries_dir, run_hint=None, seed_filter=None, games_filter=None, prefer_latest=False):
    """Locate the turns/keycards/oncurve/rates CSVs of one run; returns (paths_by_kind, seed, games)."""
    found = {}
    for kind in ("turns", "keycards", "oncurve", "rates"):
        files = glob.glob(os.path.join(summaries_dir, f"summary_{kind}_*_*games.csv"))
        found[kind] = _pick_one(_filter_runs(files, run_hint, seed_filter, games_filter), prefer_latest)

    seed = games = None
    for p in found.values():
        if p:
            m = RUN_RE.search(os.path.basename(p))
            seed, games = m.group("seed"), m.group("games")
            break
    return found, seed, games

def _read(path):
    try:
        return pd.read_csv(path)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()

def build_report(found, seed=None, games=None) -> str:
    report = ["# Mana Simulation - Analysis Report", ""]
    meta = []
    if games: meta.append(f"**Games simulated:** {games}")
    if seed:  meta.append(f"**Seed:** {seed}")
    if meta:
        report.append(" | ".join(meta))
        report.append("")

    # --- Per-turn mana ---
    if found.get("turns"):
        dft = _read(found["turns"])
        report.append(f"## Mana by Turn ({os.path.basename(found['turns'])})\n")
        cols = [c for c in dft.columns if c == "turn" or c.endswith("_mean")]
        report.append(df_to_md(dft[cols]) if cols else "_No per-turn rows._")
        report.append("")

    # --- Key cards: one column per turn ---
    if found.get("keycards"):
        dfk = _read(found["keycards"])
        report.append(f"## Key Card Castability % ({os.path.basename(found['keycards'])})\n")
        if dfk.empty:
            report.append("_No key cards tracked._")
        else:
            for label, col in (("from the battlefield", "castable_pct"), ("with burst mana", "castable_with_burst_pct")):
                pivot = dfk.pivot(index="card", columns="turn", values=col).reset_index()
                pivot.columns = ["card"] + [f"T{t}" for t in pivot.columns[1:]]
                report.append(f"### {label}\n")
                report.append(df_to_md(pivot))
                report.append("")

    # --- On curve ---
    if found.get("oncurve"):
        dfc = _read(found["oncurve"])
        report.append(f"## On-Curve Castability % ({os.path.basename(found['oncurve'])})\n")
        report.append("_No key cards tracked._" if dfc.empty else df_to_md(dfc))
        report.append("")

    # --- Flood / screw ---
    if found.get("rates"):
        dfr = _read(found["rates"])
        report.append(f"## Flood / Screw ({os.path.basename(found['rates'])})\n")
        report.append(df_to_md(dfr))
        report.append("")
    return "\n".join(report)

def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--summaries_dir", default="summaries")
    ap.add_argument("--out", default="summaries/analysis_report.md")
    ap.add_argument("--run", default=None, help="Pick a specific run like 42_1000games (substring match)")
    ap.add_argument("--seed", dest="seed_filter", default=None, help="Exact seed filter (e.g. 42)")
    ap.add_argument("--games", dest="games_filter", default=None, help="Exact games filter (e.g. 1000)")
    ap.add_argument("--latest", action="store_true", help="Prefer newest-by-mtime when multiple candidates match")
    args = ap.parse_args(argv)

    found, seed, games = pick_run_files(
        args.summaries_dir, args.run, args.seed_filter, args.games_filter, args.latest
    )
    if not any(found.values()):
        print("[analyze] No matching summary CSVs found.")
        sys.exit(1)

    print("[analyze] Using:")
    for kind, p in found.items():
        print(f"  {kind:8}: {p or '-'}")

    out_path = args.out
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(build_report(found, seed, games))
    print(f"[analyze] Wrote {out_path}")

if __name__ == "__main__":
    main()
