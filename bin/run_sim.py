#!/usr/bin/env python3
from manasim.config import build_config_from_cli
from manasim.engine.loop import run_many
from manasim.io.load_cards import load_deck
import json

if __name__ == "__main__":
    cfg, args = build_config_from_cli()
    deck = load_deck(cfg.deck_csv)
    out = run_many(cfg, deck, write=not args.no_summaries)
    print(json.dumps(out, indent=2, default=str))
