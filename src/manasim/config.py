from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple
import argparse

MULLIGAN_STRATEGIES = ("none", "conservative", "balanced", "aggressive", "custom")
MULLIGAN_RULES = ("london", "vancouver")

@dataclass
class Config:
    seed:int=42
    iterations:int=1000
    turns:int=7
    hand_size:int=7
    deck_csv:str="deck.csv"

    # Commander: crowd lands enter untapped, draw on turn 1, first mulligan free
    commander_mode:bool=False

    # Card categories: include_* False drops the whole category from the deck,
    # disabled_* drops the named cards
    include_artifacts:bool=True
    disabled_artifacts:FrozenSet[str]=field(default_factory=frozenset)
    include_creatures:bool=True
    disabled_creatures:FrozenSet[str]=field(default_factory=frozenset)
    include_exploration:bool=True
    disabled_exploration:FrozenSet[str]=field(default_factory=frozenset)
    include_ramp_spells:bool=True
    disabled_ramp_spells:FrozenSet[str]=field(default_factory=frozenset)
    include_rituals:bool=True
    disabled_rituals:FrozenSet[str]=field(default_factory=frozenset)
    include_draw_spells:bool=True
    disabled_draw_spells:FrozenSet[str]=field(default_factory=frozenset)

    # key cards tracked for castability per turn (names as in the deck)
    key_cards:Tuple[str, ...]=()

    # Mulligans
    mulligan_strategy:str="none"
    mulligan_rule:str="london"

    # "custom" strategy: each rule is off when False / None
    mull_zero_lands:bool=True
    mull_all_lands:bool=True
    mull_min_lands:Optional[int]=None      # mulligan with fewer lands
    mull_max_lands:Optional[int]=None      # mulligan with more lands
    mull_no_play_cmc:Optional[int]=None    # mulligan without a nonland of cmc <= this

    # Flood / screw thresholds (lands on battlefield by a given turn)
    flood_lands:int=5
    flood_turn:int=5
    screw_lands:int=2
    screw_turn:int=3

    # Progress printing (0 = silent)
    progress_every:int=0
    summaries_dir:str="summaries"

    def validate(self) -> "Config":
        if self.mulligan_strategy not in MULLIGAN_STRATEGIES:
            raise ValueError(
                f"Unknown mulligan strategy {self.mulligan_strategy!r}. "
                f"Valid strategies: {list(MULLIGAN_STRATEGIES)}"
            )
        if self.mulligan_rule not in MULLIGAN_RULES:
            raise ValueError(
                f"Unknown mulligan rule {self.mulligan_rule!r}. "
                f"Valid rules: {list(MULLIGAN_RULES)}"
            )
        if self.turns < 1 or self.iterations < 1:
            raise ValueError("turns and iterations must be positive")
        if (self.mull_min_lands is not None and self.mull_max_lands is not None
                and self.mull_min_lands > self.mull_max_lands):
            raise ValueError("mull_min_lands must not exceed mull_max_lands")
        return self


def build_config_from_cli(argv=None):
    ap = argparse.ArgumentParser(description="Monte Carlo mana-base simulator")
    ap.add_argument("--deck", default="deck.csv", help="CSV of classified card records")
    ap.add_argument("--iterations", type=int, default=1000)
    ap.add_argument("--turns", type=int, default=7)
    ap.add_argument("--hand_size", type=int, default=7)
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--commander", action="store_true", help="Commander/multiplayer rules")
    ap.add_argument("--no_artifacts", action="store_true", help="Drop mana artifacts from the deck")
    ap.add_argument("--disable_artifact", action="append", default=[])
    ap.add_argument("--no_creatures", action="store_true", help="Drop mana creatures from the deck")
    ap.add_argument("--disable_creature", action="append", default=[])
    ap.add_argument("--no_exploration", action="store_true", help="Ignore extra land drops")
    ap.add_argument("--disable_exploration", action="append", default=[])
    ap.add_argument("--no_ramp", action="store_true", help="Never cast ramp spells")
    ap.add_argument("--disable_ramp", action="append", default=[], help="Ramp spell name to skip (repeatable)")
    ap.add_argument("--no_rituals", action="store_true", help="Drop rituals from the deck")
    ap.add_argument("--disable_ritual", action="append", default=[])
    ap.add_argument("--no_draw", action="store_true", help="Drop draw spells from the deck")
    ap.add_argument("--disable_draw", action="append", default=[])
    ap.add_argument("--key_card", action="append", default=[], help="Track castability of this card (repeatable)")
    ap.add_argument("--mulligan", default="none", choices=MULLIGAN_STRATEGIES)
    ap.add_argument("--mulligan_rule", default="london", choices=MULLIGAN_RULES)
    ap.add_argument("--keep_zero_lands", action="store_true", help="custom: keep 0-land hands")
    ap.add_argument("--keep_all_lands", action="store_true", help="custom: keep all-land hands")
    ap.add_argument("--mull_min_lands", type=int, default=None)
    ap.add_argument("--mull_max_lands", type=int, default=None)
    ap.add_argument("--mull_no_play_cmc", type=int, default=None)
    ap.add_argument("--progress_every", type=int, default=0)
    ap.add_argument("--summaries_dir", default="summaries")
    ap.add_argument("--no_summaries", action="store_true", help="Skip writing summary CSVs")

    args = ap.parse_args(argv)

    cfg = Config(
        seed=args.seed,
        iterations=args.iterations,
        turns=args.turns,
        hand_size=args.hand_size,
        deck_csv=args.deck,
        commander_mode=args.commander,
        include_artifacts=not args.no_artifacts,
        disabled_artifacts=frozenset(args.disable_artifact),
        include_creatures=not args.no_creatures,
        disabled_creatures=frozenset(args.disable_creature),
        include_exploration=not args.no_exploration,
        disabled_exploration=frozenset(args.disable_exploration),
        include_ramp_spells=not args.no_ramp,
        disabled_ramp_spells=frozenset(args.disable_ramp),
        include_rituals=not args.no_rituals,
        disabled_rituals=frozenset(args.disable_ritual),
        include_draw_spells=not args.no_draw,
        disabled_draw_spells=frozenset(args.disable_draw),
        key_cards=tuple(args.key_card),
        mulligan_strategy=args.mulligan,
        mulligan_rule=args.mulligan_rule,
        mull_zero_lands=not args.keep_zero_lands,
        mull_all_lands=not args.keep_all_lands,
        mull_min_lands=args.mull_min_lands,
        mull_max_lands=args.mull_max_lands,
        mull_no_play_cmc=args.mull_no_play_cmc,
        progress_every=args.progress_every,
        summaries_dir=args.summaries_dir,
    )
    return cfg.validate(), args
