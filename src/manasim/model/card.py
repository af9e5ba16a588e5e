# src/manasim/model/card.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# Keep model layer decoupled from constants to avoid circular imports.
_ANY = "any"


class LandArchetype(Enum):
    """Mutually exclusive land behaviours the engine knows how to resolve."""
    PLAIN = "plain"
    FETCH = "fetch"
    BOUNCE = "bounce"
    SHOCK = "shock"
    FAST = "fast"
    BATTLE = "battle"
    CHECK = "check"
    CROWD = "crowd"
    SLOW = "slow"
    FILTER = "filter"
    ODYSSEY_FILTER = "odyssey_filter"
    HORIZON = "horizon"
    VERGE = "verge"
    MDFC = "mdfc"
    THRIVING = "thriving"
    PAIN = "pain"
    FIVE_COLOR_PAIN = "five_color_pain"
    ALWAYS_PAINFUL = "always_painful"          # Ancient Tomb
    SACRIFICE_ON_LAND = "sacrifice_on_land"    # City of Traitors
    SWAMP_SCALING = "swamp_scaling"            # Cabal Coffers
    BASIC_SWAMP_SCALING = "basic_swamp_scaling"  # Cabal Stronghold
    PHYREXIAN_TOWER = "phyrexian_tower"
    TEMPLE_FALSE_GOD = "temple_false_god"
    TURN_SCALING = "turn_scaling"              # Gaea's Cradle, Nykthos (simplified)

    @classmethod
    def parse(cls, value: Optional[str]) -> "LandArchetype":
        s = (value or "").strip().lower().replace("-", "_").replace(" ", "_")
        for a in cls:
            if a.value == s:
                return a
        return cls.PLAIN


@dataclass(frozen=True)
class FetchAbility:
    colors: Tuple[str, ...] = ()
    only_basics: bool = False
    hideaway: bool = False
    cost: int = 0
    fetch_type: str = "classic"       # classic | free | slow | free_slow
    fetched_enters_tapped: bool = False


# Cards compare by identity: two Forests in a library are two different cards.

@dataclass(frozen=True, eq=False)
class Card:
    name: str
    cmc: int = 0
    mana_cost: str = ""
    is_legendary: bool = False

    kind = "spell"

    @property
    def is_land(self) -> bool:
        return False

    @property
    def produces_mana(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


@dataclass(frozen=True, eq=False)
class Land(Card):
    archetype: LandArchetype = LandArchetype.PLAIN
    produces: Tuple[str, ...] = ()
    mana_amount: int = 1
    is_basic: bool = False
    subtypes: Tuple[str, ...] = ()
    enters_tapped_always: Optional[bool] = None
    lifeloss: Optional[int] = None
    check_types: Tuple[str, ...] = ()
    verge_requires: Optional[str] = None
    fetch: Optional[FetchAbility] = None
    mana_floor: int = 1                # TURN_SCALING: minimum output

    kind = "land"

    @property
    def is_land(self) -> bool:
        return True

    @property
    def produces_mana(self) -> bool:
        return bool(self.produces)

    @property
    def is_fetch(self) -> bool:
        return self.archetype is LandArchetype.FETCH

    @property
    def is_bounce(self) -> bool:
        return self.archetype is LandArchetype.BOUNCE

    @property
    def is_shock(self) -> bool:
        return self.archetype is LandArchetype.SHOCK

    @property
    def fetch_ability(self) -> FetchAbility:
        """Fetch payload; a fetch land with none recorded searches for nothing."""
        return self.fetch or FetchAbility()


@dataclass(frozen=True, eq=False)
class ManaArtifact(Card):
    produces: Tuple[str, ...] = ("C",)
    mana_amount: int = 1
    enters_tapped: bool = False
    etb_cost: Optional[str] = None     # discard_land | imprint_nonland | discard_hand | sacrifice
    condition: Optional[str] = None    # metalcraft | legendary
    mox_priority: bool = False
    burst: bool = False
    is_talisman: bool = False
    coin_flip: bool = False
    lifeloss: Optional[int] = None
    doesnt_untap: bool = False         # Mana Vault, Grim Monolith, Basalt Monolith
    upkeep_damage: int = 0             # life lost each upkeep while tapped (Mana Vault)

    kind = "artifact"

    @property
    def produces_mana(self) -> bool:
        return True


@dataclass(frozen=True, eq=False)
class ManaCreature(Card):
    produces: Tuple[str, ...] = ("G",)
    mana_amount: int = 1
    enters_tapped: bool = False

    kind = "creature"

    @property
    def produces_mana(self) -> bool:
        return True


@dataclass(frozen=True, eq=False)
class Exploration(Card):
    lands_per_turn: int = 2
    is_creature: bool = False
    is_artifact: bool = False
    enters_tapped: bool = False

    kind = "exploration"


@dataclass(frozen=True, eq=False)
class RampSpell(Card):
    lands_to_add: int = 1
    lands_tapped: bool = True
    lands_to_hand: int = 0
    sacrifice_land: bool = False
    fetch_filter: str = "basic"        # any | basic | subtype | snow
    fetch_subtypes: Tuple[str, ...] = ()

    kind = "ramp"


@dataclass(frozen=True, eq=False)
class Ritual(Card):
    net_gain: int = 0
    ritual_colors: Tuple[str, ...] = ()

    kind = "ritual"


@dataclass(frozen=True, eq=False)
class DrawSpell(Card):
    """
    Card draw. A one-time spell draws `cards_drawn` when it resolves; a
    permanent with `per_turn` > 0 stays in play and draws that many cards on
    average each upkeep (the fractional part is a coin weighted by it).
    """
    cards_drawn: int = 1
    per_turn: float = 0.0

    kind = "draw"

    @property
    def stays_on_battlefield(self) -> bool:
        return self.per_turn > 0


def produces_color(card: Card, color: str) -> bool:
    produces = getattr(card, "produces", ())
    return color in produces or _ANY in produces


@dataclass(frozen=True)
class DeckEntry:
    card: Card
    quantity: int = 1
