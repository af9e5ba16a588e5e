# src/manasim/model/zones.py
from dataclasses import dataclass, field
from typing import List

from manasim.model.card import Card


@dataclass(eq=False)
class Permanent:
    card: Card
    tapped: bool = False
    summoning_sick: bool = False
    entered_tapped: bool = False

    @property
    def is_land(self) -> bool:
        return self.card.is_land


@dataclass
class Zones:
    """
    The four zones of the simulated player. Engine functions receive the
    lists themselves and mutate them in place; this object only owns them.
    """
    hand: List[Card] = field(default_factory=list)
    library: List[Card] = field(default_factory=list)
    graveyard: List[Card] = field(default_factory=list)
    battlefield: List[Permanent] = field(default_factory=list)

    def lands_in_play(self) -> List[Permanent]:
        return [p for p in self.battlefield if p.is_land]
