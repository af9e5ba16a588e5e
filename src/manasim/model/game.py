# src/manasim/model/game.py
from dataclasses import dataclass, field
from typing import Any, Dict, List
from manasim.config import Config
from manasim.model.card import Card
from manasim.model.zones import Permanent, Zones
from manasim.utils.logging import EventLog, TurnLog

@dataclass
class GameState:
    cfg: Config
    rng: Any

    # Decklist: name -> Card, used to resolve key cards
    cards: Dict[str, Card] = field(default_factory=dict)
    zones: Zones = field(default_factory=Zones)

    # Turn number, 1-based once the game starts; engine calls get turn - 1
    turn: int = 0
    life_lost: float = 0
    mulligans: int = 0
    opening_hand: List[str] = field(default_factory=list)

    # Logging
    log: EventLog = field(default_factory=EventLog)

    # Zone shortcuts
    @property
    def hand(self) -> List[Card]:
        return self.zones.hand

    @property
    def library(self) -> List[Card]:
        return self.zones.library

    @property
    def graveyard(self) -> List[Card]:
        return self.zones.graveyard

    @property
    def battlefield(self) -> List[Permanent]:
        return self.zones.battlefield

    @property
    def key_cards(self) -> List[str]:
        return list(self.cfg.key_cards)

    def begin_turn_log(self) -> TurnLog:
        """Start the action log for the current turn and record it on the game."""
        rec = TurnLog(turn=self.turn)
        self.log.emit(rec)
        return rec

    def lose_life(self, amount: float, rec: TurnLog) -> None:
        self.life_lost += amount
        rec.life_loss += amount
