from dataclasses import dataclass, field
from typing import List


@dataclass
class TurnLog:
    turn: int
    actions: List[str] = field(default_factory=list)
    life_loss: float = 0

    def emit(self, msg: str) -> None:
        self.actions.append(msg)


class EventLog:
    def __init__(self) -> None:
        self.records: List[TurnLog] = []
    def emit(self, rec: TurnLog) -> None:
        self.records.append(rec)
