from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional


class RaffleState(IntEnum):
    OPEN = 0
    CALCULATING = 1


@dataclass
class Round:
    """State of the current round, owned by the Raffle that created it"""

    entrance_fee: int
    interval: int
    last_timestamp: int
    state: RaffleState = RaffleState.OPEN
    players: List[str] = field(default_factory=list)
    balance: int = 0


@dataclass
class WinnerRecord:
    address: Optional[str] = None
    payout: int = 0
