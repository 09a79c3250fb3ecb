import logging

from .exceptions import IndexOutOfRange, InsufficientFunds, RoundNotOpen
from .round import RaffleState

logger = logging.getLogger(__name__)


class EntryLedger:
    """Players and collected funds of the current round"""

    def __init__(self, round_, emit):
        self.round = round_
        self._emit = emit

    def enter(self, address, amount):
        """
        Add a player to the round

        Args:
            address: Checksum address of the player
            amount: Wei paid with the entry, at least the entrance fee

        Raises:
            InsufficientFunds: amount is below the entrance fee
            RoundNotOpen: the round is waiting for its winner
        """
        if amount < self.round.entrance_fee:
            raise InsufficientFunds()
        if self.round.state != RaffleState.OPEN:
            raise RoundNotOpen()

        self.round.players.append(address)
        self.round.balance += amount
        logger.info(f'{address} entered with {amount} wei ({len(self.round.players)} players)')
        self._emit('PlayerEntered', player=address)

    def reset(self):
        self.round.players = []
        self.round.balance = 0

    @property
    def balance(self):
        return self.round.balance

    def player_count(self):
        return len(self.round.players)

    def player_at(self, index):
        if index < 0 or index >= len(self.round.players):
            raise IndexOutOfRange(index=index)
        return self.round.players[index]
