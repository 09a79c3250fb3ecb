"""
Randomness request/fulfillment correlation
A request and its fulfillment arrive in separate transactions; the pending
map ties them together by request id
"""

import logging
from dataclasses import dataclass

from .exceptions import RaffleInvariantError, UnknownRequest
from .round import RaffleState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingRequest:
    request_id: int
    player_count: int
    balance: int
    requested_at: int


class RandomnessBridge:
    def __init__(self, round_, ledger, payout, winner, request_words, now, emit):
        self.round = round_
        self.ledger = ledger
        self.payout = payout
        self.winner = winner
        self._request_words = request_words
        self._now = now
        self._emit = emit
        self.pending = {}

    def request_randomness(self):
        """Ask the coordinator for a random word and remember the round it is for"""
        request_id = self._request_words()
        if request_id in self.pending:
            raise RaffleInvariantError(f'Coordinator reused request id {request_id}')
        self.pending[request_id] = PendingRequest(
            request_id=request_id,
            player_count=self.ledger.player_count(),
            balance=self.ledger.balance,
            requested_at=self._now(),
        )
        logger.info(f'Requested randomness, request id {request_id}')
        return request_id

    def fulfill(self, request_id, random_value):
        """
        Resolve the round a request was made for

        Args:
            request_id: Id returned by request_randomness
            random_value: Unsigned integer supplied by the oracle

        Returns:
            str: Address of the winner

        Raises:
            UnknownRequest: the id was never issued or is already fulfilled
            TransferFailed: the winner refused the payout; the request stays
                pending so the fulfillment can be delivered again
            RaffleInvariantError: the round has no players or its pot changed
                since the request
        """
        pending = self.pending.get(request_id)
        if pending is None:
            raise UnknownRequest(request_id=request_id)
        if pending.player_count == 0:
            raise RaffleInvariantError(f'Request {request_id} was made for a round without players')
        if self.ledger.balance != pending.balance:
            raise RaffleInvariantError(
                f'Pot changed from {pending.balance} to {self.ledger.balance} wei while request {request_id} was pending'
            )

        winner = self.ledger.player_at(random_value % pending.player_count)
        amount = self.payout.payout(winner)

        del self.pending[request_id]
        self.winner.address = winner
        self.winner.payout = amount
        self.round.state = RaffleState.OPEN
        self.round.last_timestamp = self._now()
        waited = self.round.last_timestamp - pending.requested_at
        logger.info(f'Request {request_id} fulfilled after {waited}s, winner {winner} received {amount} wei')
        self._emit('WinnerPicked', winner=winner, payout=amount)
        return winner
