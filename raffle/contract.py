"""
Raffle contract
Players buy in with at least the entrance fee; once the interval has passed
an upkeep closes the round and asks the VRF coordinator for a random word,
and the fulfillment pays the whole pot to the winner
"""

import logging

from .bridge import RandomnessBridge
from .chain import Contract, to_address, transaction
from .exceptions import OnlyCoordinatorCanFulfill, UpkeepNotNeeded
from .ledger import EntryLedger
from .payout import PayoutExecutor
from .round import RaffleState, Round, WinnerRecord
from .timing import is_due

logger = logging.getLogger(__name__)

REQUEST_CONFIRMATIONS = 3
NUM_WORDS = 1


class Raffle(Contract):
    def __init__(
        self,
        chain,
        owner,
        vrf_coordinator,
        subscription_id,
        gas_lane,
        interval,
        entrance_fee,
        callback_gas_limit,
    ):
        super().__init__(chain, owner)
        self.vrf_coordinator = vrf_coordinator
        self.subscription_id = subscription_id
        self.gas_lane = gas_lane
        self.callback_gas_limit = callback_gas_limit

        self.round = Round(entrance_fee=entrance_fee, interval=interval, last_timestamp=chain.time())
        self.recent_winner = WinnerRecord()
        self.ledger = EntryLedger(self.round, self._emit)
        self.payout = PayoutExecutor(self.ledger, self._send)
        self.bridge = RandomnessBridge(
            self.round,
            self.ledger,
            self.payout,
            self.recent_winner,
            request_words=self._request_random_words,
            now=chain.time,
            emit=self._emit,
        )

    def _emit(self, name, **args):
        return self.chain.emit(self, name, **args)

    def _send(self, recipient, amount):
        return self.chain.transfer(self.address, recipient, amount)

    def _request_random_words(self):
        return self.vrf_coordinator.request_random_words(
            self.gas_lane,
            self.subscription_id,
            REQUEST_CONFIRMATIONS,
            self.callback_gas_limit,
            NUM_WORDS,
            {'from': self},
        )

    @transaction(payable=True)
    def enter_raffle(self, msg):
        self.ledger.enter(msg.sender, msg.value)

    def check_upkeep(self, check_data=b''):
        """
        Whether the round can be closed

        True when the raffle is open, has players and funds, and the
        interval has passed since the last winner was picked. Safe to call
        at any time, it changes nothing.

        Returns:
            tuple: (upkeep_needed, perform_data)
        """
        upkeep_needed = (
            self.round.state == RaffleState.OPEN
            and self.ledger.player_count() > 0
            and self.ledger.balance > 0
            and is_due(self.chain.time(), self.round.last_timestamp, self.round.interval)
        )
        return upkeep_needed, b''

    @transaction
    def perform_upkeep(self, perform_data=b'', msg=None):
        upkeep_needed, _ = self.check_upkeep(b'')
        if not upkeep_needed:
            raise UpkeepNotNeeded(self.ledger.balance, self.ledger.player_count(), self.round.state)

        request_id = self.bridge.request_randomness()
        self.round.state = RaffleState.CALCULATING
        self._emit('RandomnessRequested', requestId=request_id)
        return request_id

    @transaction
    def raw_fulfill_random_words(self, request_id, random_words, msg):
        if msg.sender != to_address(self.vrf_coordinator):
            raise OnlyCoordinatorCanFulfill(have=msg.sender, want=to_address(self.vrf_coordinator))
        return self.bridge.fulfill(request_id, random_words[0])

    # Getters

    def get_entrance_fee(self):
        return self.round.entrance_fee

    def get_interval(self):
        return self.round.interval

    def get_raffle_state(self):
        return self.round.state

    def get_player(self, index):
        return self.ledger.player_at(index)

    def get_num_players(self):
        return self.ledger.player_count()

    def get_recent_winner(self):
        return self.recent_winner.address

    def get_recent_payout(self):
        return self.recent_winner.payout

    def get_latest_timestamp(self):
        return self.round.last_timestamp

    def get_subscription_id(self):
        return self.subscription_id

    def get_pending_request_ids(self):
        return sorted(self.bridge.pending)

    def get_num_words(self):
        return NUM_WORDS

    def get_request_confirmations(self):
        return REQUEST_CONFIRMATIONS
