"""
Mock VRF coordinator for local networks
Keeps subscriptions and pending requests, and lets a test (or script) play
the oracle by fulfilling requests on demand
"""

import logging
from dataclasses import dataclass, field

from web3 import Web3

from .chain import Contract, to_address, transaction
from .exceptions import (
    InsufficientBalance,
    InvalidConsumer,
    InvalidSubscription,
    TooManyWords,
    UnknownRequest,
    VirtualMachineError,
)

logger = logging.getLogger(__name__)

MAX_NUM_WORDS = 500
MAX_CONSUMERS = 100

BASE_FEE = Web3.to_wei(0.25, 'ether')  # 0.25 LINK per request
GAS_PRICE_LINK = 10**9  # LINK per gas


@dataclass
class Subscription:
    owner: str
    balance: int = 0
    req_count: int = 0
    consumers: list = field(default_factory=list)


@dataclass
class Request:
    sub_id: int
    callback_gas_limit: int
    num_words: int
    sender: str


class VRFCoordinatorV2Mock(Contract):
    def __init__(self, chain, owner, base_fee=BASE_FEE, gas_price_link=GAS_PRICE_LINK):
        super().__init__(chain, owner)
        self.base_fee = base_fee
        self.gas_price_link = gas_price_link
        self.subscriptions = {}
        self.requests = {}
        self._next_sub_id = 1
        self._next_request_id = 1

    def _emit(self, name, **args):
        return self.chain.emit(self, name, **args)

    def _subscription(self, sub_id):
        subscription = self.subscriptions.get(sub_id)
        if subscription is None:
            raise InvalidSubscription(sub_id=sub_id)
        return subscription

    @transaction
    def create_subscription(self, msg):
        sub_id = self._next_sub_id
        self._next_sub_id += 1
        self.subscriptions[sub_id] = Subscription(owner=msg.sender)
        self._emit('SubscriptionCreated', subId=sub_id, owner=msg.sender)
        return sub_id

    @transaction
    def fund_subscription(self, sub_id, amount, msg):
        subscription = self._subscription(sub_id)
        old_balance = subscription.balance
        subscription.balance += amount
        self._emit('SubscriptionFunded', subId=sub_id, oldBalance=old_balance, newBalance=subscription.balance)

    @transaction
    def add_consumer(self, sub_id, consumer, msg):
        subscription = self._subscription(sub_id)
        consumer = to_address(consumer)
        if consumer in subscription.consumers:
            return
        if len(subscription.consumers) >= MAX_CONSUMERS:
            raise VirtualMachineError('TooManyConsumers')
        subscription.consumers.append(consumer)
        self._emit('ConsumerAdded', subId=sub_id, consumer=consumer)

    @transaction
    def remove_consumer(self, sub_id, consumer, msg):
        subscription = self._subscription(sub_id)
        consumer = to_address(consumer)
        if consumer not in subscription.consumers:
            raise InvalidConsumer(sub_id=sub_id, consumer=consumer)
        subscription.consumers.remove(consumer)
        self._emit('ConsumerRemoved', subId=sub_id, consumer=consumer)

    def get_subscription(self, sub_id):
        """(balance, req_count, owner, consumers) of a subscription"""
        subscription = self._subscription(sub_id)
        return subscription.balance, subscription.req_count, subscription.owner, list(subscription.consumers)

    def consumer_is_added(self, sub_id, consumer):
        return to_address(consumer) in self._subscription(sub_id).consumers

    @transaction
    def request_random_words(self, key_hash, sub_id, minimum_request_confirmations, callback_gas_limit, num_words, msg):
        subscription = self._subscription(sub_id)
        if msg.sender not in subscription.consumers:
            raise InvalidConsumer(sub_id=sub_id, consumer=msg.sender)
        if num_words > MAX_NUM_WORDS:
            raise TooManyWords(num_words=num_words)

        request_id = self._next_request_id
        self._next_request_id += 1
        self.requests[request_id] = Request(
            sub_id=sub_id,
            callback_gas_limit=callback_gas_limit,
            num_words=num_words,
            sender=msg.sender,
        )
        subscription.req_count += 1
        self._emit(
            'RandomWordsRequested',
            keyHash=key_hash,
            requestId=request_id,
            preSeed=request_id,
            subId=sub_id,
            minimumRequestConfirmations=minimum_request_confirmations,
            callbackGasLimit=callback_gas_limit,
            numWords=num_words,
            sender=msg.sender,
        )
        return request_id

    def payment_for(self, request_id):
        request = self.requests.get(request_id)
        if request is None:
            raise UnknownRequest(request_id=request_id)
        return self.base_fee + self.gas_price_link * request.callback_gas_limit

    @staticmethod
    def derive_words(request_id, num_words):
        """keccak256(abi.encode(requestId, i)) for each word"""
        return [
            int.from_bytes(Web3.solidity_keccak(['uint256', 'uint256'], [request_id, i]), 'big')
            for i in range(num_words)
        ]

    @transaction
    def fulfill_random_words(self, request_id, consumer, msg):
        return self._fulfill(request_id, consumer, None)

    @transaction
    def fulfill_random_words_with_override(self, request_id, consumer, words, msg):
        return self._fulfill(request_id, consumer, list(words))

    def _fulfill(self, request_id, consumer, words):
        request = self.requests.get(request_id)
        if request is None:
            raise UnknownRequest(request_id=request_id)
        if to_address(consumer) != request.sender:
            raise InvalidConsumer(sub_id=request.sub_id, consumer=to_address(consumer))
        if words is None:
            words = self.derive_words(request_id, request.num_words)
        elif len(words) != request.num_words:
            raise VirtualMachineError('InvalidRandomWords')

        subscription = self._subscription(request.sub_id)
        payment = self.payment_for(request_id)
        if subscription.balance < payment:
            raise InsufficientBalance(sub_id=request.sub_id, balance=subscription.balance, payment=payment)

        # a failing callback reverts the whole fulfillment, so the request
        # can be fulfilled again
        self.chain.at(consumer).raw_fulfill_random_words(request_id, words, {'from': self})

        del self.requests[request_id]
        subscription.balance -= payment
        self._emit('RandomWordsFulfilled', requestId=request_id, outputSeed=request_id, payment=payment, success=True)
        logger.info(f'Fulfilled request {request_id} for {request.sender}, charged {payment}')
        return payment
