"""
In-process development chain
Accounts with ether balances, a controllable clock, contract deployment and
transaction execution with receipts and an event history
"""

import copy
import functools
import logging
import time as _time
from collections import defaultdict, namedtuple

from web3 import Web3

from .events import Event, TransactionReceipt
from .exceptions import VirtualMachineError

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = 10
DEFAULT_BALANCE = Web3.to_wei(100, 'ether')

Msg = namedtuple('Msg', ['sender', 'value'])


def to_address(value):
    """Checksum address of an account, contract or address string"""
    if value is None:
        return None
    if isinstance(value, (Account, Contract)):
        return value.address
    return Web3.to_checksum_address(value)


def _derive_address(seed):
    digest = Web3.keccak(text=seed)
    return Web3.to_checksum_address(Web3.to_hex(digest[-20:]))


class Account:
    """An externally owned account on a LocalChain"""

    def __init__(self, chain, address):
        self.chain = chain
        self.address = address
        # set False to make incoming payments fail, like a contract that reverts on receive
        self.accepts_payments = True

    def balance(self):
        return self.chain.balance_of(self.address)

    def transfer(self, to, amount):
        """Send ether to another account or contract"""
        return self.chain.send(self, to, amount)

    def __eq__(self, other):
        if isinstance(other, (str, Account, Contract)):
            try:
                return self.address == to_address(other)
            except ValueError:
                return False
        return NotImplemented

    def __hash__(self):
        return hash(self.address)

    def __str__(self):
        return self.address

    def __repr__(self):
        return f'<Account {self.address}>'


class Contract:
    """Base class for contracts living on a LocalChain"""

    # plain ether transfers are refused unless a contract opts in
    receive = False

    def __init__(self, chain, owner):
        self.chain = chain
        self.owner = to_address(owner)
        self.address = chain.register(self)
        self.tx = None

    @classmethod
    def deploy(cls, chain, *args):
        return chain.deploy(cls, *args)

    def balance(self):
        return self.chain.balance_of(self.address)

    def __eq__(self, other):
        if isinstance(other, (str, Account, Contract)):
            try:
                return self.address == to_address(other)
            except ValueError:
                return False
        return NotImplemented

    def __hash__(self):
        return hash(self.address)

    def __str__(self):
        return self.address

    def __repr__(self):
        return f'<{type(self).__name__} {self.address}>'


def transaction(fn=None, *, payable=False):
    """Run a contract method as a transaction.

    The last positional argument may be a transaction parameter dict,
    `{"from": account, "value": amount}`. The method receives it as `msg`.
    A top-level call returns a TransactionReceipt; a call made from inside
    another transaction returns the method's own return value.
    """
    if fn is None:
        return functools.partial(transaction, payable=payable)

    @functools.wraps(fn)
    def wrapper(self, *args):
        params = {}
        if args and isinstance(args[-1], dict):
            params = args[-1]
            args = args[:-1]
        chain = self.chain
        sender = to_address(params.get('from')) or chain.accounts[0].address
        value = params.get('value', 0)
        if value and not payable:
            raise VirtualMachineError(f'{fn.__name__} is not payable')
        msg = Msg(sender, value)
        return chain.execute(self, fn.__name__, msg, lambda: fn(self, *args, msg=msg))

    return wrapper


class LocalChain:
    """A single-process chain with instant mining.

    Time only moves when `sleep` is called, so tests decide exactly when an
    interval has elapsed.
    """

    def __init__(self, num_accounts=DEFAULT_ACCOUNTS, initial_balance=DEFAULT_BALANCE, start_time=None):
        self._time = int(_time.time()) if start_time is None else int(start_time)
        self.height = 0
        self.history = []
        self.deployments = defaultdict(list)
        self._balances = defaultdict(int)
        self._payees = {}
        self._journal = None
        self._nonce = 0
        self.accounts = []
        for _ in range(num_accounts):
            self.add_account(initial_balance)

    # Clock

    def time(self):
        return self._time

    def sleep(self, seconds):
        self._time += int(seconds)

    def mine(self, blocks=1, timestamp=None):
        if timestamp is not None:
            if timestamp < self._time:
                raise ValueError('Cannot mine a block in the past')
            self._time = int(timestamp)
        self.height += blocks
        return self.height

    # Accounts and balances

    def add_account(self, balance=0):
        account = Account(self, _derive_address(f'account:{len(self.accounts)}'))
        self.accounts.append(account)
        self._payees[account.address] = account
        self._balances[account.address] = balance
        return account

    def register(self, contract):
        self._nonce += 1
        address = _derive_address(f'contract:{self._nonce}')
        self._payees[address] = contract
        return address

    def at(self, address):
        """The account or contract registered at an address"""
        address = to_address(address)
        try:
            return self._payees[address]
        except KeyError:
            raise ValueError(f'No account or contract at {address}') from None

    def balance_of(self, address):
        return self._balances[to_address(address)]

    def _accepts(self, recipient):
        payee = self._payees.get(recipient)
        if payee is None:
            return True
        if isinstance(payee, Contract):
            return payee.receive
        return payee.accepts_payments

    def transfer(self, sender, recipient, amount, payable_call=False):
        """Move ether between addresses.

        Returns False without moving anything if the recipient refuses the
        payment. Contracts refuse plain transfers unless they set `receive`;
        `payable_call` is the value sent along with a payable method call.
        A sender without enough ether is an error.
        """
        sender = to_address(sender)
        recipient = to_address(recipient)
        if amount < 0:
            raise ValueError('Cannot transfer a negative amount')
        if self._balances[sender] < amount:
            raise VirtualMachineError("sender doesn't have enough funds to send tx")
        if not payable_call and not self._accepts(recipient):
            logger.info(f'{recipient} rejected a payment of {amount} wei')
            return False
        self._balances[sender] -= amount
        self._balances[recipient] += amount
        return True

    def send(self, sender, recipient, amount):
        """Plain ether transfer as its own transaction"""
        sender = to_address(sender)

        def _send():
            if not self.transfer(sender, recipient, amount):
                raise VirtualMachineError('Transfer rejected by recipient')

        return self.execute(None, 'transfer', Msg(sender, 0), _send, receiver=to_address(recipient))

    # Contracts and transactions

    def deploy(self, contract_class, *args):
        params = {}
        if args and isinstance(args[-1], dict):
            params = args[-1]
            args = args[:-1]
        owner = to_address(params.get('from')) or self.accounts[0].address
        deployed = []

        def _construct():
            contract = contract_class(self, owner, *args)
            deployed.append(contract)
            return contract.address

        tx = self.execute(None, 'constructor', Msg(owner, 0), _construct)
        contract = deployed[0]
        contract.tx = tx
        self.deployments[contract_class.__name__].append(contract)
        logger.debug(f'{contract_class.__name__} deployed at {contract.address}')
        return contract

    def execute(self, contract, fn_name, msg, call, receiver=None):
        if self._journal is not None:
            # internal call: part of the enclosing transaction
            if msg.value:
                self._move_value(msg, contract)
            return call()

        self._journal = []
        balances = dict(self._balances)
        snapshot = self._snapshot()
        try:
            if msg.value:
                self._move_value(msg, contract)
            return_value = call()
        except Exception as e:
            self._balances = defaultdict(int, balances)
            self._restore(snapshot)
            name = type(contract).__name__ if contract is not None else 'chain'
            logger.warning(f'{name}.{fn_name} reverted: {e}')
            raise
        finally:
            events = self._journal
            self._journal = None

        self.height += 1
        for event in events:
            event.block_number = self.height
        if receiver is None and contract is not None:
            receiver = contract.address
        tx = TransactionReceipt(
            txid=Web3.to_hex(Web3.keccak(text=f'{self.height}:{fn_name}:{msg.sender}')),
            fn_name=fn_name,
            sender=msg.sender,
            receiver=receiver,
            value=msg.value,
            block_number=self.height,
            timestamp=self._time,
            events=events,
            return_value=return_value,
        )
        self.history.append(tx)
        return tx

    def _snapshot(self):
        """Copies of every contract's fields, restored if the transaction reverts"""
        # accounts, contracts and the chain itself are shared, not copied
        memo = {id(self): self}
        for payee in self._payees.values():
            memo[id(payee)] = payee
        contracts = [payee for payee in self._payees.values() if isinstance(payee, Contract)]
        state = [(contract, copy.deepcopy(contract.__dict__, memo)) for contract in contracts]
        return state, dict(self._payees), self._nonce

    def _restore(self, snapshot):
        state, payees, nonce = snapshot
        for contract, fields in state:
            contract.__dict__.clear()
            contract.__dict__.update(fields)
        self._payees = payees
        self._nonce = nonce

    def _move_value(self, msg, contract):
        if not self.transfer(msg.sender, contract.address, msg.value, payable_call=True):
            raise VirtualMachineError('Transfer rejected by recipient')

    def emit(self, contract, name, **args):
        if self._journal is None:
            raise RuntimeError('Events can only be emitted inside a transaction')
        event = Event(name, contract.address, args)
        self._journal.append(event)
        logger.debug(f'{type(contract).__name__} emitted {name} {args}')
        return event

    def get_events(self, name=None, address=None, from_block=0):
        """All events in mined transactions, oldest first"""
        address = to_address(address)
        return [
            event
            for tx in self.history
            if tx.block_number >= from_block
            for event in tx.events
            if (name is None or event.event == name) and (address is None or event.address == address)
        ]
