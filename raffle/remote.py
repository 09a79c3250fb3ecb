"""
Client for a Raffle deployed on a live network
Exposes the same getters as the local contract over JSON-RPC
"""

import logging
import time

from web3 import Web3

from .round import RaffleState

logger = logging.getLogger(__name__)


def _view(name, outputs, inputs=()):
    return {
        'type': 'function',
        'name': name,
        'stateMutability': 'view',
        'inputs': [{'name': f'arg{i}', 'type': t} for i, t in enumerate(inputs)],
        'outputs': [{'name': '', 'type': t} for t in outputs],
    }


RAFFLE_ABI = [
    {'type': 'function', 'name': 'enterRaffle', 'stateMutability': 'payable', 'inputs': [], 'outputs': []},
    _view('getEntranceFee', ['uint256']),
    _view('getInterval', ['uint256']),
    _view('getRaffleState', ['uint8']),
    _view('getPlayer', ['address'], inputs=['uint256']),
    _view('getNumPlayers', ['uint256']),
    _view('getRecentWinner', ['address']),
    _view('getLastTimeStamp', ['uint256']),
    _view('checkUpkeep', ['bool', 'bytes'], inputs=['bytes']),
    {
        'type': 'event',
        'name': 'PlayerEntered',
        'anonymous': False,
        'inputs': [{'name': 'player', 'type': 'address', 'indexed': True}],
    },
    {
        'type': 'event',
        'name': 'RandomnessRequested',
        'anonymous': False,
        'inputs': [{'name': 'requestId', 'type': 'uint256', 'indexed': True}],
    },
    {
        'type': 'event',
        'name': 'WinnerPicked',
        'anonymous': False,
        'inputs': [
            {'name': 'winner', 'type': 'address', 'indexed': True},
            {'name': 'payout', 'type': 'uint256', 'indexed': False},
        ],
    },
]


class RemoteRaffle:
    def __init__(self, w3, address, abi=RAFFLE_ABI, chain_id=None, confirmations=1):
        if chain_id is not None and w3.eth.chain_id != chain_id:
            raise ValueError(f'Node is on chain {w3.eth.chain_id}, expected {chain_id}')
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)
        self.contract = w3.eth.contract(address=self.address, abi=abi)
        self.confirmations = confirmations

    @classmethod
    def from_rpc(cls, rpc_url, address, chain_id=None, confirmations=1):
        return cls(Web3(Web3.HTTPProvider(rpc_url)), address, chain_id=chain_id, confirmations=confirmations)

    def get_entrance_fee(self):
        return self.contract.functions.getEntranceFee().call()

    def get_interval(self):
        return self.contract.functions.getInterval().call()

    def get_raffle_state(self):
        return RaffleState(self.contract.functions.getRaffleState().call())

    def get_player(self, index):
        return self.contract.functions.getPlayer(index).call()

    def get_num_players(self):
        return self.contract.functions.getNumPlayers().call()

    def get_recent_winner(self):
        return self.contract.functions.getRecentWinner().call()

    def get_latest_timestamp(self):
        return self.contract.functions.getLastTimeStamp().call()

    def check_upkeep(self, check_data=b''):
        upkeep_needed, perform_data = self.contract.functions.checkUpkeep(check_data).call()
        return upkeep_needed, perform_data

    def balance(self):
        return self.w3.eth.get_balance(self.address)

    def enter_raffle(self, private_key, value, confirmations=None):
        """Sign and send an entry, wait for the receipt and confirmations"""
        if confirmations is None:
            confirmations = self.confirmations
        account = self.w3.eth.account.from_key(private_key)
        tx = self.contract.functions.enterRaffle().build_transaction(
            {
                'from': account.address,
                'value': value,
                'nonce': self.w3.eth.get_transaction_count(account.address),
            }
        )
        signed = account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.rawTransaction)
        logger.info(f'Sent entry {tx_hash.hex()} from {account.address}')
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        if confirmations > 1:
            target = receipt.blockNumber + confirmations - 1
            while self.w3.eth.block_number < target:
                time.sleep(1)
        return receipt

    def event_filter(self, event, from_block='latest'):
        return self.contract.events[event].create_filter(fromBlock=from_block)
