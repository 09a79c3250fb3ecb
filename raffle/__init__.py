"""
Raffle
Interval-based lottery paid out with VRF randomness, plus the local chain
and mock coordinator used to deploy and test it
"""

__version__ = "0.1.0"

from .chain import Account, LocalChain
from .config import LOCAL_BLOCKCHAIN_ENVS, config, network
from .contract import Raffle
from .mocks import VRFCoordinatorV2Mock
from .round import RaffleState

__all__ = [
    'Account',
    'LocalChain',
    'LOCAL_BLOCKCHAIN_ENVS',
    'config',
    'network',
    'Raffle',
    'RaffleState',
    'VRFCoordinatorV2Mock',
]
