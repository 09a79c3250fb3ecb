import pytest

from raffle import LocalChain, network
from raffle.config import LOCAL_BLOCKCHAIN_ENVS
from scripts.deploy_raffle import deploy_raffle
from scripts.helpful_scripts import get_contract


@pytest.fixture()
def chain():
    return LocalChain()


@pytest.fixture()
def accounts(chain):
    return chain.accounts


@pytest.fixture()
def raffle_contract(chain):
    if network.show_active() not in LOCAL_BLOCKCHAIN_ENVS:
        pytest.skip()
    return deploy_raffle(chain)


@pytest.fixture()
def vrf_coordinator(chain, raffle_contract):
    return get_contract('vrf_coordinator', chain)


@pytest.fixture()
def entered_raffle(chain, accounts, raffle_contract):
    """One player in, interval elapsed: upkeep is due"""
    raffle_contract.enter_raffle({'from': accounts[0], 'value': raffle_contract.get_entrance_fee()})
    chain.sleep(raffle_contract.get_interval() + 1)
    chain.mine(1)
    return raffle_contract
