import time

from web3 import Account

from raffle import VRFCoordinatorV2Mock, config, network
from raffle.chain import Contract
from raffle.config import LOCAL_BLOCKCHAIN_ENVS
from raffle.mocks import BASE_FEE, GAS_PRICE_LINK

contracts_to_mock = {
    'vrf_coordinator': VRFCoordinatorV2Mock,
}


def deploy_mocks(chain, base_fee=BASE_FEE, gas_price_link=GAS_PRICE_LINK):
    account = get_account(chain)
    print(f'The active network is {network.show_active()}')
    print('Deploying mocks...')
    print('-------------------------')
    vrf_coordinator = VRFCoordinatorV2Mock.deploy(chain, base_fee, gas_price_link, {'from': account})
    print(f'Deployed to {vrf_coordinator.address}')
    return vrf_coordinator


def get_account(chain=None, index=None):
    if index is not None and chain is not None:
        return chain.accounts[index]
    if network.show_active() in LOCAL_BLOCKCHAIN_ENVS:
        return chain.accounts[0]
    return Account.from_key(config['wallets']['from_key'])


def get_contract(contract_name, chain=None):
    """Latest local mock, deployed on demand, or the configured live address"""
    contract_type = contracts_to_mock[contract_name]
    if network.show_active() in LOCAL_BLOCKCHAIN_ENVS:
        if len(chain.deployments[contract_type.__name__]) <= 0:
            deploy_mocks(chain)
        return chain.deployments[contract_type.__name__][-1]
    try:
        return config['networks'][network.show_active()][contract_name]
    except KeyError:
        print(f'{network.show_active()} address not found. Perhaps you should add it to the config?')
        raise


def listen_for_event(contract, event, timeout=200, poll_interval=2, from_block=0):
    """Wait for an event to be fired from a contract.
    Local contracts are searched in the chain history, remote ones are
    polled through a web3 filter, so this function is blocking.
    Args:
        contract: A local Contract or a RemoteRaffle.
        event (str): The event you'd like to listen for.
        timeout (int, optional): The max amount in seconds you'd like to
        wait for that event to fire. Defaults to 200 seconds.
        poll_interval (int): How often to call your node to check for events.
        Defaults to 2 seconds.
        from_block (int): Ignore local events mined before this block.
    Returns:
        The event, or None if it never fired.
    """
    if isinstance(contract, Contract):
        events = contract.chain.get_events(event, contract.address, from_block)
        if events:
            print('Found event!')
            return events[-1]
        print('No event found.')
        return None

    event_filter = contract.event_filter(event)
    start_time = time.time()
    current_time = time.time()
    while current_time - start_time < timeout:
        for event_response in event_filter.get_new_entries():
            if event in event_response.event:
                print('Found event!')
                return event_response
        time.sleep(poll_interval)
        current_time = time.time()
    print('Timeout reached, no event found.')
    return None
