from raffle import LocalChain, Raffle, config, network
from raffle.log import setup_logging
from raffle.remote import RemoteRaffle
from scripts.helpful_scripts import get_account, get_contract
from scripts.vrf_scripts.create_subscription import add_consumer, create_subscription, fund_subscription

'''
vrf_coordinator,
subscription_id,
gas_lane, // keyHash
interval,
entrance_fee,
callback_gas_limit
'''


def deploy_raffle(chain, entrance_fee=None, interval=None):
    if not network.is_local():
        raise RuntimeError(
            f'{network.show_active()} is a live network: set RAFFLE_ADDRESS to an existing deployment instead'
        )
    account = get_account(chain)
    settings = config['networks'][network.show_active()]
    print('Deploying contract...')
    vrf_coordinator = get_contract('vrf_coordinator', chain)
    subscription_id = settings['subscription_id']
    if not subscription_id:
        subscription_id = create_subscription(chain, vrf_coordinator, account)
        fund_subscription(chain, subscription_id, settings['subscription_fund_amount'], vrf_coordinator, account)
    entrance_fee = entrance_fee if entrance_fee is not None else settings['entrance_fee']
    interval = interval if interval is not None else settings['interval']
    raffle_contract = Raffle.deploy(
        chain,
        vrf_coordinator,
        subscription_id,
        settings['keyhash'],
        interval,
        entrance_fee,
        settings['callback_gas_limit'],
        {'from': account},
    )
    add_consumer(chain, subscription_id, raffle_contract, vrf_coordinator, account)
    print(f'contract deployed at {raffle_contract.address}')
    return raffle_contract


def get_raffle(chain=None):
    """Latest local Raffle (deployed if needed) or the configured live one"""
    if network.is_local():
        deployed = chain.deployments[Raffle.__name__]
        return deployed[-1] if deployed else deploy_raffle(chain)
    settings = config['networks'][network.show_active()]
    return RemoteRaffle.from_rpc(
        settings['host'],
        settings['raffle'],
        chain_id=settings.get('chain_id'),
        confirmations=settings.get('block_confirmations', 1),
    )


def main():
    setup_logging()
    if not network.is_local():
        raffle_contract = get_raffle()
        print(f'Using raffle at {raffle_contract.address}')
        return raffle_contract
    return deploy_raffle(LocalChain())
