from raffle import LocalChain, config, network
from scripts.helpful_scripts import get_account, get_contract


def create_subscription(chain, vrf_coordinator=None, account=None):
    """Open a VRF subscription; on live networks use the configured one"""
    if not network.is_local():
        subscription_id = config['networks'][network.show_active()]['subscription_id']
        print(f'Using subscription {subscription_id} from the config')
        return subscription_id
    account = account if account else get_account(chain)
    vrf_coordinator = vrf_coordinator if vrf_coordinator else get_contract('vrf_coordinator', chain)
    print('Creating subscription...')
    tx = vrf_coordinator.create_subscription({'from': account})
    tx.wait(1)
    subscription_id = tx.events['SubscriptionCreated']['subId']
    print(f'Created subscription {subscription_id}')
    return subscription_id


def fund_subscription(chain, subscription_id, amount=None, vrf_coordinator=None, account=None):
    account = account if account else get_account(chain)
    vrf_coordinator = vrf_coordinator if vrf_coordinator else get_contract('vrf_coordinator', chain)
    if amount is None:
        amount = config['networks'][network.show_active()]['subscription_fund_amount']
    tx = vrf_coordinator.fund_subscription(subscription_id, amount, {'from': account})
    tx.wait(1)
    print(f'Funded subscription {subscription_id} with {amount} juels')
    return tx


def add_consumer(chain, subscription_id, consumer, vrf_coordinator=None, account=None):
    account = account if account else get_account(chain)
    vrf_coordinator = vrf_coordinator if vrf_coordinator else get_contract('vrf_coordinator', chain)
    tx = vrf_coordinator.add_consumer(subscription_id, consumer, {'from': account})
    tx.wait(1)
    print(f'Added consumer {consumer} to subscription {subscription_id}')
    return tx


def main():
    if not network.is_local():
        create_subscription(None)
        return
    chain = LocalChain()
    subscription_id = create_subscription(chain)
    fund_subscription(chain, subscription_id)
