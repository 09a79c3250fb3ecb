from raffle import LocalChain
from raffle.log import setup_logging
from scripts.deploy_raffle import deploy_raffle
from scripts.helpful_scripts import get_account, get_contract, listen_for_event


def enter_raffle(raffle_contract, account, value=None):
    value = value if value is not None else raffle_contract.get_entrance_fee()
    tx = raffle_contract.enter_raffle({'from': account, 'value': value})
    tx.wait(1)
    print(f'{account} entered the raffle with {value} wei')
    return tx


def run_round(chain, raffle_contract, num_players=4):
    """Play one full round on a local chain and return the winner's address"""
    account = get_account(chain)
    for index in range(num_players):
        enter_raffle(raffle_contract, chain.accounts[index])

    chain.sleep(raffle_contract.get_interval() + 1)
    chain.mine(1)
    upkeep_needed, _ = raffle_contract.check_upkeep(b'')
    print(f'Upkeep needed: {upkeep_needed}')

    tx = raffle_contract.perform_upkeep({'from': account})
    request_id = tx.events['RandomnessRequested']['requestId']
    print(f'Requested randomness, request id {request_id}')

    # we play the oracle on local networks
    vrf_coordinator = get_contract('vrf_coordinator', chain)
    vrf_coordinator.fulfill_random_words(request_id, raffle_contract, {'from': account})

    event = listen_for_event(raffle_contract, 'WinnerPicked', from_block=tx.block_number)
    winner = event['winner'] if event else raffle_contract.get_recent_winner()
    print(f'{winner} is the new winner!')
    return winner


def main():
    setup_logging()
    chain = LocalChain()
    raffle_contract = deploy_raffle(chain)
    run_round(chain, raffle_contract)
