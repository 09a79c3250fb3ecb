import logging

from .exceptions import TransferFailed

logger = logging.getLogger(__name__)


class PayoutExecutor:
    """Sends the whole pot to the winner"""

    def __init__(self, ledger, transfer):
        # transfer(recipient, amount) -> bool, False when the recipient refuses
        self.ledger = ledger
        self._transfer = transfer

    def payout(self, address):
        amount = self.ledger.balance
        if not self._transfer(address, amount):
            logger.error(f'Payout of {amount} wei to {address} failed')
            raise TransferFailed(recipient=address, amount=amount)
        self.ledger.reset()
        logger.info(f'Paid {amount} wei to {address}')
        return amount
