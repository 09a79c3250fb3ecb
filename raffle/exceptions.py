class VirtualMachineError(Exception):
    """Raised when a transaction reverts.

    `revert_msg` holds the revert string or custom error name, so tests can
    match on it the same way regardless of which contract reverted.
    """

    revert_msg = None

    def __init__(self, message=None, **details):
        if message is None:
            message = self.revert_msg
        super().__init__(message)
        for key, value in details.items():
            setattr(self, key, value)


# Raffle


class InsufficientFunds(VirtualMachineError):
    revert_msg = 'Raffle__NotEnoughETHEntered'


class RoundNotOpen(VirtualMachineError):
    revert_msg = 'Raffle__NotOpen'


class UpkeepNotNeeded(VirtualMachineError):
    revert_msg = 'Raffle__UpkeepNotNeeded'

    def __init__(self, balance, num_players, raffle_state):
        super().__init__(
            f'{self.revert_msg}({balance}, {num_players}, {int(raffle_state)})',
            balance=balance,
            num_players=num_players,
            raffle_state=raffle_state,
        )


class UnknownRequest(VirtualMachineError):
    revert_msg = 'nonexistent request'


class IndexOutOfRange(VirtualMachineError):
    revert_msg = 'Raffle__IndexOutOfRange'


class TransferFailed(VirtualMachineError):
    revert_msg = 'Raffle__TransferFailed'


class OnlyCoordinatorCanFulfill(VirtualMachineError):
    revert_msg = 'OnlyCoordinatorCanFulfill'


# VRF coordinator


class InvalidSubscription(VirtualMachineError):
    revert_msg = 'InvalidSubscription'


class InvalidConsumer(VirtualMachineError):
    revert_msg = 'InvalidConsumer'


class InsufficientBalance(VirtualMachineError):
    revert_msg = 'InsufficientBalance'


class TooManyWords(VirtualMachineError):
    revert_msg = 'TooManyWords'


class RaffleInvariantError(RuntimeError):
    """A round reached a state upkeep should never have allowed."""
