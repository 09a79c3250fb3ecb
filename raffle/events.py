class Event:
    """A decoded log entry.

    Field names follow web3's decoded logs (`event`, `args`, `address`,
    `block_number`) so local and remote events read the same way.
    """

    def __init__(self, event, address, args, block_number=None):
        self.event = event
        self.address = address
        self.args = dict(args)
        self.block_number = block_number

    def __getitem__(self, key):
        return self.args[key]

    def __contains__(self, key):
        return key in self.args

    def __repr__(self):
        return f'<Event {self.event} {self.args}>'


class EventDict:
    """Ordered events of one transaction, indexable by position or name."""

    def __init__(self, events=None):
        self._events = list(events or [])

    def __getitem__(self, key):
        if isinstance(key, int):
            return self._events[key]
        for event in self._events:
            if event.event == key:
                return event
        raise KeyError(f'Event {key!r} not emitted')

    def __contains__(self, name):
        return any(event.event == name for event in self._events)

    def __iter__(self):
        return iter(self._events)

    def __len__(self):
        return len(self._events)

    def __repr__(self):
        return f'<EventDict {[event.event for event in self._events]}>'


class TransactionReceipt:
    def __init__(self, txid, fn_name, sender, receiver, value, block_number, timestamp, events, return_value):
        self.txid = txid
        self.fn_name = fn_name
        self.sender = sender
        self.receiver = receiver
        self.value = value
        self.block_number = block_number
        self.timestamp = timestamp
        self.events = EventDict(events)
        self.return_value = return_value
        self.status = 1

    def wait(self, confirmations=1):
        # local transactions are mined as soon as they are sent
        return self

    def __repr__(self):
        return f'<Transaction {self.txid} {self.fn_name}>'
