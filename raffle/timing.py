def is_due(now, last_timestamp, interval):
    """True once at least `interval` seconds have passed since `last_timestamp`"""
    return now - last_timestamp >= interval
