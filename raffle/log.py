"""
Logging setup for scripts and interactive use
"""

import logging
import os
import sys


def setup_logging(log_level=None):
    """
    Send raffle logs to stdout

    Args:
        log_level: DEBUG, INFO, WARNING, ... (default: $LOG_LEVEL or INFO)

    Returns:
        logging.Logger: The package logger
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    numeric_level = getattr(logging, log_level, logging.INFO)

    logger = logging.getLogger('raffle')
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt='[%(asctime)s] %(levelname)-8s %(message)s', datefmt='%H:%M:%S'))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
