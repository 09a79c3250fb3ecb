"""
Network configuration
Loads the YAML network config, expands ${VAR} placeholders from the
environment and tracks which network is active
"""

import logging
import os
import re
from pathlib import Path

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name('network-config.yaml')

LOCAL_BLOCKCHAIN_ENVS = ['development', 'ganache-local']

_PLACEHOLDER = re.compile(r'\$\{(\w+)\}')


def _expand(value):
    if isinstance(value, dict):
        return {key: _expand(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand(item) for item in value]
    if not isinstance(value, str):
        return value

    whole = _PLACEHOLDER.fullmatch(value)
    if whole:
        raw = os.getenv(whole.group(1))
        if raw is None or raw == '':
            return None
        return int(raw) if raw.isdigit() else raw
    return _PLACEHOLDER.sub(lambda match: os.getenv(match.group(1), ''), value)


def load_config(path=None):
    """
    Read a network config file

    Args:
        path: Config file (default: $RAFFLE_CONFIG, then the bundled file)

    Returns:
        dict: Config with placeholders expanded
    """
    path = Path(path or os.getenv('RAFFLE_CONFIG') or DEFAULT_CONFIG_PATH)
    with open(path, encoding='utf-8') as f:
        raw = yaml.safe_load(f) or {}

    dotenv_file = raw.get('dotenv')
    if dotenv_file:
        load_dotenv(dotenv_file)

    loaded = _expand(raw)
    loaded.setdefault('networks', {})
    loaded.setdefault('wallets', {})
    logger.debug(f'Loaded network config from {path}')
    return loaded


class Config(dict):
    """The loaded config, read on first access"""

    def __init__(self, path=None):
        super().__init__()
        self._path = path
        self._loaded = False

    def _load(self):
        if not self._loaded:
            self.update(load_config(self._path))
            self._loaded = True

    def __getitem__(self, key):
        self._load()
        return super().__getitem__(key)

    def get(self, key, default=None):
        self._load()
        return super().get(key, default)

    def __contains__(self, key):
        self._load()
        return super().__contains__(key)


config = Config()


class Network:
    """Which entry of config['networks'] is in use"""

    def __init__(self, settings):
        self._settings = settings
        self._active = None

    def show_active(self):
        if self._active is None:
            self._active = os.getenv('RAFFLE_NETWORK') or self._settings['networks'].get('default', 'development')
        return self._active

    def connect(self, name):
        if name not in self._settings['networks']:
            raise KeyError(f'Unknown network: {name}')
        self._active = name
        logger.info(f'Active network is now {name}')

    def is_local(self):
        return self.show_active() in LOCAL_BLOCKCHAIN_ENVS

    def settings(self):
        """Config entry of the active network"""
        return self._settings['networks'][self.show_active()]


network = Network(config)
