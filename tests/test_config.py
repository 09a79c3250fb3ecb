import pytest

from raffle.config import DEFAULT_CONFIG_PATH, LOCAL_BLOCKCHAIN_ENVS, Config, Network, load_config

CONFIG_YAML = """
networks:
  default: development
  development:
    interval: 30
    entrance_fee: 100
  sepolia:
    host: https://${TEST_RAFFLE_HOST}/rpc
    subscription_id: ${TEST_RAFFLE_SUB_ID}
    raffle: ${TEST_RAFFLE_ADDRESS}
wallets:
  from_key: ${TEST_RAFFLE_KEY}
"""


@pytest.fixture()
def config_file(tmp_path):
    path = tmp_path / 'network-config.yaml'
    path.write_text(CONFIG_YAML)
    return path


def test_bundled_config_has_local_networks():
    loaded = load_config(DEFAULT_CONFIG_PATH)
    for name in LOCAL_BLOCKCHAIN_ENVS:
        settings = loaded['networks'][name]
        assert settings['interval'] > 0
        assert settings['entrance_fee'] > 0
        assert settings['keyhash'].startswith('0x')


def test_placeholders_expand_from_environment(config_file, monkeypatch):
    # Arrange
    monkeypatch.setenv('TEST_RAFFLE_HOST', 'node.example')
    monkeypatch.setenv('TEST_RAFFLE_SUB_ID', '1234')
    monkeypatch.setenv('TEST_RAFFLE_KEY', 'abcdef')
    monkeypatch.delenv('TEST_RAFFLE_ADDRESS', raising=False)
    # Act
    loaded = load_config(config_file)
    # Assert
    sepolia = loaded['networks']['sepolia']
    assert sepolia['host'] == 'https://node.example/rpc'
    assert sepolia['subscription_id'] == 1234
    assert sepolia['raffle'] is None
    assert loaded['wallets']['from_key'] == 'abcdef'


def test_config_path_from_environment(config_file, monkeypatch):
    monkeypatch.setenv('RAFFLE_CONFIG', str(config_file))
    loaded = load_config()
    assert loaded['networks']['development']['entrance_fee'] == 100


def test_config_loads_lazily(config_file):
    config = Config(config_file)
    assert config['networks']['development']['interval'] == 30
    assert 'wallets' in config


def test_network_selection(config_file, monkeypatch):
    # Arrange
    monkeypatch.delenv('RAFFLE_NETWORK', raising=False)
    network = Network(Config(config_file))
    # Assert
    assert network.show_active() == 'development'
    assert network.is_local()
    network.connect('sepolia')
    assert network.show_active() == 'sepolia'
    assert not network.is_local()
    with pytest.raises(KeyError):
        network.connect('mainnet')


def test_network_from_environment(config_file, monkeypatch):
    monkeypatch.setenv('RAFFLE_NETWORK', 'sepolia')
    network = Network(Config(config_file))
    assert network.show_active() == 'sepolia'
    assert 'raffle' in network.settings()
