"""Tests for environment based configuration."""

import pytest

from config.settings import ClientConfig, Config, RelayConfig
from utils.exceptions import ConfigurationError

ENV_VARS = [
    'RELAY_HOST',
    'RELAY_PORT',
    'SERVER_HOST',
    'SERVER_PORT',
    'RELAY_BUFFER_SIZE',
    'CLIENT_UDP_PORT',
    'CLIENT_PLAYER_NAME',
    'CLIENT_LOCALE',
    'CLIENT_VERSION_TYPE',
    'CLIENT_VERSION_BUILD',
    'CLIENT_USID',
    'CLIENT_COLOR',
    'CLIENT_MOBILE',
    'CLIENT_COMPRESS',
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_relay_defaults(clean_env):
    config = Config().load_relay_config()
    assert config == RelayConfig()
    assert config.port == 5001
    assert config.server_port == 6567


def test_relay_from_env(clean_env):
    clean_env.setenv('RELAY_HOST', '127.0.0.1')
    clean_env.setenv('RELAY_PORT', '7000')
    clean_env.setenv('SERVER_HOST', 'game.example')
    clean_env.setenv('SERVER_PORT', '6568')
    clean_env.setenv('RELAY_BUFFER_SIZE', '4096')

    loader = Config()
    config = loader.load_relay_config()
    assert config == RelayConfig(
        host='127.0.0.1',
        port=7000,
        server_host='game.example',
        server_port=6568,
        buffer_size=4096,
    )
    assert loader.relay is config


@pytest.mark.parametrize("value", ['0', '70000', 'abc'])
def test_invalid_relay_port(clean_env, value):
    clean_env.setenv('RELAY_PORT', value)
    with pytest.raises(ConfigurationError):
        Config().load_relay_config()


def test_client_defaults(clean_env):
    config = Config().load_client_config()
    assert config == ClientConfig()
    assert config.udp_port == 0
    assert config.compress is False


def test_client_from_env(clean_env):
    clean_env.setenv('CLIENT_PLAYER_NAME', 'allen')
    clean_env.setenv('CLIENT_COLOR', '0xff76a6ff')
    clean_env.setenv('CLIENT_MOBILE', 'yes')
    clean_env.setenv('CLIENT_COMPRESS', 'TRUE')
    clean_env.setenv('CLIENT_VERSION_BUILD', '146')

    config = Config().load_client_config()
    assert config.player_name == 'allen'
    assert config.color == 0xFF76A6FF
    assert config.mobile is True
    assert config.compress is True
    assert config.version_build == 146


def test_invalid_client_values(clean_env):
    clean_env.setenv('CLIENT_MOBILE', 'maybe')
    with pytest.raises(ConfigurationError):
        Config().load_client_config()

    clean_env.setenv('CLIENT_MOBILE', 'no')
    clean_env.setenv('CLIENT_COLOR', str(2 ** 32))
    with pytest.raises(ConfigurationError):
        Config().load_client_config()
