"""Configuration management for the relay and the handshake client."""

from dataclasses import dataclass
from typing import Optional
import os
from pathlib import Path

from dotenv import load_dotenv

from protocol.constants import DEFAULT_BUFFER_SIZE
from utils.exceptions import ConfigurationError


# Load .env file from project root
# This is called at module import time to ensure env vars are available
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path, override=False)

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off'}


def _validate_port(name: str, port: int, allow_zero: bool = False) -> None:
    lowest = 0 if allow_zero else 1
    if not isinstance(port, int) or port < lowest or port > 65535:
        raise ConfigurationError(f"{name} must be between {lowest} and 65535")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        # Base 0 accepts hex such as 0xff00ffff for colors
        return int(raw, 0)
    except ValueError:
        raise ConfigurationError(f"{name} must be a valid integer, got: {raw}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got: {raw}")


@dataclass
class RelayConfig:
    """Configuration for the inspecting relay."""

    host: str = "0.0.0.0"
    port: int = 5001
    server_host: str = "127.0.0.1"
    server_port: int = 6567
    buffer_size: int = DEFAULT_BUFFER_SIZE

    def validate(self) -> None:
        """Validate relay configuration parameters."""
        if not self.host:
            raise ConfigurationError("Relay host is required")
        _validate_port("RELAY_PORT", self.port)
        if not self.server_host:
            raise ConfigurationError("Server host is required")
        _validate_port("SERVER_PORT", self.server_port)
        if self.buffer_size < 1:
            raise ConfigurationError("RELAY_BUFFER_SIZE must be positive")


@dataclass
class ClientConfig:
    """Configuration for the handshake client and the ConnectPacket it sends."""

    server_host: str = "127.0.0.1"
    server_port: int = 6567
    udp_port: int = 0
    player_name: str = "robot"
    locale: str = "en-US"
    version_type: str = "official"
    version_build: int = 135
    usid: str = "AAAAAAAA"
    color: int = 0xFFFFFFFF
    mobile: bool = False
    compress: bool = False

    def validate(self) -> None:
        """Validate client configuration parameters."""
        if not self.server_host:
            raise ConfigurationError("Server host is required")
        _validate_port("SERVER_PORT", self.server_port)
        _validate_port("CLIENT_UDP_PORT", self.udp_port, allow_zero=True)
        if not self.player_name:
            raise ConfigurationError("Player name is required")
        if not 0 <= self.version_build <= 0xFFFFFFFF:
            raise ConfigurationError("CLIENT_VERSION_BUILD must fit in 32 bits")
        if not 0 <= self.color <= 0xFFFFFFFF:
            raise ConfigurationError("CLIENT_COLOR must be a 32-bit RGBA value")


class Config:
    """Main configuration loader and manager."""

    def __init__(self):
        """Initialize configuration manager."""
        self.relay: Optional[RelayConfig] = None
        self.client: Optional[ClientConfig] = None

    def load_relay_config(self) -> RelayConfig:
        """
        Load relay configuration from environment variables.

        Environment variables:
            RELAY_HOST: Address to listen on for TCP and UDP (default: 0.0.0.0)
            RELAY_PORT: Port shared by the TCP listener and UDP socket (default: 5001)
            SERVER_HOST: Address of the real game server (default: 127.0.0.1)
            SERVER_PORT: Port of the real game server (default: 6567)
            RELAY_BUFFER_SIZE: Socket read size in bytes (default: 16384)

        Returns:
            Validated RelayConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config = RelayConfig(
            host=os.getenv('RELAY_HOST', '0.0.0.0'),
            port=_env_int('RELAY_PORT', 5001),
            server_host=os.getenv('SERVER_HOST', '127.0.0.1'),
            server_port=_env_int('SERVER_PORT', 6567),
            buffer_size=_env_int('RELAY_BUFFER_SIZE', DEFAULT_BUFFER_SIZE),
        )
        config.validate()
        self.relay = config
        return config

    def load_client_config(self) -> ClientConfig:
        """
        Load handshake client configuration from environment variables.

        Environment variables:
            SERVER_HOST: Address of the game server (default: 127.0.0.1)
            SERVER_PORT: Port of the game server (default: 6567)
            CLIENT_UDP_PORT: Local UDP port, 0 for any (default: 0)
            CLIENT_PLAYER_NAME: Player name (default: robot)
            CLIENT_LOCALE: Locale (default: en-US)
            CLIENT_VERSION_TYPE: Build type (default: official)
            CLIENT_VERSION_BUILD: Build number (default: 135)
            CLIENT_USID: Per-server user id (default: AAAAAAAA)
            CLIENT_COLOR: Player color as RGBA integer (default: 0xffffffff)
            CLIENT_MOBILE: Report a mobile client (default: false)
            CLIENT_COMPRESS: Compress the ConnectPacket (default: false)

        Returns:
            Validated ClientConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config = ClientConfig(
            server_host=os.getenv('SERVER_HOST', '127.0.0.1'),
            server_port=_env_int('SERVER_PORT', 6567),
            udp_port=_env_int('CLIENT_UDP_PORT', 0),
            player_name=os.getenv('CLIENT_PLAYER_NAME', 'robot'),
            locale=os.getenv('CLIENT_LOCALE', 'en-US'),
            version_type=os.getenv('CLIENT_VERSION_TYPE', 'official'),
            version_build=_env_int('CLIENT_VERSION_BUILD', 135),
            usid=os.getenv('CLIENT_USID', 'AAAAAAAA'),
            color=_env_int('CLIENT_COLOR', 0xFFFFFFFF),
            mobile=_env_bool('CLIENT_MOBILE', False),
            compress=_env_bool('CLIENT_COMPRESS', False),
        )
        config.validate()
        self.client = config
        return config
