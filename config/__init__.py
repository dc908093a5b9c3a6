"""Configuration module for managing relay and client settings."""

from config.settings import (
    RelayConfig,
    ClientConfig,
    Config,
)

__all__ = [
    'RelayConfig',
    'ClientConfig',
    'Config',
]
