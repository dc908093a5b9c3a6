"""Relay module forwarding live game traffic while decoding it."""

from relay.session import (
    CLIENT_TO_SERVER,
    SERVER_TO_CLIENT,
    RelaySession,
    RelayState,
    TrafficRecord,
)
from relay.relay import Relay

__all__ = [
    'CLIENT_TO_SERVER',
    'SERVER_TO_CLIENT',
    'RelaySession',
    'RelayState',
    'TrafficRecord',
    'Relay',
]
