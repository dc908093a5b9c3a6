"""Utility modules for logging, exception handling and async sockets."""

from utils.logging import setup_logging, get_logger, format_hex
from utils.exceptions import (
    RelayError,
    ProtocolError,
    DecodeError,
    EncodeError,
    MessageTooLargeError,
    TransportError,
    SocketReceiveError,
    SocketSendError,
    SocketConnectError,
    HandshakeError,
    ConfigurationError,
)
from utils.sockets import AsyncSocket

__all__ = [
    'setup_logging',
    'get_logger',
    'format_hex',
    'RelayError',
    'ProtocolError',
    'DecodeError',
    'EncodeError',
    'MessageTooLargeError',
    'TransportError',
    'SocketReceiveError',
    'SocketSendError',
    'SocketConnectError',
    'HandshakeError',
    'ConfigurationError',
    'AsyncSocket',
]
