"""Custom exception classes for the codec, relay and handshake client."""


class RelayError(Exception):
    """Base exception class for all relay-related errors."""
    pass


class ProtocolError(RelayError):
    """Base exception class for wire codec errors."""
    pass


class DecodeError(ProtocolError):
    """Exception raised when bytes cannot be decoded into a value.

    Raised by :class:`protocol.buffer.ByteReader` only; the public decode
    entry points turn it into a ``None`` result.
    """
    pass


class EncodeError(ProtocolError):
    """Exception raised when a value cannot be represented on the wire."""
    pass


class MessageTooLargeError(EncodeError):
    """Exception raised when a message exceeds the 16-bit frame length."""
    pass


class TransportError(RelayError):
    """Exception raised when a socket operation fails.

    Carries the name of the failed operation (for example
    ``"tcp server write"``) so the failure can be traced back to one leg
    of the relay.
    """

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.cause = cause


class SocketReceiveError(TransportError):
    """Exception raised when receiving data from a socket fails."""
    pass


class SocketSendError(TransportError):
    """Exception raised when sending data through a socket fails."""
    pass


class SocketConnectError(TransportError):
    """Exception raised when a socket cannot be bound, accepted or connected."""
    pass


class HandshakeError(RelayError):
    """Exception raised when the server breaks the registration sequence."""
    pass


class ConfigurationError(RelayError):
    """Exception raised when configuration is invalid or missing."""
    pass
