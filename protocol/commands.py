"""Wire discriminants for both message families."""

from enum import IntEnum


class PacketId(IntEnum):
    """Identifiers carried in the first byte of a PacketMessage."""
    
    CONNECT = 0x03              # Client connection handshake


class FrameworkId(IntEnum):
    """Identifiers carried in the second byte of a FrameworkMessage."""
    
    DISCOVER_HOST = 0x01        # UDP probe for a listening host
    REGISTER_UDP = 0x03         # Bind the UDP channel to a connection id
    REGISTER_TCP = 0x04         # Server assigns the connection id
