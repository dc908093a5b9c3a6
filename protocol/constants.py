"""Protocol constants for message framing.

These are wire-level constants shared with the game client and server;
they must not be changed without both peers agreeing.
"""

import struct

# TCP frame header: big-endian unsigned short holding the payload length
HEADER_FORMAT = '>H'

# Size of the TCP frame header in bytes
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

# Largest payload a single TCP frame can carry
MAX_FRAME_SIZE = 0xFFFF

# First byte of every FrameworkMessage
FRAMEWORK_MARKER = 0xFE

# Strings are prefixed with their UTF-8 byte length as an unsigned short
MAX_STRING_LENGTH = 0xFFFF

# Raw player UUID width in a ConnectPacket
UUID_SIZE = 16

# Read buffer used by the relay for every socket
DEFAULT_BUFFER_SIZE = 16384
