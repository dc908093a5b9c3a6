"""Protocol module for the wire codec, message envelopes and TCP framing."""

from protocol.constants import (
    DEFAULT_BUFFER_SIZE,
    FRAMEWORK_MARKER,
    HEADER_FORMAT,
    HEADER_SIZE,
    MAX_FRAME_SIZE,
)
from protocol.commands import FrameworkId, PacketId
from protocol.buffer import ByteReader, ByteWriter
from protocol.data import Data, Framework, Message, Packet
from protocol.packets import ConnectPacket
from protocol.framework import DiscoverHost, RegisterTCP, RegisterUDP
from protocol.encoding import compress_block, decompress_block, frame_message
from protocol.framing import FrameAssembler
from protocol.messages import (
    AnyMessage,
    FrameworkMessage,
    PacketMessage,
    decode_message,
    encode_tcp,
    encode_udp,
)

__all__ = [
    'DEFAULT_BUFFER_SIZE',
    'FRAMEWORK_MARKER',
    'HEADER_FORMAT',
    'HEADER_SIZE',
    'MAX_FRAME_SIZE',
    'FrameworkId',
    'PacketId',
    'ByteReader',
    'ByteWriter',
    'Data',
    'Framework',
    'Message',
    'Packet',
    'ConnectPacket',
    'DiscoverHost',
    'RegisterTCP',
    'RegisterUDP',
    'compress_block',
    'decompress_block',
    'frame_message',
    'FrameAssembler',
    'AnyMessage',
    'FrameworkMessage',
    'PacketMessage',
    'decode_message',
    'encode_tcp',
    'encode_udp',
]
