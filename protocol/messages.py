"""Message envelopes and top-level dispatch.

Two families share the wire:

* ``PacketMessage``: ``[id:u8][length:u16][compressed:u8][body]``, where
  ``length`` is the size of the body before compression.
* ``FrameworkMessage``: ``[0xfe][discriminant:u8][fields]``.

A message on its own is a UDP datagram; over TCP it is additionally
wrapped in a length-prefixed frame (see :func:`encode_tcp`).
"""

from dataclasses import dataclass
from typing import Dict, Optional, Type, Union

from lz4.block import LZ4BlockError

from protocol.buffer import ByteReader, ByteWriter
from protocol.constants import FRAMEWORK_MARKER
from protocol.data import Framework, Message, Packet
from protocol.encoding import compress_block, decompress_block, frame_message
from protocol.framework import DiscoverHost, RegisterTCP, RegisterUDP
from protocol.packets import ConnectPacket
from utils.exceptions import DecodeError
from utils.logging import get_logger

logger = get_logger(__name__)

AnyPacket = Union[ConnectPacket]
AnyFramework = Union[DiscoverHost, RegisterUDP, RegisterTCP]

# Wire id -> variant; extending the protocol means adding entries here
_PACKET_TYPES: Dict[int, Type[Packet]] = {
    ConnectPacket.packet_id: ConnectPacket,
}

_FRAMEWORK_TYPES: Dict[int, Type[Framework]] = {
    DiscoverHost.framework_id: DiscoverHost,
    RegisterUDP.framework_id: RegisterUDP,
    RegisterTCP.framework_id: RegisterTCP,
}


@dataclass
class PacketMessage(Message):
    """Envelope around one application packet, optionally LZ4 compressed."""

    packet: AnyPacket
    compressed: bool = False

    @property
    def id(self) -> int:
        """Wire id of the wrapped packet."""
        return self.packet.packet_id

    def serialize(self, buf: ByteWriter) -> None:
        buf.u8(self.id)

        body = self.packet.to_bytes()
        buf.u16(len(body))
        buf.bool(self.compressed)
        if self.compressed:
            buf.bytes(compress_block(body))
        else:
            buf.bytes(body)

    @classmethod
    def read(cls, reader: ByteReader) -> 'PacketMessage':
        """
        Read a packet envelope; the body runs to the end of the reader.

        The length field is authoritative: an uncompressed body must be
        exactly that long, and a compressed body must expand to exactly
        that many bytes.

        Raises:
            DecodeError: On truncated headers, a body that disagrees with the
                length field, a corrupt LZ4 block or an unknown packet id
        """
        packet_id = reader.u8()
        length = reader.u16()
        compressed = reader.bool()
        body = reader.remaining()

        if compressed:
            try:
                body = decompress_block(body, length)
            except LZ4BlockError as e:
                logger.warning(f"Error decompressing packet {packet_id}: {e}")
                raise DecodeError(f"Corrupt compressed body for packet {packet_id}") from e
            if len(body) != length:
                logger.warning(
                    f"Packet {packet_id} decompressed to {len(body)} bytes, "
                    f"header declares {length}"
                )

        if len(body) != length:
            raise DecodeError(
                f"Packet {packet_id} declares {length} body bytes, got {len(body)}"
            )

        packet_class = _PACKET_TYPES.get(packet_id)
        if packet_class is None:
            raise DecodeError(f"Unknown packet id {packet_id}")

        return cls(packet=packet_class.read(ByteReader(body)), compressed=compressed)


@dataclass
class FrameworkMessage(Message):
    """Envelope around one transport-control message."""

    inner: AnyFramework

    def serialize(self, buf: ByteWriter) -> None:
        buf.u8(FRAMEWORK_MARKER)
        self.inner.serialize(buf)

    @classmethod
    def read(cls, reader: ByteReader) -> 'FrameworkMessage':
        marker = reader.u8()
        if marker != FRAMEWORK_MARKER:
            raise DecodeError(f"Expected framework marker, got {marker:#04x}")

        # The variant consumes and checks its own discriminant
        discriminant = reader.peek_u8()
        framework_class = _FRAMEWORK_TYPES.get(discriminant)
        if framework_class is None:
            raise DecodeError(f"Unknown framework message {discriminant}")

        return cls(inner=framework_class.read(reader))


AnyMessage = Union[PacketMessage, FrameworkMessage]


def decode_message(data: bytes) -> Optional[AnyMessage]:
    """
    Decode exactly one message of either family.

    Args:
        data: One UDP datagram, or one TCP frame with its length prefix removed

    Returns:
        The decoded message, or None if the bytes are empty or malformed
    """
    if not data:
        return None
    if data[0] == FRAMEWORK_MARKER:
        return FrameworkMessage.deserialize(data)
    return PacketMessage.deserialize(data)


def encode_udp(message: AnyMessage) -> bytes:
    """Encode a message as a UDP datagram payload."""
    return message.to_bytes()


def encode_tcp(message: AnyMessage) -> bytes:
    """
    Encode a message as a length-prefixed TCP frame.

    Raises:
        MessageTooLargeError: If the encoded message exceeds 65535 bytes
    """
    return frame_message(message.to_bytes())
