"""Serialization capability shared by every on-wire structure.

The hierarchy only groups types; it carries no state:

* :class:`Data` - anything that can be written to a :class:`ByteWriter`
  and read back from a byte slice.
* :class:`Message` - data that can be sent on its own, either as a UDP
  datagram or inside a length-prefixed TCP frame.
* :class:`Packet` - data carried inside a ``PacketMessage``.
* :class:`Framework` - data carried inside a ``FrameworkMessage``.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Type, TypeVar

from protocol.buffer import ByteReader, ByteWriter
from protocol.commands import FrameworkId, PacketId
from utils.exceptions import DecodeError
from utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T', bound='Data')


class Data(ABC):
    """Represents data that can be marshalled to and from byte slices."""

    @abstractmethod
    def serialize(self, buf: ByteWriter) -> None:
        """Append the wire form of this value to ``buf``."""

    @classmethod
    @abstractmethod
    def read(cls: Type[T], reader: ByteReader) -> T:
        """
        Read one value from the reader.

        Raises:
            DecodeError: If the bytes do not form a valid value
        """

    @classmethod
    def deserialize(cls: Type[T], data: bytes) -> Optional[T]:
        """
        Decode a value from the start of ``data``.

        Returns:
            The decoded value, or None if the bytes are malformed or truncated
        """
        try:
            return cls.read(ByteReader(data))
        except DecodeError as e:
            logger.debug(f"Failed to decode {cls.__name__}: {e}")
            return None

    def to_bytes(self) -> bytes:
        """Return the wire form of this value."""
        buf = ByteWriter()
        self.serialize(buf)
        return buf.getvalue()


class Message(Data):
    """Data that is a complete transmittable unit on its own."""


class Packet(Data):
    """Data that can be embedded in a ``PacketMessage``."""

    packet_id: ClassVar[PacketId]


class Framework(Data):
    """Data that can be embedded in a ``FrameworkMessage``."""

    framework_id: ClassVar[FrameworkId]

    def serialize(self, buf: ByteWriter) -> None:
        buf.u8(self.framework_id)
        self.serialize_fields(buf)

    def serialize_fields(self, buf: ByteWriter) -> None:
        """Write the fields that follow the discriminant byte."""

    @classmethod
    def read_discriminant(cls, reader: ByteReader) -> None:
        """
        Consume the leading discriminant and check it belongs to this class.

        Raises:
            DecodeError: If the byte names a different framework message
        """
        found = reader.u8()
        if found != cls.framework_id:
            raise DecodeError(
                f"{cls.__name__} expects discriminant {cls.framework_id:#04x}, got {found:#04x}"
            )
