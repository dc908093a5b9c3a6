"""Transport-control messages carried inside a ``FrameworkMessage``.

Each class writes its own discriminant byte and checks it again when
reading, so a variant can be decoded from the bytes that follow the
``0xfe`` envelope marker without help from the envelope.
"""

from dataclasses import dataclass

from protocol.buffer import ByteReader, ByteWriter
from protocol.commands import FrameworkId
from protocol.data import Framework


@dataclass
class DiscoverHost(Framework):
    """UDP probe sent by a client looking for a server; has no fields."""

    framework_id = FrameworkId.DISCOVER_HOST

    @classmethod
    def read(cls, reader: ByteReader) -> 'DiscoverHost':
        cls.read_discriminant(reader)
        return cls()


@dataclass
class RegisterUDP(Framework):
    """Binds the sender's UDP endpoint to an existing connection id."""

    id: int

    framework_id = FrameworkId.REGISTER_UDP

    def serialize_fields(self, buf: ByteWriter) -> None:
        buf.u32(self.id)

    @classmethod
    def read(cls, reader: ByteReader) -> 'RegisterUDP':
        cls.read_discriminant(reader)
        return cls(id=reader.u32())


@dataclass
class RegisterTCP(Framework):
    """Sent by the server right after accepting TCP; assigns the connection id."""

    id: int

    framework_id = FrameworkId.REGISTER_TCP

    def serialize_fields(self, buf: ByteWriter) -> None:
        buf.u32(self.id)

    @classmethod
    def read(cls, reader: ByteReader) -> 'RegisterTCP':
        cls.read_discriminant(reader)
        return cls(id=reader.u32())
