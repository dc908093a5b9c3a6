"""Packets carried inside a ``PacketMessage``."""

from dataclasses import dataclass
from typing import Optional
import uuid

from protocol.buffer import ByteReader, ByteWriter
from protocol.commands import PacketId
from protocol.constants import UUID_SIZE
from protocol.data import Packet


@dataclass
class ConnectPacket(Packet):
    """
    First packet a client sends after registering its TCP and UDP channels.

    Strings are written as nullable strings (presence byte, then length and
    UTF-8 bytes), which is the layout observed in captured client traffic.
    The packet ends with a mod count that is always written as zero; any
    bytes after ``color`` are ignored when decoding.
    """

    version_build: int
    version_type: Optional[str]
    player_name: Optional[str]
    locale: Optional[str]
    usid: Optional[str]
    uuid: uuid.UUID
    mobile: bool
    color: int

    packet_id = PacketId.CONNECT

    def serialize(self, buf: ByteWriter) -> None:
        buf.u32(self.version_build)
        buf.nullable_str(self.version_type)
        buf.nullable_str(self.player_name)
        buf.nullable_str(self.locale)
        buf.nullable_str(self.usid)
        buf.bytes(self.uuid.bytes)
        buf.bool(self.mobile)
        buf.u32(self.color)
        buf.u8(0)  # no mods

    @classmethod
    def read(cls, reader: ByteReader) -> 'ConnectPacket':
        version_build = reader.u32()
        version_type = reader.nullable_str()
        player_name = reader.nullable_str()
        locale = reader.nullable_str()
        usid = reader.nullable_str()
        player_uuid = uuid.UUID(bytes=reader.bytes(UUID_SIZE))
        mobile = reader.bool()
        color = reader.u32()
        return cls(
            version_build=version_build,
            version_type=version_type,
            player_name=player_name,
            locale=locale,
            usid=usid,
            uuid=player_uuid,
            mobile=mobile,
            color=color,
        )
