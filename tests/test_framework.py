"""Tests for framework messages and the ConnectPacket layout."""

import uuid

from protocol.framework import DiscoverHost, RegisterTCP, RegisterUDP
from protocol.messages import FrameworkMessage, decode_message
from protocol.packets import ConnectPacket


def test_framework_wire_forms():
    assert FrameworkMessage(DiscoverHost()).to_bytes() == b"\xfe\x01"
    assert FrameworkMessage(RegisterUDP(id=7)).to_bytes() == b"\xfe\x03\x00\x00\x00\x07"
    assert FrameworkMessage(RegisterTCP(id=0x01020304)).to_bytes() == b"\xfe\x04\x01\x02\x03\x04"


def test_framework_messages_decode():
    assert decode_message(b"\xfe\x01") == FrameworkMessage(DiscoverHost())
    assert decode_message(b"\xfe\x03\x00\x00\x00\x07") == FrameworkMessage(RegisterUDP(id=7))
    assert decode_message(b"\xfe\x04\x00\x00\x01\x00") == FrameworkMessage(RegisterTCP(id=256))


def test_variant_rejects_foreign_discriminant():
    assert RegisterTCP.deserialize(b"\x03\x00\x00\x00\x07") is None
    assert RegisterUDP.deserialize(b"\x03\x00\x00\x00\x07") == RegisterUDP(id=7)


def test_unknown_or_truncated_framework_message():
    assert decode_message(b"\xfe\x63") is None
    assert decode_message(b"\xfe") is None
    assert decode_message(b"\xfe\x04\x00\x00") is None


def test_connect_packet_layout(connect_packet, captured_connect_body):
    assert connect_packet.to_bytes() == captured_connect_body
    assert ConnectPacket.deserialize(captured_connect_body) == connect_packet


def test_connect_packet_with_missing_strings():
    packet = ConnectPacket(
        version_build=146,
        version_type=None,
        player_name="p",
        locale=None,
        usid=None,
        uuid=uuid.UUID(int=1),
        mobile=True,
        color=0,
    )
    data = packet.to_bytes()
    assert data[4] == 0
    assert ConnectPacket.deserialize(data) == packet


def test_truncated_connect_packet(captured_connect_body):
    assert ConnectPacket.deserialize(captured_connect_body[:30]) is None
