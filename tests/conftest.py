"""Shared fixtures for relay tests."""

import uuid

import pytest

from protocol.packets import ConnectPacket

# A compressed ConnectPacket message captured from a real client
CAPTURED_CONNECT = bytes.fromhex(
    "03004401f035000000870100086f6666696369616c010005616c6c656e010005656e5f"
    "555301000c79332f703358377745746b3d4aef2f7987174f9900000000bd7aa1b200ff"
    "76a6ff00"
)

# The ConnectPacket body inside CAPTURED_CONNECT after decompression
CAPTURED_CONNECT_BODY = bytes.fromhex(
    "00000087"
    "0100086f6666696369616c"
    "010005616c6c656e"
    "010005656e5f5553"
    "01000c79332f703358377745746b3d"
    "4aef2f7987174f9900000000bd7aa1b2"
    "00"
    "ff76a6ff"
    "00"
)


@pytest.fixture
def captured_connect() -> bytes:
    return CAPTURED_CONNECT


@pytest.fixture
def captured_connect_body() -> bytes:
    return CAPTURED_CONNECT_BODY


@pytest.fixture
def connect_packet() -> ConnectPacket:
    """The packet carried by the captured connect message."""
    return ConnectPacket(
        version_build=135,
        version_type="official",
        player_name="allen",
        locale="en_US",
        usid="y3/p3X7wEtk=",
        uuid=uuid.UUID("4aef2f79-8717-4f99-0000-0000bd7aa1b2"),
        mobile=False,
        color=0xFF76A6FF,
    )
