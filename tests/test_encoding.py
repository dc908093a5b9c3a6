"""Tests for LZ4 block helpers and TCP framing."""

import random

import pytest
from lz4.block import LZ4BlockError

from protocol.encoding import compress_block, decompress_block, frame_message
from utils.exceptions import EncodeError, MessageTooLargeError


def test_compressed_block_has_no_size_prefix():
    data = b"abcd" * 64
    block = compress_block(data)
    assert len(block) < len(data)
    assert decompress_block(block, len(data)) == data


@pytest.mark.parametrize("data", [
    b"",
    b"\x07",
    bytes(range(256)),
    random.Random(7).randbytes(4096),
], ids=["empty", "single-byte", "all-byte-values", "random"])
def test_compression_round_trip(data):
    assert decompress_block(compress_block(data), len(data)) == data


def test_short_expansion_is_returned_unchecked():
    block = compress_block(b"hello")
    assert decompress_block(block, 10) == b"hello"


def test_captured_block_decompresses(captured_connect, captured_connect_body):
    assert decompress_block(captured_connect[4:], 68) == captured_connect_body


def test_corrupt_block_raises():
    with pytest.raises(LZ4BlockError):
        decompress_block(b"\xff\xff\xff", 64)


def test_frame_message_prefixes_length():
    assert frame_message(b"\x01\x02\x03") == b"\x00\x03\x01\x02\x03"
    assert frame_message(b"") == b"\x00\x00"
    assert frame_message(b"x" * 65535)[:2] == b"\xff\xff"


def test_frame_message_limit():
    with pytest.raises(MessageTooLargeError) as exc_info:
        frame_message(b"x" * 65536)
    assert isinstance(exc_info.value, EncodeError)
