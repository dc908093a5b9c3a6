"""Compression and transport framing helpers."""

import struct

import lz4.block

from protocol.constants import HEADER_FORMAT, MAX_FRAME_SIZE
from utils.exceptions import MessageTooLargeError


def compress_block(data: bytes) -> bytes:
    """
    Compress bytes into a raw LZ4 block.

    The block carries no size prefix; the receiver learns the original size
    from the enclosing PacketMessage header.
    """
    return lz4.block.compress(data, store_size=False)


def decompress_block(data: bytes, uncompressed_size: int) -> bytes:
    """
    Decompress a raw LZ4 block of known original size.

    ``uncompressed_size`` is only an upper bound for the output; a block
    that expands to fewer bytes is returned as is, so callers must check
    the length themselves.

    Raises:
        lz4.block.LZ4BlockError: If the block is corrupt or expands past
            ``uncompressed_size`` bytes
    """
    return lz4.block.decompress(data, uncompressed_size=uncompressed_size)


def frame_message(payload: bytes) -> bytes:
    """
    Prefix a payload with its length for sending over TCP.

    Raises:
        MessageTooLargeError: If the payload does not fit a 16-bit length
    """
    if len(payload) > MAX_FRAME_SIZE:
        raise MessageTooLargeError(
            f"Payload size {len(payload)} exceeds frame limit {MAX_FRAME_SIZE}"
        )
    return struct.pack(HEADER_FORMAT, len(payload)) + payload
