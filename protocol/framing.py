"""Reassembly of length-prefixed TCP frames.

TCP may split one frame across several reads or merge several frames into
one read. :class:`FrameAssembler` buffers one direction of a stream and
hands back each frame payload only once all of its declared bytes have
arrived.
"""

from typing import List
import struct

from protocol.constants import HEADER_FORMAT, HEADER_SIZE


class FrameAssembler:
    """Buffer for one direction of a TCP stream."""

    def __init__(self):
        self._buffer = bytearray()
        self.frames_emitted: int = 0

    @property
    def buffered(self) -> int:
        """Number of bytes waiting for the rest of their frame."""
        return len(self._buffer)

    def feed(self, data: bytes) -> List[bytes]:
        """
        Add received bytes and extract every frame they complete.

        Args:
            data: Bytes exactly as read from the socket

        Returns:
            Payloads of the completed frames, length prefix removed, in
            stream order
        """
        self._buffer.extend(data)
        frames: List[bytes] = []
        while len(self._buffer) >= HEADER_SIZE:
            (length,) = struct.unpack_from(HEADER_FORMAT, self._buffer)
            total = HEADER_SIZE + length
            if len(self._buffer) < total:
                break  # Need more data
            frames.append(bytes(self._buffer[HEADER_SIZE:total]))
            del self._buffer[:total]
        self.frames_emitted += len(frames)
        return frames
