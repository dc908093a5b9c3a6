"""Byte-level writer and reader for the wire format.

All multi-byte integers are big-endian, matching Java's ``DataOutput``
which the game server is built on. :class:`ByteWriter` only ever grows;
:class:`ByteReader` walks a fixed slice with a cursor that never passes
the end of the slice.
"""

from __future__ import annotations

from typing import Optional
import struct

from protocol.constants import MAX_STRING_LENGTH
from utils.exceptions import DecodeError, EncodeError

_U8 = struct.Struct('>B')
_I8 = struct.Struct('>b')
_U16 = struct.Struct('>H')
_I16 = struct.Struct('>h')
_U32 = struct.Struct('>I')
_I32 = struct.Struct('>i')
_U64 = struct.Struct('>Q')
_I64 = struct.Struct('>q')


class ByteWriter:
    """Append-only buffer that values are serialized into."""

    def __init__(self):
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def getvalue(self) -> bytes:
        """Return a copy of everything written so far."""
        return bytes(self._buffer)

    def _pack(self, fmt: struct.Struct, value: int) -> None:
        try:
            self._buffer.extend(fmt.pack(value))
        except struct.error as e:
            raise EncodeError(f"Value {value} does not fit format {fmt.format}: {e}") from e

    def u8(self, value: int) -> None:
        self._pack(_U8, value)

    def i8(self, value: int) -> None:
        self._pack(_I8, value)

    def u16(self, value: int) -> None:
        self._pack(_U16, value)

    def i16(self, value: int) -> None:
        self._pack(_I16, value)

    def u32(self, value: int) -> None:
        self._pack(_U32, value)

    def i32(self, value: int) -> None:
        self._pack(_I32, value)

    def u64(self, value: int) -> None:
        self._pack(_U64, value)

    def i64(self, value: int) -> None:
        self._pack(_I64, value)

    def bool(self, value: bool) -> None:
        self.u8(1 if value else 0)

    def str(self, value: str) -> None:
        """
        Write a string as its UTF-8 byte length (u16) followed by the bytes.

        Args:
            value: Text to write

        Raises:
            EncodeError: If the UTF-8 form is longer than 65535 bytes
        """
        encoded = value.encode('utf-8')
        if len(encoded) > MAX_STRING_LENGTH:
            raise EncodeError(
                f"String of {len(encoded)} bytes exceeds limit {MAX_STRING_LENGTH}"
            )
        self.u16(len(encoded))
        self._buffer.extend(encoded)

    def nullable_str(self, value: Optional[str]) -> None:
        """Write a presence byte, then the string itself when present."""
        if value is None:
            self.u8(0)
        else:
            self.u8(1)
            self.str(value)

    def bytes(self, data: bytes) -> None:
        """Append a series of bytes as-is."""
        self._buffer.extend(data)


class ByteReader:
    """
    Cursor over a byte slice.

    Every read either consumes exactly the width of the value it returns
    or raises :class:`DecodeError` with the cursor left where it was.
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def available(self) -> int:
        """Number of bytes left after the cursor."""
        return len(self._data) - self._pos

    def _take(self, n: int) -> bytes:
        if n < 0 or self.available < n:
            raise DecodeError(
                f"Need {n} bytes at offset {self._pos}, only {self.available} left"
            )
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def _unpack(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self._take(fmt.size))[0]

    def u8(self) -> int:
        return self._unpack(_U8)

    def i8(self) -> int:
        return self._unpack(_I8)

    def u16(self) -> int:
        return self._unpack(_U16)

    def i16(self) -> int:
        return self._unpack(_I16)

    def u32(self) -> int:
        return self._unpack(_U32)

    def i32(self) -> int:
        return self._unpack(_I32)

    def u64(self) -> int:
        return self._unpack(_U64)

    def i64(self) -> int:
        return self._unpack(_I64)

    def bool(self) -> bool:
        return self.u8() != 0

    def peek_u8(self) -> int:
        """Return the next byte without moving the cursor."""
        if self.available < 1:
            raise DecodeError(f"No byte to peek at offset {self._pos}")
        return self._data[self._pos]

    def str(self) -> str:
        """
        Read a u16 length-prefixed UTF-8 string.

        Undecodable bytes are replaced rather than rejected so that traffic
        from a misbehaving peer can still be inspected.
        """
        start = self._pos
        length = self.u16()
        try:
            raw = self._take(length)
        except DecodeError:
            self._pos = start
            raise
        return raw.decode('utf-8', errors='replace')

    def nullable_str(self) -> Optional[str]:
        """Read a presence byte followed by a string when present."""
        start = self._pos
        present = self.bool()
        if not present:
            return None
        try:
            return self.str()
        except DecodeError:
            self._pos = start
            raise

    def bytes(self, n: int) -> bytes:
        """Read exactly n raw bytes."""
        return self._take(n)

    def remaining(self) -> bytes:
        """Consume and return everything after the cursor."""
        return self._take(self.available)
