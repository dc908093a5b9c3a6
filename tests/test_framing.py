"""Tests for TCP frame reassembly."""

from protocol.encoding import frame_message
from protocol.framing import FrameAssembler


def test_single_frame():
    assembler = FrameAssembler()
    assert assembler.feed(b"\x00\x02\xfe\x01") == [b"\xfe\x01"]
    assert assembler.buffered == 0
    assert assembler.frames_emitted == 1


def test_frame_split_across_reads():
    assembler = FrameAssembler()
    data = frame_message(b"\xfe\x04\x00\x00\x00\x09")

    assert assembler.feed(data[:1]) == []
    assert assembler.feed(data[1:5]) == []
    assert assembler.buffered == 5
    assert assembler.feed(data[5:]) == [b"\xfe\x04\x00\x00\x00\x09"]
    assert assembler.buffered == 0


def test_several_frames_in_one_read():
    assembler = FrameAssembler()
    data = frame_message(b"a") + frame_message(b"bc") + frame_message(b"def")[:3]

    assert assembler.feed(data) == [b"a", b"bc"]
    assert assembler.buffered == 3
    assert assembler.feed(b"ef") == [b"def"]
    assert assembler.frames_emitted == 3


def test_empty_frame():
    assembler = FrameAssembler()
    assert assembler.feed(b"\x00\x00\x00\x01z") == [b"", b"z"]
