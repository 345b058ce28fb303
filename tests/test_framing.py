"""Tests for carriage-return line framing."""

from dalite_scb.protocol import LineFramer

STREAM = b"0 0 GE RE ST\r0 0 GE MM 1200\r\r0 0 GE A0 1100\r0 0 GE TA 12"
EXPECTED = ["0 0 GE RE ST", "0 0 GE MM 1200", "", "0 0 GE A0 1100"]


def feed_all(chunks):
    framer = LineFramer()
    lines = []
    for chunk in chunks:
        lines.extend(framer.feed(chunk))
    return framer, lines


def test_multiple_lines_in_one_chunk():
    framer, lines = feed_all([STREAM])
    assert lines == EXPECTED
    assert framer.pending == b"0 0 GE TA 12"


def test_partial_line_is_retained():
    framer = LineFramer()
    assert framer.feed(b"0 0 GE") == []
    assert framer.feed(b" RE ST") == []
    assert framer.feed(b"\r") == ["0 0 GE RE ST"]
    assert framer.pending == b""


def test_every_split_point_gives_the_same_lines():
    for i in range(len(STREAM) + 1):
        _, lines = feed_all([STREAM[:i], STREAM[i:]])
        assert lines == EXPECTED


def test_byte_at_a_time():
    framer, lines = feed_all([STREAM[i:i + 1] for i in range(len(STREAM))])
    assert lines == EXPECTED
    assert framer.pending == b"0 0 GE TA 12"


def test_reset_discards_partial_line():
    framer = LineFramer()
    framer.feed(b"0 0 GE")
    framer.reset()
    assert framer.feed(b"0 0 GE RE UP\r") == ["0 0 GE RE UP"]
