# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Reassembly of carriage-return terminated lines from a TCP byte stream.
"""

from __future__ import annotations

from ..internal_types import *
from ..constants import LINE_DELIMITER

class LineFramer:
    """Splits an arbitrarily chunked byte stream into complete lines.

    Bytes following the last delimiter of a chunk are retained and prefixed to
    the next chunk, so lines and delimiters may be split anywhere.
    """
    delimiter: bytes
    encoding: str
    _buffer: bytearray

    def __init__(self, delimiter: bytes=LINE_DELIMITER, encoding: str='ascii'):
        assert len(delimiter) > 0
        self.delimiter = delimiter
        self.encoding = encoding
        self._buffer = bytearray()

    @property
    def pending(self) -> bytes:
        """The unterminated bytes retained from previous chunks"""
        return bytes(self._buffer)

    def feed(self, chunk: bytes) -> List[str]:
        """Appends a chunk and returns every line it completes, in order, without delimiters."""
        self._buffer += chunk
        lines: List[str] = []
        offset = 0
        while True:
            i = self._buffer.find(self.delimiter, offset)
            if i < 0:
                break
            lines.append(self._buffer[offset:i].decode(self.encoding, errors='replace'))
            offset = i + len(self.delimiter)
        if offset > 0:
            del self._buffer[:offset]
        return lines

    def reset(self) -> None:
        """Discards any retained partial line"""
        self._buffer.clear()

    def __str__(self) -> str:
        return f"LineFramer(pending={len(self._buffer)})"

    def __repr__(self) -> str:
        return str(self)
