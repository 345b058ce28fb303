# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A single client connection to the screen control board emulator.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import LineFramer

if TYPE_CHECKING:
    from .emulator_impl import ScbEmulator

class ScbEmulatorSession(asyncio.Protocol):
    emulator: ScbEmulator
    session_id: int
    framer: LineFramer
    transport: Optional[asyncio.Transport] = None

    def __init__(self, emulator: ScbEmulator):
        self.emulator = emulator
        self.session_id = emulator.alloc_session_id(self)
        self.framer = LineFramer()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        logger.debug(f"{self}: Connection made")
        self.transport = transport

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"{self}: Connection lost: {exc}")
        self.transport = None
        self.emulator.free_session_id(self.session_id)

    def data_received(self, data: bytes) -> None:
        for line in self.framer.feed(data):
            self.emulator.on_line_received(self, line)

    def write(self, data: bytes) -> None:
        """Writes data to the client, split into fragments if the emulator is configured to do so"""
        if self.transport is None:
            logger.debug(f"{self}: Dropping write on closed session: {data!r}")
            return
        chunk_size = self.emulator.chunk_size
        if chunk_size is None:
            self.transport.write(data)
        else:
            for i in range(0, len(data), chunk_size):
                self.transport.write(data[i:i + chunk_size])

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()

    def __str__(self) -> str:
        return f"ScbEmulatorSession({self.session_id})"

    def __repr__(self) -> str:
        return str(self)
