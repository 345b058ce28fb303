# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board TCP/IP client transport.

Provides an implementation of ScbClientTransport over a TCP/IP
socket.
"""

from __future__ import annotations

import asyncio
from asyncio import Future

from ..internal_types import *
from ..exceptions import ScbTransportError
from ..constants import DEFAULT_TIMEOUT, DEFAULT_PORT, READ_CHUNK_SIZE
from ..pkg_logging import logger

from .client_transport import ScbClientTransport
from .resolve_host import resolve_scb_tcp_host

class TcpScbClientTransport(ScbClientTransport):
    """Screen control board TCP/IP client transport."""

    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    host: str
    port: int
    timeout_secs: float
    final_status: Future[None]
    reader_task: Optional[asyncio.Task[None]] = None
    writer_closed: bool = False

    def __init__(
            self,
            host: str,
            port: int=DEFAULT_PORT,
            timeout_secs: float = DEFAULT_TIMEOUT
          ) -> None:
        """Initializes the transport.
        """
        super().__init__()
        self.host = host
        self.port = port
        self.timeout_secs = timeout_secs
        self.final_status = asyncio.get_event_loop().create_future()

    @property
    def is_connected(self) -> bool:
        return self.writer is not None and not self.final_status.done()

    async def _read_loop(self) -> None:
        """Reads chunks until EOF or error, handing each to the data handler.

        On exit, the transport will be shut down, and no further interaction is possible.
        """
        assert self.reader is not None
        exc: Optional[BaseException] = None
        try:
            while True:
                data = await self.reader.read(READ_CHUNK_SIZE)
                if len(data) == 0:
                    raise ScbTransportError("Connection closed by screen control board")
                logger.debug(f"{self}: Read {len(data)} bytes: {data!r}")
                self.deliver_data(data)
        except asyncio.CancelledError:
            logger.debug(f"{self}: Reader task cancelled")
        except ScbTransportError as e:
            exc = e
        except Exception as e:
            exc = ScbTransportError(f"{self}: Read failed: {e}")
            exc.__cause__ = e
        finally:
            self.reader_task = None
            await self.shutdown(exc)

    async def send(self, data: bytes) -> None:
        """Writes bytes to the screen control board, with timeout.

        On error, the transport will be shut down, and no further interaction is possible.
        """
        if not self.is_connected:
            raise ScbTransportError(f"{self}: Not connected")
        assert self.writer is not None

        try:
            logger.debug(f"{self}: Writing {len(data)} bytes: {data!r}")
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), self.timeout_secs)
        except Exception as e:
            error = ScbTransportError(f"{self}: Write failed: {e}")
            await self.shutdown(error)
            raise error from e

    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down. Does not wait for the transport to finish
           closing. Safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already shutting down or closed.

        Does not raise an exception based on final status.
        """
        if self.final_status.done():
            return
        if exc is not None:
            logger.info(f"{self}: Shutting down: {exc}")
            self.final_status.set_exception(exc)
        else:
            logger.debug(f"{self}: Shutting down")
            self.final_status.set_result(None)
        try:
            reader_task = self.reader_task
            if reader_task is not None and reader_task is not asyncio.current_task():
                reader_task.cancel()
        finally:
            try:
                if not self.writer_closed:
                    self.writer_closed = True
                    if self.writer is not None:
                        self.writer.close()
            except Exception:
                logger.debug("Exception while closing writer", exc_info=True)
            finally:
                self.deliver_close(exc)

    async def wait(self) -> None:
        """Waits for complete shutdown/cleanup. Does not initiate shutdown.
        Not safe to call from a callback.

        Returns immediately if the transport is already closed.
        Raises an exception if the final status of the transport is an exception.
        """
        try:
            if self.writer is not None:
                await self.writer.wait_closed()
        except Exception as e:
            logger.debug("Exception while waiting for writer to close", exc_info=True)
            await self.shutdown(e)
        finally:
            if not self.final_status.done():
                await self.shutdown()
        await self.final_status

    async def connect(self) -> None:
        """Connect to the screen control board, with timeout, and start reading.
        """
        assert self.reader is None and self.writer is None
        try:
            logger.debug(f"Connecting to screen control board at {self.host}:{self.port}")
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port), self.timeout_secs)
            self.reader_task = asyncio.create_task(self._read_loop())
            logger.info(f"{self}: Connected")
        except BaseException as e:
            await self.shutdown(e)
            try:
                await self.wait()
            except BaseException:
                pass
            raise

    @classmethod
    async def create(
            cls,
            host: Optional[str]=None,
            port: Optional[int]=None,
            timeout_secs: float=DEFAULT_TIMEOUT
          ) -> Self:
        """Creates and connects a transport to
           a screen control board that is reachable over TCP/IP.

              Args:
                host: The IPV4 address of the screen control board.
                      may optionally be prefixed with "tcp://".
                      May be suffixed with ":<port>" to specify a
                      non-default port, which will override the port argument.
                      If None, the host will be taken from the
                        DALITE_SCB_HOST environment variable.
                port: The default TCP/IP port number to use. If None, the port
                      will be taken from the DALITE_SCB_PORT. If that
                      environment variable is not found, the default
                      port (3001) will be used.
                timeout_secs: The default timeout for operations on the
                        transport. If not provided, DEFAULT_TIMEOUT (2 seconds)
                        is used.
        """
        final_host, final_port = resolve_scb_tcp_host(host, port)

        transport = cls(final_host, port=final_port, timeout_secs=timeout_secs)
        await transport.connect()
        # on error, the transport will be shut down, and no further interaction is possible
        return transport

    def __str__(self) -> str:
        return f"TcpScbClientTransport({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
