# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board client abstract transport interface.

Provides a low-level abstract interface for sending opaque request bytes to a
screen control board and receiving the unframed response byte stream. Does
not provide any higher-level abstractions such as commands or state.

Received data is delivered through a callback rather than by request/response
transactions, because the screen control board also sends unsolicited updates.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from ..internal_types import *
from ..pkg_logging import logger

DataHandler = Callable[[bytes], None]
"""Called with each chunk of bytes received, in order."""

CloseHandler = Callable[[Optional[BaseException]], None]
"""Called once when the transport shuts down, with the exception that caused it, if any."""

class ScbClientTransport(ABC):
    data_handler: Optional[DataHandler] = None
    close_handler: Optional[CloseHandler] = None

    def set_handlers(
            self,
            data_handler: Optional[DataHandler]=None,
            close_handler: Optional[CloseHandler]=None,
          ) -> None:
        """Sets the callbacks for received data and shutdown"""
        self.data_handler = data_handler
        self.close_handler = close_handler

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """True iff the transport is open and has not begun shutting down"""
        raise NotImplementedError()

    @abstractmethod
    async def send(self, data: bytes) -> None:
        """Writes bytes to the screen control board.

        On error, the transport will be shut down, and no further interaction is possible.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down. Does not wait for the transport to finish
           closing. Safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already shutting down or closed.

        Does not raise an exception based on final status.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    async def wait(self) -> None:
        """Waits for complete shutdown/cleanup. Does not initiate shutdown
        Not safe to call from a callback.

        Returns immediately if the transport is already closed.
        Raises an exception if the final status of the transport is an exception.

        Must be implemented by a subclass.
        """
        raise NotImplementedError()

    async def aclose(self, exc: Optional[BaseException] = None) -> None:
        """Closes the transport and waits for complete shutdown/cleanup.
        Not safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already closed.

        Raises an exception if the final status of the transport is an exception.

        May be overridden by subclasses. The default implementation simply calls
        shutdown() and then wait().
        """
        await self.shutdown(exc)
        await self.wait()

    def deliver_data(self, data: bytes) -> None:
        """Hands received bytes to the data handler, if any"""
        if self.data_handler is not None:
            self.data_handler(data)

    def deliver_close(self, exc: Optional[BaseException]) -> None:
        """Notifies the close handler, if any. Called at most once by subclasses."""
        if self.close_handler is not None:
            try:
                self.close_handler(exc)
            except Exception:
                logger.exception(f"{self}: Exception in close handler")

    async def __aenter__(self) -> ScbClientTransport:
        """Enters a context that will close the transport on exit."""
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        """Exits the context, closes the transport, and waits for complete shutdown/cleanup."""
        # Close the transport without raising an exception
        closer: asyncio.Task[None] = asyncio.ensure_future(self.aclose(exc))
        assert isinstance(closer, asyncio.Task)
        done, pending = await asyncio.wait([closer])
        assert len(done) == 1 and len(pending) == 0
        if exc is None:
            # raise the exception from the transport if there is one
            closer.result()
