# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Periodic refresh of all readable screen control board state.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..constants import POLL_INTERVAL

class Poller:
    """Calls an async poll function on a fixed interval until stopped or the poll fails."""
    poll: Callable[[], Awaitable[None]]
    interval_secs: float
    task: Optional[asyncio.Task[None]] = None

    def __init__(self, poll: Callable[[], Awaitable[None]], interval_secs: float=POLL_INTERVAL):
        self.poll = poll
        self.interval_secs = interval_secs

    @property
    def is_running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self) -> None:
        """Starts polling. The first poll is sent one interval from now. Must be called
           from a running event loop."""
        if self.is_running:
            return
        self.task = asyncio.create_task(self._run())

    def stop(self) -> None:
        """Stops polling immediately. Safe to call from a callback."""
        task = self.task
        self.task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval_secs)
                await self.poll()
        except asyncio.CancelledError:
            logger.debug(f"{self}: Cancelled")
        except Exception as e:
            logger.debug(f"{self}: Stopping after failed poll: {e}")

    def __str__(self) -> str:
        return f"Poller(interval={self.interval_secs})"

    def __repr__(self) -> str:
        return str(self)
