# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board emulator.

Provides a simple emulation of a Da-Lite screen control board on TCP/IP.
Requests are answered from an in-memory table of raw values keyed by wire
token. The screen does not move; position sets take effect immediately.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    CommandId,
    CommandRegistry,
    IndexedCommandMeta,
    default_registry,
  )
from ..constants import DEFAULT_PORT
from ..exceptions import DaliteScbError, UnknownCommandError

from .session import ScbEmulatorSession

def default_emulator_state() -> Dict[str, str]:
    """Initial raw values of a freshly installed screen, keyed by wire token"""
    result: Dict[str, str] = {
        'EN': '1',
        'LO': 'Theater',
        'SV': '2.1.0',
        'TD': '0',
        'RD': '89',
        'SL': '0',
        'ST': '1',
        'SW': '2438',
        'SH': '1372',
        'MA': '00:1E:C0:12:34:56',
        'SE': '0',
        'RE': 'ST',
        'UL': '0',
        'LM': '1500',
        'MM': '0',
        'TA': '0',
        'AC': '1',
        'IP': '192.168.1.50',
        'SN': '255.255.255.0',
        'DH': '0',
      }
    for slot in range(10):
        result[f"A{slot}"] = str(1000 + 50 * slot)
    return result

class ScbEmulator(AsyncContextManager['ScbEmulator']):
    registry: CommandRegistry
    state: Dict[str, str]
    bind_addr: str
    port: int
    chunk_size: Optional[int]
    sessions: Dict[int, ScbEmulatorSession]
    next_session_id: int = 0
    requests: asyncio.Queue[Optional[Tuple[ScbEmulatorSession, str]]]
    server: Optional[asyncio.Server] = None
    handler_task: Optional[asyncio.Task[None]] = None
    final_result: asyncio.Future[None]

    def __init__(
            self,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            state: Optional[Mapping[str, str]] = None,
            chunk_size: Optional[int] = None,
            registry: CommandRegistry = default_registry,
          ):
        """Creates an emulator.

        Args:
            bind_addr:  Address to listen on. Defaults to '0.0.0.0'.
            port:       Port to listen on. If 0, an ephemeral port is chosen, and
                        the port attribute is updated once started.
            state:      Initial raw values keyed by wire token. Defaults to
                        default_emulator_state().
            chunk_size: If not None, every reply is written in fragments of at most
                        this many bytes.
        """
        self.registry = registry
        self.state = default_emulator_state() if state is None else dict(state)
        self.bind_addr = '0.0.0.0' if bind_addr is None else bind_addr
        self.port = port
        self.chunk_size = chunk_size
        self.sessions = {}
        self.requests = asyncio.Queue()
        self.final_result = asyncio.get_event_loop().create_future()

    def alloc_session_id(self, session: ScbEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_line_received(self, session: ScbEmulatorSession, line: str) -> None:
        """Called when a request line is received from a session."""
        self.requests.put_nowait((session, line))

    def response_line(self, response_type: str, token: str) -> str:
        return f"0 0 {response_type} {token} {self.state[token]}\r"

    def apply_set(self, token: str, value: str) -> List[str]:
        """Applies a set request to the state table. Returns the tokens whose values changed."""
        command, slot = self.registry.split_wire_token(token)
        command_id = command.command_id
        if command_id in (CommandId.SCREEN_POSITION, CommandId.TARGET_POSITION):
            position = self.resolve_position(command_id, value)
            self.state['TA'] = position
            self.state['MM'] = position
            return ['TA', 'MM']
        self.state[token] = value
        if command_id == CommandId.RELAY_STATUS and value in ('UP', 'DN'):
            self.state['MM'] = self.state['UL' if value == 'UP' else 'LM']
            return [token, 'MM']
        return [token]

    def resolve_position(self, command_id: CommandId, value: str) -> str:
        """Interprets the value of a position set ('FIX n', 'DEC n', 'INC n', or an aspect
           ratio slot token such as 'A6') as an absolute position."""
        parts = value.split(' ')
        if len(parts) == 1:
            command, slot = self.registry.split_wire_token(parts[0])
            if not isinstance(command, IndexedCommandMeta):
                raise DaliteScbError(f"Not an aspect ratio slot: {value!r}")
            return self.state[parts[0]]
        if len(parts) != 2:
            raise DaliteScbError(f"Invalid position value: {value!r}")
        kind, amount = parts[0], int(parts[1])
        current = int(float(self.state['TA' if command_id == CommandId.TARGET_POSITION else 'MM']))
        if kind == 'FIX':
            return str(amount)
        elif kind == 'DEC':
            return str(current - amount)
        elif kind == 'INC':
            return str(current + amount)
        raise DaliteScbError(f"Invalid position type: {kind!r}")

    def handle_request_line(self, line: str) -> List[str]:
        """Handle a single request line, and return response lines.

        Unknown or malformed requests get no response.
        """
        parts = line.split(' ')
        if len(parts) < 4:
            logger.debug(f"Emulator: Ignoring short request: {line!r}")
            return []
        request_type, token = parts[2], parts[3]
        try:
            command, slot = self.registry.split_wire_token(token)
        except UnknownCommandError:
            logger.debug(f"Emulator: Ignoring unknown token: {line!r}")
            return []
        if request_type == 'GE' and command.is_readable:
            if not token in self.state:
                return []
            return [self.response_line('GE', token)]
        if request_type == 'SE' and command.is_writable and len(parts) >= 5:
            try:
                changed = self.apply_set(token, ' '.join(parts[4:]))
            except (DaliteScbError, ValueError, KeyError) as e:
                logger.debug(f"Emulator: Ignoring invalid set {line!r}: {e}")
                return []
            return [self.response_line('SE', t) for t in changed]
        logger.debug(f"Emulator: Ignoring request not permitted for {command.name}: {line!r}")
        return []

    def broadcast(self, token: str, value: str) -> None:
        """Changes a value and sends an unsolicited update to every connected session"""
        self.state[token] = value
        data = self.response_line('GE', token).encode('ascii')
        for session in list(self.sessions.values()):
            session.write(data)

    async def handle_requests(self) -> None:
        """Handle requests from sessions."""
        while True:
            session_and_line = await self.requests.get()
            try:
                if session_and_line is None:
                    logger.debug("Emulator handler: Received EOF; exiting")
                    break
                session, line = session_and_line
                try:
                    logger.debug(f"{session}: Emulator handler: received line: {line!r}")
                    response = ''.join(self.handle_request_line(line))
                    if len(response) > 0:
                        session.write(response.encode('ascii'))
                except asyncio.CancelledError:
                    logger.debug(f"{session}: Handler task cancelled; exiting")
                    break
                except Exception as e:
                    logger.exception(f"{session}: Handler task: Exception while handling request; killing session: {e}")
                    session.close()
            finally:
                self.requests.task_done()

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.wait_closed()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            self.handler_task = asyncio.create_task(self.handle_requests())
            self.server = await loop.create_server(
                lambda: ScbEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            if self.port == 0:
                self.port = self.server.sockets[0].getsockname()[1]
            logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.port}")
            await self.server.start_serving()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException:
                pass
            raise

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown."""
        try:
            await self.final_result
        finally:
            try:
                if self.server is not None:
                    try:
                        self.server.close()
                        for session in list(self.sessions.values()):
                            session.close()
                    finally:
                        await self.server.wait_closed()
            finally:
                self.server = None
                if self.handler_task is not None:
                    try:
                        await self.handler_task
                    finally:
                        self.handler_task = None

    async def close_and_wait(self, exc: Optional[BaseException]=None) -> None:
        self.close(exc)
        await self.wait_closed()

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)
            self.requests.put_nowait(None)
            if self.server is not None:
                self.server.close()

    async def __aenter__(self) -> ScbEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result(exc)
        try:
            # ensure that final_result has been awaited
            await self.wait_closed()
        except Exception:
            pass

    def __str__(self) -> str:
        return f"ScbEmulator({self.bind_addr}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
