# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board client.

Keeps a cache of the state reported by the screen control board, derives
display variables and feedback states from it, and translates actions into
wire requests.
"""

from __future__ import annotations

from enum import Enum

from ..internal_types import *
from ..exceptions import (
    DaliteScbError,
    AccessViolationError,
    MalformedLineError,
    UnknownCommandError,
  )
from ..pkg_logging import logger
from ..protocol import (
    CommandId,
    CommandMeta,
    CommandRegistry,
    IndexedCommandMeta,
    UnitTable,
    LineFramer,
    StateCache,
    StateProjector,
    VariableDefinition,
    FeedbackEvaluator,
    FeedbackRequest,
    ParsedLine,
    build_get,
    build_set,
    build_poll,
    encode_position,
    encode_aspect_ratio_target,
    parse_line,
    relay_status_map,
    position_type_map,
    default_registry,
    default_units,
    DEFAULT_UNIT,
  )
from ..protocol.command_meta import DEFAULT_ASPECT_RATIO_INDEX

from .client_transport import ScbClientTransport
from .client_config import ScbClientConfig
from .tcp_client_transport import TcpScbClientTransport
from .poller import Poller

class ConnectionStatus(Enum):
    OK = 'ok'
    WARNING = 'warning'
    ERROR = 'error'

StatusListener = Callable[[ConnectionStatus, Optional[str]], None]
VariablesListener = Callable[[Dict[str, str]], None]
"""Called with the variables whose values changed."""
FeedbackListener = Callable[[str, bool], None]
"""Called with a feedback id and its new match state."""

class ScbClient:
    """Screen control board TCP/IP client."""

    transport: ScbClientTransport
    config: ScbClientConfig
    registry: CommandRegistry
    units: UnitTable
    framer: LineFramer
    cache: StateCache
    projector: StateProjector
    evaluator: FeedbackEvaluator
    poller: Poller

    status: ConnectionStatus
    status_message: Optional[str]
    variables: Dict[str, str]
    feedbacks: Dict[str, FeedbackRequest]
    feedback_states: Dict[str, bool]

    _status_listeners: List[StatusListener]
    _variables_listeners: List[VariablesListener]
    _feedback_listeners: List[FeedbackListener]

    def __init__(
            self,
            transport: ScbClientTransport,
            config: Optional[ScbClientConfig]=None,
            registry: CommandRegistry=default_registry,
            units: UnitTable=default_units,
          ):
        self.transport = transport
        self.config = ScbClientConfig(base_config=config) if config is not None else ScbClientConfig()
        self.registry = registry
        self.units = units
        self.framer = LineFramer()
        self.cache = StateCache()
        self.projector = StateProjector(registry, units)
        self.evaluator = FeedbackEvaluator(registry, units)
        self.poller = Poller(self.poll, self.config.poll_interval_secs)
        self.status = ConnectionStatus.WARNING
        self.status_message = "Connecting"
        self.variables = {}
        self.feedbacks = {}
        self.feedback_states = {}
        self._status_listeners = []
        self._variables_listeners = []
        self._feedback_listeners = []
        transport.set_handlers(self.handle_data, self.handle_close)

    def add_status_listener(self, listener: StatusListener) -> None:
        self._status_listeners.append(listener)

    def add_variables_listener(self, listener: VariablesListener) -> None:
        self._variables_listeners.append(listener)

    def add_feedback_listener(self, listener: FeedbackListener) -> None:
        self._feedback_listeners.append(listener)

    def set_status(self, status: ConnectionStatus, message: Optional[str]=None) -> None:
        self.status = status
        self.status_message = message
        self.notify(self._status_listeners, status, message)

    def notify(self, listeners: Iterable[Callable[..., None]], *args: Any) -> None:
        """Calls each listener in turn. A listener that raises is logged and does not
           prevent the others from being called."""
        for listener in list(listeners):
            try:
                listener(*args)
            except Exception:
                logger.exception(f"{self}: Exception in listener {listener}")

    def start(self) -> None:
        """Marks the client connected and starts polling. Must be called from a running event loop."""
        if not self.transport.is_connected:
            raise DaliteScbError(f"{self}: Transport is not connected")
        self.set_status(ConnectionStatus.OK)
        self.poller.start()

    @property
    def is_connected(self) -> bool:
        return self.transport.is_connected

    def handle_close(self, exc: Optional[BaseException]) -> None:
        """Called by the transport when it shuts down"""
        self.poller.stop()
        self.framer.reset()
        if exc is None:
            logger.info(f"{self}: Disconnected")
            self.set_status(ConnectionStatus.ERROR, "Disconnected")
        else:
            logger.error(f"{self}: Network error: {exc}")
            self.set_status(ConnectionStatus.ERROR, str(exc))

    async def aclose(self) -> None:
        self.poller.stop()
        await self.transport.aclose()

    async def __aenter__(self) -> ScbClient:
        logger.debug(f"{self}: Entering async context manager")
        return self

    async def __aexit__(
            self,
            exc_type: type[BaseException],
            exc_val: Optional[BaseException],
            exc_tb: TracebackType
          ) -> None:
        logger.debug(f"{self}: Exiting async context manager, exc={exc_val}")
        await self.aclose()

    @classmethod
    async def create(
            cls,
            host: Optional[str]=None,
            port: Optional[int]=None,
            config: Optional[ScbClientConfig]=None,
            registry: CommandRegistry=default_registry,
            units: UnitTable=default_units,
          ) -> Self:
        """Connects to a screen control board over TCP/IP and starts polling."""
        config = ScbClientConfig(host=host, port=port, base_config=config)
        config.validate()
        assert config.host is not None
        transport = await TcpScbClientTransport.create(
                config.host,
                port=config.port,
                timeout_secs=config.timeout_secs
              )
        try:
            self = cls(transport, config=config, registry=registry, units=units)
            self.start()
        except BaseException:
            await transport.aclose()
            raise
        return self

    def handle_line(self, line: str) -> Optional[ParsedLine]:
        """Parses one response line into the cache. Bad lines are logged and dropped."""
        try:
            parsed = parse_line(line, self.registry)
        except MalformedLineError as e:
            logger.debug(f"{self}: Dropping malformed line: {e}")
            return None
        except UnknownCommandError as e:
            logger.debug(f"{self}: Unknown SCB command response: {e}")
            return None
        self.cache.update(parsed.command.command_id, parsed.value, wire_slot=parsed.slot)
        return parsed

    def handle_data(self, chunk: bytes) -> None:
        """Processes one chunk of received bytes: frame, parse, cache, project, then
           re-evaluate feedbacks."""
        for line in self.framer.feed(chunk):
            self.handle_line(line)
        variables, projected = self.projector.project(self.cache)
        changed = dict((k, v) for k, v in variables.items() if self.variables.get(k) != v)
        self.variables.update(variables)
        if len(changed) > 0:
            self.notify(self._variables_listeners, changed)
        self.check_feedbacks(projected)

    def evaluate_feedback(self, request: FeedbackRequest) -> bool:
        return self.evaluator.evaluate(request, self.cache)

    def add_feedback(self, feedback_id: str, request: FeedbackRequest) -> bool:
        """Registers a feedback to be re-evaluated whenever its command is updated.
           Returns its current state."""
        self.feedbacks[feedback_id] = request
        state = self.evaluate_feedback(request)
        self.feedback_states[feedback_id] = state
        return state

    def remove_feedback(self, feedback_id: str) -> None:
        self.feedbacks.pop(feedback_id, None)
        self.feedback_states.pop(feedback_id, None)

    def check_feedbacks(self, command_ids: Iterable[CommandId]) -> None:
        """Re-evaluates registered feedbacks on the given commands, notifying listeners of changes"""
        command_id_set = set(command_ids)
        for feedback_id, request in list(self.feedbacks.items()):
            if not request.command_id in command_id_set:
                continue
            state = self.evaluate_feedback(request)
            if self.feedback_states.get(feedback_id) != state:
                self.feedback_states[feedback_id] = state
                self.notify(self._feedback_listeners, feedback_id, state)

    async def send_line(self, line: str) -> None:
        await self.transport.send(line.encode('ascii'))

    def resolve_wire_command(
            self,
            command: Union[str, CommandId, CommandMeta],
            wire_slot: Optional[int]=None,
          ) -> Tuple[CommandMeta, Optional[int]]:
        """Resolves a command and its wire slot. A slot-suffixed wire token such as 'A5'
           supplies its own slot."""
        if isinstance(command, str) and wire_slot is None:
            try:
                return self.registry.split_wire_token(command)
            except UnknownCommandError:
                pass
        return (self.registry.resolve(command), wire_slot)

    async def get(self, command: Union[str, CommandId, CommandMeta], wire_slot: Optional[int]=None) -> Optional[str]:
        """Requests the current value of a command. Returns the request sent, or None if
           the command is not readable. Indexed commands need a wire slot, either given
           explicitly or as part of the token."""
        meta, wire_slot = self.resolve_wire_command(command, wire_slot)
        try:
            line = build_get(meta, wire_slot=wire_slot)
        except AccessViolationError as e:
            logger.debug(f"{self}: Suppressed get: {e}")
            return None
        await self.send_line(line)
        return line

    async def set(
            self,
            command: Union[str, CommandId, CommandMeta],
            value: Union[str, int],
            wire_slot: Optional[int]=None,
          ) -> Optional[str]:
        """Sets the value of a command. Returns the request sent, or None if the command
           is not writable."""
        meta, wire_slot = self.resolve_wire_command(command, wire_slot)
        try:
            line = build_set(meta, value, wire_slot=wire_slot)
        except AccessViolationError as e:
            logger.debug(f"{self}: Suppressed set: {e}")
            return None
        await self.send_line(line)
        return line

    async def poll(self) -> None:
        """Sends a single batch of read requests for every readable command."""
        await self.send_line(build_poll(self.registry))

    async def run_action(
            self,
            command: Union[str, CommandId, CommandMeta],
            options: Optional[Mapping[str, Any]]=None,
          ) -> Optional[str]:
        """Performs a button action. Returns the request sent, if any.

        Options by command:
            RELAY_STATUS:                    action (wire value; 'ST', 'UP' or 'DN')
            SCREEN_POSITION/TARGET_POSITION: type ('FIX', 'DEC' or 'INC'), unit, value
            ASPECT_RATIO:                    index (logical aspect ratio index)
        """
        if options is None:
            options = {}
        try:
            meta = self.registry.resolve(command)
        except UnknownCommandError as e:
            logger.error(f"{self}: No button action handler for command: {command}: {e}")
            return None
        command_id = meta.command_id
        if command_id == CommandId.RELAY_STATUS:
            return await self.set(meta, options.get('action', relay_status_map["STOP"]))
        elif command_id in (CommandId.TARGET_POSITION, CommandId.SCREEN_POSITION):
            value = options.get('value')
            if value is None or value == '':
                logger.debug(f"{self}: No value for {meta.name} action; ignoring")
                return None
            native = self.units.to_native(float(value), options.get('unit', DEFAULT_UNIT))
            position_type = options.get('type', position_type_map["SET"])
            return await self.set(meta, encode_position(position_type, native))
        elif command_id == CommandId.ASPECT_RATIO:
            assert isinstance(meta, IndexedCommandMeta)
            index = int(options.get('index', DEFAULT_ASPECT_RATIO_INDEX))
            return await self.set(CommandId.TARGET_POSITION, encode_aspect_ratio_target(meta, index))
        else:
            logger.error(f"{self}: No button action handler for command: {meta.name}")
            return None

    def variable_definitions(self) -> List[VariableDefinition]:
        return self.projector.variable_definitions()

    def __str__(self) -> str:
        return f"ScbClient(transport={self.transport})"

    def __repr__(self) -> str:
       return str(self)
