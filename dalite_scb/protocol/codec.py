# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Wire encoding of requests to, and decoding of response lines from, the screen
control board.

Requests:
    $ 0 GE <token>\r             Read the current value of <token>
    # 0 SE <token> <value>\r     Set <token> to <value>

Responses:
    <ignored> <ignored> <type> <token> <value...>\r

<type> distinguishes a read acknowledgement from a write acknowledgement, and
is passed through uninterpreted. <value...> is the remainder of the line.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import DaliteScbError, AccessViolationError, MalformedLineError
from .command_meta import (
    CommandMeta,
    CommandRegistry,
    IndexedCommandMeta,
    default_registry,
  )

GET_PREFIX = "$ 0 GE"
SET_PREFIX = "# 0 SE"
LINE_TERMINATOR = "\r"
MIN_RESPONSE_FIELDS = 5

class ParsedLine:
    """A single decoded response line"""
    command: CommandMeta
    slot: Optional[int]
    """The wire slot digit for indexed commands. None otherwise."""
    response_type: str
    value: str

    def __init__(self, command: CommandMeta, slot: Optional[int], response_type: str, value: str):
        self.command = command
        self.slot = slot
        self.response_type = response_type
        self.value = value

    def __str__(self) -> str:
        slot_str = '' if self.slot is None else f"[{self.slot}]"
        return f"ParsedLine({self.command.name}{slot_str} {self.response_type}: {self.value!r})"

    def __repr__(self) -> str:
        return str(self)

def wire_token(command: CommandMeta, wire_slot: Optional[int]=None) -> str:
    """Returns the token of a command as sent on the wire. Indexed commands require a wire slot;
       other commands must not have one."""
    if isinstance(command, IndexedCommandMeta):
        if wire_slot is None:
            raise DaliteScbError(f"SCB command {command.name} requires a slot")
        return command.slot_token(wire_slot)
    if wire_slot is not None:
        raise DaliteScbError(f"SCB command {command.name} is not indexed")
    return command.token

def build_get(command: CommandMeta, wire_slot: Optional[int]=None) -> str:
    """Builds a read request. Raises AccessViolationError if the command is not readable."""
    if not command.is_readable:
        raise AccessViolationError(f"SCB command {command.name} is not readable")
    return f"{GET_PREFIX} {wire_token(command, wire_slot)}{LINE_TERMINATOR}"

def build_set(command: CommandMeta, value: Union[str, int], wire_slot: Optional[int]=None) -> str:
    """Builds a write request. Raises AccessViolationError if the command is not writable."""
    if not command.is_writable:
        raise AccessViolationError(f"SCB command {command.name} is not writable")
    return f"{SET_PREFIX} {wire_token(command, wire_slot)} {value}{LINE_TERMINATOR}"

def encode_position(position_type: str, native_value: int) -> str:
    """Encodes the value of a screen or target position set; e.g., 'FIX 1200'"""
    return f"{position_type} {native_value}"

def encode_aspect_ratio_target(command: IndexedCommandMeta, logical_index: int) -> str:
    """Encodes the target position value that selects an aspect ratio preset; e.g., 'A6'
       for logical index 5."""
    return command.slot_token(command.wire_slot(logical_index))

def build_poll(registry: CommandRegistry=default_registry) -> str:
    """Builds a single batch of read requests for every readable command.

    Indexed commands are expanded to one request per slot.
    """
    requests: List[str] = []
    indexed: List[IndexedCommandMeta] = []
    for command in registry.readable():
        if isinstance(command, IndexedCommandMeta):
            indexed.append(command)
        else:
            requests.append(build_get(command))
    for command in indexed:
        for slot in range(command.slot_count):
            requests.append(build_get(command, wire_slot=slot))
    return ''.join(requests)

def parse_line(line: str, registry: CommandRegistry=default_registry) -> ParsedLine:
    """Decodes a single response line (without its terminator).

    Raises MalformedLineError if the line is too short, or UnknownCommandError
    if the token does not resolve.
    """
    parts = line.split(' ')
    if len(parts) < MIN_RESPONSE_FIELDS:
        raise MalformedLineError(f"SCB response line has {len(parts)} fields, expected at least {MIN_RESPONSE_FIELDS}: {line!r}")
    command, slot = registry.split_wire_token(parts[3])
    return ParsedLine(command, slot, parts[2], ' '.join(parts[4:]))
