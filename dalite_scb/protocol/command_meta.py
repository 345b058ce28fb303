#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Da-Lite Screen Control Board known commands and metadata.

This module contains the known command tokens, their access modes, and the
choice tables used by actions and feedbacks. There is no protocol implementation
here; only metadata about the protocol.
"""

from __future__ import annotations

from enum import Enum

from ..internal_types import *
from ..exceptions import UnknownCommandError
from ..constants import ASPECT_RATIO_SLOT_COUNT

class AccessMode(Enum):
    """Whether a command may be read (GE), written (SE), or both."""
    READ_ONLY = 'R'
    WRITE_ONLY = 'W'
    READ_WRITE = 'RW'

    @property
    def is_readable(self) -> bool:
        return self in (AccessMode.READ_ONLY, AccessMode.READ_WRITE)

    @property
    def is_writable(self) -> bool:
        return self in (AccessMode.WRITE_ONLY, AccessMode.READ_WRITE)

READABLE: FrozenSet[AccessMode] = frozenset([AccessMode.READ_ONLY, AccessMode.READ_WRITE])
WRITABLE: FrozenSet[AccessMode] = frozenset([AccessMode.WRITE_ONLY, AccessMode.READ_WRITE])

class CommandId(Enum):
    """Symbolic identity of every command known to this package.

    The value of each member is the wire token.
    """
    ENABLED = 'EN'
    LOCATION = 'LO'
    VERSION = 'SV'
    TARGET_DENSITY = 'TD'
    ROLLER_DIAMETER = 'RD'
    SLACK_WRAP = 'SL'
    SCREEN_THICKNESS = 'ST'
    SCREEN_WIDTH = 'SW'
    SCREEN_HEIGHT = 'SH'
    MAC_ADDRESS = 'MA'
    SENSOR_STATUS = 'SE'
    RELAY_STATUS = 'RE'
    UPPER_LIMIT = 'UL'
    LOWER_LIMIT = 'LM'
    SCREEN_POSITION = 'MM'
    TARGET_POSITION = 'TA'
    ASPECT_RATIO = 'A'
    AC = 'AC'
    IP_ADDRESS = 'IP'
    SUBNET_MASK = 'SN'
    DHCP = 'DH'
    RESET = 'RS'

class CommandMeta:
    """Metadata for a single command"""
    command_id: CommandId
    access: AccessMode
    description: Optional[str]

    def __init__(self, command_id: CommandId, access: AccessMode, description: Optional[str]=None):
        self.command_id = command_id
        self.access = access
        self.description = description

    @property
    def name(self) -> str:
        """The symbolic name of the command; e.g., 'RELAY_STATUS'"""
        return self.command_id.name

    @property
    def token(self) -> str:
        """The 1-2 character wire token of the command; e.g., 'RE'"""
        return self.command_id.value

    @property
    def is_indexed(self) -> bool:
        return False

    @property
    def is_readable(self) -> bool:
        return self.access.is_readable

    @property
    def is_writable(self) -> bool:
        return self.access.is_writable

    def __str__(self) -> str:
        return f"CommandMeta({self.name}: {self.token!r}, {self.access.value})"

    def __repr__(self) -> str:
        return str(self)

class IndexedCommandMeta(CommandMeta):
    """Metadata for a command whose wire token is shared by a fixed number of slots.

    On the wire, the slot digit is appended to the token (e.g., 'A0' through 'A9').
    Logical slot i lives in wire slot (i + 1) % slot_count; the screen
    control board numbers its aspect ratio presets this way.
    """
    slot_count: int

    def __init__(
            self,
            command_id: CommandId,
            access: AccessMode,
            description: Optional[str]=None,
            slot_count: int=ASPECT_RATIO_SLOT_COUNT,
          ):
        super().__init__(command_id, access, description=description)
        self.slot_count = slot_count

    @property
    def is_indexed(self) -> bool:
        return True

    def wire_slot(self, logical_index: int) -> int:
        """Returns the wire slot digit that holds the given logical slot"""
        return (logical_index + 1) % self.slot_count

    def slot_token(self, wire_slot: int) -> str:
        """Returns the full wire token for a wire slot; e.g., 'A3'"""
        if not 0 <= wire_slot < self.slot_count:
            raise UnknownCommandError(f"Slot {wire_slot} out of range for {self.name}")
        return f"{self.token}{wire_slot}"

    def __str__(self) -> str:
        return f"IndexedCommandMeta({self.name}: {self.token!r}[{self.slot_count}], {self.access.value})"

_C = CommandMeta
_RO = AccessMode.READ_ONLY
_WO = AccessMode.WRITE_ONLY
_RW = AccessMode.READ_WRITE

# The order of this list determines the order of actions, feedbacks, variables and polls.
DEFAULT_COMMANDS: Tuple[CommandMeta, ...] = (
    _C(CommandId.ENABLED, _RO, "Enabled"),
    _C(CommandId.LOCATION, _RO, "Location"),
    _C(CommandId.VERSION, _RO, "Software version"),
    _C(CommandId.TARGET_DENSITY, _RO, "Target density"),
    _C(CommandId.ROLLER_DIAMETER, _RO, "Roller diameter"),
    _C(CommandId.SLACK_WRAP, _RO, "Slack wrap"),
    _C(CommandId.SCREEN_THICKNESS, _RO, "Screen thickness"),
    _C(CommandId.SCREEN_WIDTH, _RO, "Screen width"),
    _C(CommandId.SCREEN_HEIGHT, _RO, "Screen height"),
    _C(CommandId.MAC_ADDRESS, _RO, "MAC address"),
    _C(CommandId.SENSOR_STATUS, _RO, "Sensor status"),
    _C(CommandId.RELAY_STATUS, _RW, "Relay status (stop/up/down)"),
    _C(CommandId.UPPER_LIMIT, _RO, "Upper limit"),
    _C(CommandId.LOWER_LIMIT, _RO, "Lower limit"),
    _C(CommandId.SCREEN_POSITION, _RW, "Current screen position"),
    _C(CommandId.TARGET_POSITION, _RW, "Target screen position"),
    IndexedCommandMeta(CommandId.ASPECT_RATIO, _RW, "Aspect ratio preset positions"),
    _C(CommandId.AC, _RO, "AC"),
    _C(CommandId.IP_ADDRESS, _RO, "IP address"),
    _C(CommandId.SUBNET_MASK, _RO, "Subnet mask"),
    _C(CommandId.DHCP, _RO, "DHCP"),
  )
"""Every command exposed by default, in declaration order."""

RESET_COMMAND = _C(CommandId.RESET, _WO, "Reset the screen control board")
"""Write-only reset command. Deliberately not part of DEFAULT_COMMANDS."""

INTERNAL_COMMANDS: FrozenSet[CommandId] = frozenset([
    CommandId.LOCATION,
    CommandId.IP_ADDRESS,
    CommandId.SUBNET_MASK,
    CommandId.TARGET_POSITION,
  ])
"""Internal settings that are not offered as actions or feedbacks."""

POSITION_COMMANDS: FrozenSet[CommandId] = frozenset([
    CommandId.SCREEN_HEIGHT,
    CommandId.SCREEN_WIDTH,
    CommandId.UPPER_LIMIT,
    CommandId.LOWER_LIMIT,
    CommandId.SCREEN_POSITION,
  ])
"""Commands whose raw values are linear positions in the native unit."""

relay_status_map: Dict[str, str] = {
    "STOP": "ST",
    "UP": "UP",
    "DOWN": "DN",
  }
"""Friendly relay status names, and the wire values they correspond to."""

position_type_map: Dict[str, str] = {
    "SET": "FIX",
    "RAISE": "DEC",
    "LOWER": "INC",
  }
"""Kinds of screen position change, and the wire prefix they correspond to."""

aspect_ratio_map: Dict[str, int] = {
    "1:1": 0,
    "1.25:1": 1,
    "1.33:1 (4x3)": 2,
    "1.66:1 (5x4)": 3,
    "1.78:1 (16x9)": 4,
    "Custom 1": 5,
    "Custom 2": 6,
    "Custom 3": 7,
    "Custom 4": 8,
    "Custom 5": 9,
  }
"""Aspect ratio preset labels, and the logical slot index they correspond to."""

DEFAULT_ASPECT_RATIO_INDEX = aspect_ratio_map["Custom 1"]

class CommandRegistry:
    """An immutable catalog of commands, resolvable by symbolic name or wire token."""
    commands: Tuple[CommandMeta, ...]
    _by_name: Dict[str, CommandMeta]
    _by_token: Dict[str, CommandMeta]
    _by_id: Dict[CommandId, CommandMeta]

    def __init__(self, commands: Iterable[CommandMeta]=DEFAULT_COMMANDS):
        self.commands = tuple(commands)
        self._by_name = {}
        self._by_token = {}
        self._by_id = {}
        for command in self.commands:
            assert not command.name in self._by_name, f"Duplicate command name {command.name}"
            assert not command.token in self._by_token, f"Duplicate command token {command.token}"
            assert 1 <= len(command.token) <= 2
            self._by_name[command.name] = command
            self._by_token[command.token] = command
            self._by_id[command.command_id] = command

    @property
    def aspect_ratio(self) -> IndexedCommandMeta:
        result = self.get(CommandId.ASPECT_RATIO)
        assert isinstance(result, IndexedCommandMeta)
        return result

    def get(self, command_id: CommandId) -> CommandMeta:
        """Returns the metadata for a command id"""
        result = self._by_id.get(command_id)
        if result is None:
            raise UnknownCommandError(f"Command {command_id.name} is not in this registry")
        return result

    def by_name(self, name: str) -> CommandMeta:
        """Resolves a symbolic command name; e.g., 'RELAY_STATUS'"""
        result = self._by_name.get(name)
        if result is None:
            raise UnknownCommandError(f"Unknown SCB command name: {name!r}")
        return result

    def by_token(self, token: str) -> CommandMeta:
        """Resolves an exact wire token; e.g., 'RE'. Slot-suffixed tokens are not accepted."""
        result = self._by_token.get(token)
        if result is None:
            raise UnknownCommandError(f"Unknown SCB command token: {token!r}")
        return result

    def resolve_indexed(self, token: str, digit: str) -> IndexedCommandMeta:
        """Resolves a base token and slot digit to an indexed command"""
        command = self._by_token.get(token)
        if not isinstance(command, IndexedCommandMeta):
            raise UnknownCommandError(f"Unknown SCB indexed command token: {token!r}")
        if len(digit) != 1 or not '0' <= digit <= '9' or int(digit) >= command.slot_count:
            raise UnknownCommandError(f"Invalid slot {digit!r} for SCB command {command.name}")
        return command

    def split_wire_token(self, token: str) -> Tuple[CommandMeta, Optional[int]]:
        """Resolves a token as seen on the wire into its command and wire slot.

        The wire slot is None for commands that are not indexed. An indexed
        command seen without its slot digit is rejected.
        """
        if len(token) == 2 and token[1].isdigit():
            base = self._by_token.get(token[0])
            if isinstance(base, IndexedCommandMeta):
                return (self.resolve_indexed(token[0], token[1]), int(token[1]))
        command = self.by_token(token)
        if command.is_indexed:
            raise UnknownCommandError(f"SCB indexed command token {token!r} is missing its slot digit")
        return (command, None)

    def resolve(self, name_or_token: Union[str, CommandId, CommandMeta]) -> CommandMeta:
        """Resolves a wire token (with or without slot digit), symbolic name, CommandId, or
           CommandMeta into CommandMeta."""
        if isinstance(name_or_token, CommandMeta):
            return name_or_token
        if isinstance(name_or_token, CommandId):
            return self.get(name_or_token)
        if len(name_or_token) == 2 and name_or_token[1].isdigit():
            base = self._by_token.get(name_or_token[0])
            if isinstance(base, IndexedCommandMeta):
                return self.resolve_indexed(name_or_token[0], name_or_token[1])
        command = self._by_token.get(name_or_token)
        if command is None:
            command = self.by_name(name_or_token)
        return command

    def list(self, *access_modes: AccessMode) -> List[CommandMeta]:
        """Returns the commands with any of the given access modes, in declaration order"""
        return [c for c in self.commands if c.access in access_modes]

    def readable(self) -> List[CommandMeta]:
        return self.list(*READABLE)

    def writable(self) -> List[CommandMeta]:
        return self.list(*WRITABLE)

    def actionable(self) -> List[CommandMeta]:
        """Writable commands that are offered as actions"""
        return [c for c in self.writable() if not c.command_id in INTERNAL_COMMANDS]

    def with_feedback(self) -> List[CommandMeta]:
        """Read/write commands that are offered as feedbacks"""
        return [c for c in self.list(AccessMode.READ_WRITE) if not c.command_id in INTERNAL_COMMANDS]

    def __contains__(self, command_id: CommandId) -> bool:
        return command_id in self._by_id

    def __iter__(self) -> Iterator[CommandMeta]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def __str__(self) -> str:
        return f"CommandRegistry({len(self.commands)} commands)"

    def __repr__(self) -> str:
        return str(self)

default_registry = CommandRegistry()
"""The registry of DEFAULT_COMMANDS, shared by reference."""
