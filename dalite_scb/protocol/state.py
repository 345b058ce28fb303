# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Cache of the last raw value reported by the screen control board for each command.
"""

from __future__ import annotations

from ..internal_types import *
from .command_meta import CommandId

StateValue = Union[str, Dict[int, str]]
"""A scalar raw value, or a map of wire slot to raw value for indexed commands."""

class StateCache:
    """Last-write-wins store of raw values, keyed by command.

    Not thread-safe; it is owned by a single asyncio task.
    """
    _entries: Dict[CommandId, StateValue]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, command_id: CommandId) -> Optional[StateValue]:
        return self._entries.get(command_id)

    def get_slot(self, command_id: CommandId, wire_slot: int) -> Optional[str]:
        """Returns the raw value of one wire slot of an indexed command, if known"""
        slots = self._entries.get(command_id)
        if not isinstance(slots, dict):
            return None
        return slots.get(wire_slot)

    def update(self, command_id: CommandId, value: str, wire_slot: Optional[int]=None) -> None:
        """Records a raw value. If wire_slot is given, only that slot of the entry is replaced."""
        if wire_slot is None:
            self._entries[command_id] = value
        else:
            slots = self._entries.get(command_id)
            if not isinstance(slots, dict):
                slots = {}
                self._entries[command_id] = slots
            slots[wire_slot] = value

    def snapshot(self) -> Dict[CommandId, StateValue]:
        """Returns a copy of all entries, in first-seen order"""
        return dict((k, dict(v) if isinstance(v, dict) else v) for k, v in self._entries.items())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, command_id: CommandId) -> bool:
        return command_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        return f"StateCache({len(self._entries)} entries)"

    def __repr__(self) -> str:
        return str(self)
