# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Derivation of display variables from cached raw state.

Variable names are based on wire tokens:
    MM              screen position in the native unit, unchanged
    MM:INCHES       screen position converted to inches, 2 decimal places
    A5              aspect ratio preset at logical index 5 (wire slot 6)
    RE              any other command, unchanged
"""

from __future__ import annotations

from ..internal_types import *
from ..pkg_logging import logger
from .command_meta import (
    CommandId,
    CommandMeta,
    CommandRegistry,
    IndexedCommandMeta,
    POSITION_COMMANDS,
    aspect_ratio_map,
    default_registry,
  )
from .units import UnitTable, default_units
from .state import StateCache

class VariableDefinition:
    """Name and human-readable label of a display variable"""
    name: str
    label: str
    command_id: CommandId

    def __init__(self, name: str, label: str, command_id: CommandId):
        self.name = name
        self.label = label
        self.command_id = command_id

    def __str__(self) -> str:
        return f"VariableDefinition({self.name!r}: {self.label!r})"

    def __repr__(self) -> str:
        return str(self)

def proper_case(s: str, split: str=' ') -> str:
    """'SCREEN_POSITION' -> 'Screen Position'"""
    return ' '.join(w[:1].upper() + w[1:].lower() for w in s.split(split))

def unit_variable_name(command: CommandMeta, unit: str, units: UnitTable) -> str:
    if units.is_native(unit):
        return command.token
    return f"{command.token}:{unit}"

def slot_variable_name(command: IndexedCommandMeta, logical_index: int) -> str:
    return f"{command.token}{logical_index}"

class StateProjector:
    """Turns a StateCache snapshot into display variables."""
    registry: CommandRegistry
    units: UnitTable

    def __init__(self, registry: CommandRegistry=default_registry, units: UnitTable=default_units):
        self.registry = registry
        self.units = units

    def variable_definitions(self) -> List[VariableDefinition]:
        """Every variable that project() may produce, in declaration order"""
        result: List[VariableDefinition] = []
        for command in self.registry.readable():
            label = proper_case(command.name, '_')
            if command.command_id in POSITION_COMMANDS:
                for unit, _ in self.units:
                    result.append(VariableDefinition(
                        unit_variable_name(command, unit, self.units),
                        f"{label} ({proper_case(unit)})",
                        command.command_id))
            elif isinstance(command, IndexedCommandMeta):
                labels = dict((v, k) for k, v in aspect_ratio_map.items())
                for i in range(command.slot_count):
                    result.append(VariableDefinition(
                        slot_variable_name(command, i),
                        f"{label} ({labels.get(i, str(i))})",
                        command.command_id))
            else:
                result.append(VariableDefinition(command.token, label, command.command_id))
        return result

    def project_command(self, command: CommandMeta, cache: StateCache) -> Dict[str, str]:
        """Returns the display variables of a single command; empty if nothing is cached"""
        result: Dict[str, str] = {}
        raw = cache.get(command.command_id)
        if raw is None:
            return result
        if isinstance(command, IndexedCommandMeta):
            if not isinstance(raw, dict):
                return result
            for i in range(command.slot_count):
                value = raw.get(command.wire_slot(i))
                if value is not None:
                    result[slot_variable_name(command, i)] = value
        elif isinstance(raw, dict):
            logger.debug(f"Unexpected slotted state for {command.name}; ignoring")
        elif command.command_id in POSITION_COMMANDS:
            result[command.token] = raw
            try:
                native = float(raw)
            except ValueError:
                logger.debug(f"Non-numeric position {raw!r} for {command.name}; not converting units")
                return result
            for unit, _ in self.units:
                if not self.units.is_native(unit):
                    result[unit_variable_name(command, unit, self.units)] = f"{self.units.from_native(native, unit):.2f}"
        else:
            result[command.token] = raw
        return result

    def project(self, cache: StateCache) -> Tuple[Dict[str, str], List[CommandId]]:
        """Projects the entire cache.

        Returns the display variables, and the commands that produced at least one of them.
        """
        variables: Dict[str, str] = {}
        projected: List[CommandId] = []
        for command in self.registry.readable():
            entries = self.project_command(command, cache)
            if len(entries) > 0:
                variables.update(entries)
                projected.append(command.command_id)
        return (variables, projected)
