# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Boolean feedback predicates over cached screen control board state.
"""

from __future__ import annotations

import math

from ..internal_types import *
from ..pkg_logging import logger
from ..exceptions import DaliteScbError
from ..constants import ASPECT_RATIO_WINDOW, SCREEN_POSITION_WINDOW
from .command_meta import (
    CommandId,
    CommandRegistry,
    IndexedCommandMeta,
    DEFAULT_ASPECT_RATIO_INDEX,
    relay_status_map,
    default_registry,
  )
from .units import UnitTable, DEFAULT_UNIT, default_units
from .state import StateCache

class FeedbackRequest:
    """A feedback predicate on one command, with its options.

    Only the options relevant to the command are consulted:
        RELAY_STATUS:     status (wire value, e.g. 'ST'; defaults to stopped)
        ASPECT_RATIO:     index (logical aspect ratio index, 0-9)
        SCREEN_POSITION:  value and unit (unit name or numeric factor)
    """
    command_id: CommandId
    status: str
    index: int
    value: Optional[float]
    unit: Union[str, float]

    def __init__(
            self,
            command_id: CommandId,
            *,
            status: str=relay_status_map["STOP"],
            index: int=DEFAULT_ASPECT_RATIO_INDEX,
            value: Optional[float]=None,
            unit: Union[str, float]=DEFAULT_UNIT,
          ):
        self.command_id = command_id
        self.status = status
        self.index = index
        self.value = value
        self.unit = unit

    @classmethod
    def from_jsonable(cls, command_id: CommandId, options: Mapping[str, Any]) -> Self:
        """Creates a request from loosely typed options, as received from a UI or REST call.

        An empty or missing 'value' means no value.
        """
        value = options.get('value')
        if value is None or value == '':
            value = None
        else:
            value = float(value)
        return cls(
            command_id,
            status=options.get('status') or relay_status_map["STOP"],
            index=int(options.get('index', DEFAULT_ASPECT_RATIO_INDEX)),
            value=value,
            unit=options.get('unit', DEFAULT_UNIT),
          )

    def __str__(self) -> str:
        return (
            f"FeedbackRequest({self.command_id.name}, status={self.status!r}, "
            f"index={self.index}, value={self.value}, unit={self.unit!r})"
          )

    def __repr__(self) -> str:
        return str(self)

def to_number(raw: Any) -> Optional[float]:
    """Converts a raw cached value to a finite float, or None if it is absent or not numeric"""
    if raw is None or isinstance(raw, dict):
        return None
    try:
        result = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result

def in_window(value: float, center: float, half_width: float) -> bool:
    """True iff center - half_width <= value <= center + half_width"""
    return center - half_width <= value <= center + half_width

class FeedbackEvaluator:
    """Decides whether a feedback request matches the current state."""
    registry: CommandRegistry
    units: UnitTable

    def __init__(self, registry: CommandRegistry=default_registry, units: UnitTable=default_units):
        self.registry = registry
        self.units = units

    def evaluate(self, request: FeedbackRequest, cache: StateCache) -> bool:
        """Returns True iff the request matches. Never raises; errors are a no-match."""
        try:
            return self._evaluate(request, cache)
        except DaliteScbError as e:
            logger.debug(f"Feedback evaluation failed for {request}: {e}")
            return False

    def _evaluate(self, request: FeedbackRequest, cache: StateCache) -> bool:
        command_id = request.command_id
        if command_id == CommandId.RELAY_STATUS:
            raw = cache.get(command_id)
            return raw is not None and raw == request.status
        elif command_id == CommandId.ASPECT_RATIO:
            command = self.registry.get(command_id)
            assert isinstance(command, IndexedCommandMeta)
            value = to_number(cache.get_slot(command_id, command.wire_slot(request.index)))
            if value is None:
                return False
            target = to_number(cache.get(CommandId.TARGET_POSITION))
            if target is None:
                return False
            return in_window(value, target, ASPECT_RATIO_WINDOW)
        elif command_id == CommandId.SCREEN_POSITION:
            if request.value is None:
                return False
            current = to_number(cache.get(command_id))
            if current is None:
                return False
            value = request.value * self.units.factor(request.unit)
            return in_window(value, current, SCREEN_POSITION_WINDOW)
        else:
            logger.debug(f"No feedback programmed for command: {command_id.name}")
            return False
