# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Linear unit conversions for screen positions.

The screen control board reports and accepts positions in millimeters (the
native unit, factor 1.0). Other units are multipliers against it.
"""

from __future__ import annotations

import math

from ..internal_types import *
from ..exceptions import DaliteScbError

position_unit_map: Dict[str, float] = {
    "MILLIMETERS": 1.0,
    "CENTIMETERS": 10.0,
    "INCHES": 25.4,
  }
"""Unit names, and the number of native units in one of them."""

DEFAULT_UNIT = "INCHES"

def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, with halves rounded toward +infinity."""
    return math.floor(value + 0.5)

class UnitTable:
    """An immutable table of unit factors."""
    factors: Dict[str, float]

    def __init__(self, factors: Optional[Mapping[str, float]]=None):
        self.factors = dict(position_unit_map if factors is None else factors)
        natives = [name for name, factor in self.factors.items() if factor == 1.0]
        if len(natives) != 1:
            raise DaliteScbError(f"Unit table must have exactly one native unit with factor 1.0: {self.factors}")
        self._native_unit = natives[0]

    @property
    def native_unit(self) -> str:
        return self._native_unit

    def is_native(self, unit: str) -> bool:
        return unit == self._native_unit

    def factor(self, unit: Union[str, float, int]) -> float:
        """Returns the factor for a unit name. A numeric unit is taken as the factor itself."""
        if isinstance(unit, (int, float)) and not isinstance(unit, bool):
            return float(unit)
        result = self.factors.get(unit)
        if result is None:
            raise DaliteScbError(f"Unknown position unit: {unit!r}")
        return result

    def to_native(self, value: float, unit: Union[str, float, int]) -> int:
        """Converts a value in the given unit to an integer count of native units."""
        return round_half_up(self.factor(unit) * value)

    def from_native(self, raw: float, unit: Union[str, float, int]) -> float:
        """Converts a native value to the given unit, rounded to 2 decimal places."""
        return round(raw / self.factor(unit), 2)

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(self.factors.items())

    def __str__(self) -> str:
        return f"UnitTable({self.factors})"

    def __repr__(self) -> str:
        return str(self)

default_units = UnitTable()
