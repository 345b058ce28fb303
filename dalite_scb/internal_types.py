# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Type hints shared by all modules in this package. Intended to be
used as "from .internal_types import *".
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    AsyncContextManager,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Self,
    Sequence,
    Set,
    Tuple,
    Type,
    Union,
  )

from types import TracebackType

JsonableValue = Union[str, int, float, bool, None]
Jsonable = Union[JsonableValue, List['Jsonable'], Dict[str, 'Jsonable']]
JsonableDict = Dict[str, Jsonable]

__all__ = [
    'TYPE_CHECKING',
    'Any',
    'AsyncContextManager',
    'AsyncIterator',
    'Awaitable',
    'Callable',
    'Dict',
    'FrozenSet',
    'Iterable',
    'Iterator',
    'List',
    'Mapping',
    'Optional',
    'Self',
    'Sequence',
    'Set',
    'Tuple',
    'Type',
    'Union',
    'TracebackType',
    'Jsonable',
    'JsonableDict',
  ]
