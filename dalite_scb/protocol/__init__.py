# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for Da-Lite Screen Control Boards.

Everything in this subpackage is pure computation; no I/O is performed.
"""

from .command_meta import (
    AccessMode,
    CommandId,
    CommandMeta,
    IndexedCommandMeta,
    CommandRegistry,
    DEFAULT_COMMANDS,
    RESET_COMMAND,
    INTERNAL_COMMANDS,
    POSITION_COMMANDS,
    READABLE,
    WRITABLE,
    relay_status_map,
    position_type_map,
    aspect_ratio_map,
    default_registry,
  )

from .units import (
    UnitTable,
    position_unit_map,
    round_half_up,
    default_units,
    DEFAULT_UNIT,
  )

from .codec import (
    ParsedLine,
    wire_token,
    build_get,
    build_set,
    build_poll,
    encode_position,
    encode_aspect_ratio_target,
    parse_line,
  )

from .framing import LineFramer

from .state import StateCache, StateValue

from .projection import StateProjector, VariableDefinition

from .feedback import FeedbackEvaluator, FeedbackRequest
