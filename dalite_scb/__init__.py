# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package dalite_scb provides an asyncio API for controlling Da-Lite
motorized projection screens via the Screen Control Board's ASCII TCP/IP protocol.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    DaliteScbError,
    UnknownCommandError,
    MalformedLineError,
    AccessViolationError,
    ScbTransportError,
  )

from .constants import DEFAULT_PORT, DEFAULT_TIMEOUT, POLL_INTERVAL

from .protocol import (
    AccessMode,
    CommandId,
    CommandMeta,
    IndexedCommandMeta,
    CommandRegistry,
    UnitTable,
    LineFramer,
    StateCache,
    StateProjector,
    FeedbackEvaluator,
    FeedbackRequest,
    build_get,
    build_set,
    build_poll,
    parse_line,
    default_registry,
    default_units,
  )

from .client import (
    ScbClient,
    ScbClientConfig,
    ScbClientTransport,
    TcpScbClientTransport,
    ConnectionStatus,
    Poller,
    resolve_scb_tcp_host,
    scb_connect,
  )
