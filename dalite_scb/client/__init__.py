# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board asyncio TCP/IP client.
"""

from .resolve_host import resolve_scb_tcp_host
from .client_config import ScbClientConfig
from .client_transport import ScbClientTransport
from .tcp_client_transport import TcpScbClientTransport
from .poller import Poller
from .client_impl import (
    ScbClient,
    ConnectionStatus,
  )
from .simple import scb_connect
