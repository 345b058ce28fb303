# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board simple client connection API.
"""

from __future__ import annotations

from ..internal_types import *
from .client_config import ScbClientConfig
from .client_impl import ScbClient

async def scb_connect(
        host: Optional[str]=None,
        port: Optional[int]=None,
        config: Optional[ScbClientConfig]=None
      ) -> ScbClient:
    """Connect to a screen control board and start polling it.

    Args:
        host: The IPV4 address of the screen control board.
                may optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port, which will override the port argument.
                If None, the host will be taken from the config,
                or the DALITE_SCB_HOST environment variable.
        port:   The TCP/IP port. If None, the port will be taken from the
                config.
        config: A ScbClientConfig object that specifies
                the default host, port, timeout, etc. to use.
                If None, a default config will be created.
    """
    return await ScbClient.create(host=host, port=port, config=config)
