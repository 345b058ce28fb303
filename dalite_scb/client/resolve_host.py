# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board host IP/Port resolver.

Provides a method that can resolve host strings and environment variables
into a screen control board IP address and port.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import DaliteScbError
from ..constants import DEFAULT_PORT

def resolve_scb_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
      ) -> Tuple[str, int]:
    """Resolves a screen control board host string into a hostname and port.

        Args:
            host: The IPV4 address of the screen control board.
                    may optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    If None, the host will be taken from the
                    DALITE_SCB_HOST environment variable.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from the DALITE_SCB_PORT. If that
                    environment variable is not found, the default screen
                    control board port (3001) will be used.

        Returns:
            A tuple of (hostname: str, port: int)
    """
    if host is None or host == '':
        host = os.environ.get('DALITE_SCB_HOST')
        if host is None or host == '':
            raise DaliteScbError("No screen control board host given, and DALITE_SCB_HOST is not set")

    if default_port is None or default_port <= 0:
        default_port_str = os.environ.get('DALITE_SCB_PORT')
        if default_port_str is None or default_port_str == '':
            default_port = DEFAULT_PORT
        else:
            default_port = int(default_port_str)

    if '://' in host and not host.startswith('tcp://'):
        raise DaliteScbError(f"Invalid host protocol specifier for TCP transport: '{host}'")
    if host.startswith('tcp://'):
        host = host[6:]
    port: int
    if ':' in host:
        host, port_str = host.rsplit(':', 1)
        try:
            port = int(port_str)
        except ValueError as e:
            raise DaliteScbError(f"Invalid port in host specifier: '{port_str}'") from e
    else:
        port = default_port

    return (host, port)
