# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board client configuration.
"""

from __future__ import annotations

import os
import ipaddress

from ..internal_types import *
from ..exceptions import DaliteScbError
from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_PORT,
    POLL_INTERVAL,
  )
from .resolve_host import resolve_scb_tcp_host

class ScbClientConfig:
    """Screen control board client configuration."""
    host: Optional[str]
    port: int
    timeout_secs: float
    poll_interval_secs: float

    def __init__(
            self,
            host: Optional[str]=None,
            *,
            port: Optional[int]=None,
            timeout_secs: Optional[float]=None,
            poll_interval_secs: Optional[float]=None,
            base_config: Optional[ScbClientConfig]=None
          ) -> None:
        """Creates a configuration for a screen control board client.

           Args:
             host: The IPV4 address of the screen control board.
                   may optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the port argument.
                   If None, the host will be taken from the
                     DALITE_SCB_HOST environment variable.
             port: The TCP/IP port number to use.
                    If None, the port will be taken from DALITE_SCB_PORT.
                    If that environment variable is not found, the default
                    port (3001) will be used.
             timeout_secs:
                   The timeout for connecting and writing, in seconds.
                   If None, the timeout will be taken from the
                   DALITE_SCB_TIMEOUT environment variable.
                   If the environment variable is not found, the
                   default timeout will be used.
             poll_interval_secs:
                   Seconds between polls of all readable commands.
                   If None, 1 second is used.
             base_config:
                     An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if port is not None and port > 0:
            self.port = port

        if host is not None and host != '':
            self.host, self.port = resolve_scb_tcp_host(host, self.port)

        if timeout_secs is not None:
            self.timeout_secs = timeout_secs

        if poll_interval_secs is not None:
            self.poll_interval_secs = poll_interval_secs

    def init_from_defaults(self) -> None:
        """Initializes the configuration from defaults."""
        port_str = os.environ.get('DALITE_SCB_PORT')
        if port_str is None or port_str == '':
            self.port = DEFAULT_PORT
        else:
            self.port = int(port_str)
        host = os.environ.get('DALITE_SCB_HOST')
        if host is None or host == '':
            self.host = None
        else:
            self.host, self.port = resolve_scb_tcp_host(host, self.port)
        timeout_str = os.environ.get('DALITE_SCB_TIMEOUT')
        if timeout_str is None or timeout_str == '':
            self.timeout_secs = DEFAULT_TIMEOUT
        else:
            self.timeout_secs = float(timeout_str)
        self.poll_interval_secs = POLL_INTERVAL

    def init_from_base_config(self, base_config: ScbClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.host = base_config.host
        self.port = base_config.port
        self.timeout_secs = base_config.timeout_secs
        self.poll_interval_secs = base_config.poll_interval_secs

    def validate(self) -> None:
        """Raises DaliteScbError unless the host is an IPV4 address and the port is in range."""
        if self.host is None:
            raise DaliteScbError("No screen control board host configured")
        try:
            ipaddress.IPv4Address(self.host)
        except ValueError as e:
            raise DaliteScbError(f"Screen control board host must be an IPV4 address: '{self.host}'") from e
        if not 1 <= self.port <= 65535:
            raise DaliteScbError(f"Screen control board port out of range: {self.port}")
        if self.poll_interval_secs <= 0:
            raise DaliteScbError(f"Poll interval must be positive: {self.poll_interval_secs}")

    @classmethod
    def from_jsonable(cls, obj: JsonableDict, base_config: Optional[ScbClientConfig]=None) -> Self:
        """Creates a configuration from a JSON-style dict (e.g., a config file)"""
        host = obj.get('host')
        port = obj.get('port')
        timeout_secs = obj.get('timeout_secs')
        poll_interval_secs = obj.get('poll_interval_secs')
        return cls(
            host=None if host is None else str(host),
            port=None if port is None else int(port),
            timeout_secs=None if timeout_secs is None else float(timeout_secs),
            poll_interval_secs=None if poll_interval_secs is None else float(poll_interval_secs),
            base_config=base_config,
          )

    def to_jsonable(self) -> JsonableDict:
        return dict(
            host=self.host,
            port=self.port,
            timeout_secs=self.timeout_secs,
            poll_interval_secs=self.poll_interval_secs,
          )

    def __str__(self) -> str:
        return (
            f"ScbClientConfig("
            f"host={self.host}, "
            f"port={self.port}, "
            f"timeout_secs={self.timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
