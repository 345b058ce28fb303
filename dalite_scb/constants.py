# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by dalite_scb"""

DEFAULT_PORT = 3001
"""The listen port number used by the screen control board for TCP/IP control."""

DEFAULT_TIMEOUT = 2.0
"""The default timeout for connecting and writing over TCP/IP, in seconds."""

POLL_INTERVAL = 1.0
"""Seconds between batches of read requests for all readable commands while connected."""

READ_CHUNK_SIZE = 4096
"""Maximum number of bytes requested from the socket per read."""

LINE_DELIMITER = b'\r'
"""Every request and response line on the wire is terminated by a single carriage return."""

ASPECT_RATIO_SLOT_COUNT = 10
"""Number of aspect ratio slots addressed by the indexed aspect ratio command."""

ASPECT_RATIO_WINDOW = 15
"""Aspect ratio feedback matches when the slot position is within this many device units
   of the target position."""

SCREEN_POSITION_WINDOW = 50
"""Screen position feedback matches when the requested position is within this many device
   units of the current position."""
