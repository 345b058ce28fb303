# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Screen control board emulator.

Provides a simple emulation of a Da-Lite screen control board on TCP/IP.
"""

from .emulator_impl import ScbEmulator, default_emulator_state
from .session import ScbEmulatorSession
