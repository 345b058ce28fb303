# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Da-Lite screen control board.
"""
from .app import scb_api, get_scb_config, get_raw_config
from .api import router, get_scb_client
