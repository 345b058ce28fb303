#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Da-Lite screen control board.
"""

from __future__ import annotations

from fastapi import FastAPI

import os
import json

from contextlib import asynccontextmanager

from .logger import logger
from ..internal_types import *
from .. import (
    ScbClient,
    ScbClientConfig,
    scb_connect,
  )

from .api import router as api_router

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """

    scb_client: Optional[ScbClient] = None
    try:
        logger.info("Screen REST server starting up--initializing...")
        config_file = os.environ.get("DALITE_SCB_CONFIG", None)
        if config_file is None:
            if os.path.exists("dalite_scb_config.json"):
                config_file = "dalite_scb_config.json"
        raw_config: JsonableDict
        if config_file is None:
            raw_config = {}
        else:
            with open(config_file, "r") as f:
                raw_config = json.load(f)
        app.state.raw_config = raw_config
        scb_config = ScbClientConfig.from_jsonable(raw_config)
        app.state.scb_config = scb_config
        scb_client = await scb_connect(config=scb_config)
        app.state.scb_client = scb_client
        logger.info(f"Serving API for screen control board at {scb_client}...")

        logger.info("Screen REST server initialization done; starting server...")
        yield
    finally:
        logger.info("Screen REST server shutting down--cleaning up...")
        if scb_client is not None:
            await scb_client.aclose()

scb_api = FastAPI(lifespan=fastapi_lifetime)
scb_api.include_router(api_router)

def get_scb_config() -> ScbClientConfig:
    return scb_api.state.scb_config

def get_raw_config() -> JsonableDict:
    return scb_api.state.raw_config
