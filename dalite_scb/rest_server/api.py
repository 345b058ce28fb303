#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
REST API routes for controlling a screen control board.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from .logger import logger
from ..internal_types import *
from ..exceptions import DaliteScbError, ScbTransportError, UnknownCommandError
from ..protocol import CommandMeta, FeedbackRequest
from ..client import ScbClient

router = APIRouter()

def get_scb_client(request: Request) -> ScbClient:
    return request.app.state.scb_client

def resolve_command(client: ScbClient, command: str) -> CommandMeta:
    try:
        return client.registry.resolve(command)
    except UnknownCommandError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

@router.get("/status")
async def get_status(client: ScbClient = Depends(get_scb_client)) -> Dict[str, Any]:
    return dict(
        status=client.status.value,
        message=client.status_message,
        connected=client.is_connected,
      )

@router.get("/commands")
async def get_commands(client: ScbClient = Depends(get_scb_client)) -> List[Dict[str, Any]]:
    actionable = set(c.command_id for c in client.registry.actionable())
    with_feedback = set(c.command_id for c in client.registry.with_feedback())
    return [
        dict(
            name=c.name,
            token=c.token,
            access=c.access.value,
            description=c.description,
            action=c.command_id in actionable,
            feedback=c.command_id in with_feedback,
          )
        for c in client.registry
      ]

@router.get("/variables")
async def get_variables(client: ScbClient = Depends(get_scb_client)) -> Dict[str, str]:
    return dict(client.variables)

@router.get("/variable-definitions")
async def get_variable_definitions(client: ScbClient = Depends(get_scb_client)) -> List[Dict[str, Any]]:
    return [dict(name=v.name, label=v.label) for v in client.variable_definitions()]

@router.post("/actions/{command}")
async def post_action(
        command: str,
        options: Dict[str, Any] = Body(default={}),
        client: ScbClient = Depends(get_scb_client),
      ) -> Dict[str, Any]:
    meta = resolve_command(client, command)
    try:
        sent = await client.run_action(meta, options)
    except ScbTransportError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except (DaliteScbError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    logger.debug(f"Action {meta.name} {options}: sent {sent!r}")
    return dict(command=meta.name, sent=sent)

@router.post("/feedbacks/{command}")
async def post_feedback(
        command: str,
        options: Dict[str, Any] = Body(default={}),
        client: ScbClient = Depends(get_scb_client),
      ) -> Dict[str, Any]:
    meta = resolve_command(client, command)
    try:
        request = FeedbackRequest.from_jsonable(meta.command_id, options)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return dict(command=meta.name, match=client.evaluate_feedback(request))
