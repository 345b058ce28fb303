"""Tests for the REST API routes."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dalite_scb.client import ScbClient, ScbClientConfig
from dalite_scb.rest_server.api import router

from conftest import FakeTransport


@pytest.fixture
def scb():
    return ScbClient(FakeTransport(), config=ScbClientConfig(host="192.168.1.50"))


@pytest.fixture
def api(scb):
    app = FastAPI()
    app.include_router(router)
    app.state.scb_client = scb
    return TestClient(app)


def test_status(api):
    response = api.get("/status")
    assert response.status_code == 200
    assert response.json() == {"status": "warning", "message": "Connecting", "connected": True}


def test_variables(api, scb):
    scb.transport.receive(b"0 0 GE MM 254\r")
    assert api.get("/variables").json() == {
        "MM": "254",
        "MM:CENTIMETERS": "25.40",
        "MM:INCHES": "10.00",
    }


def test_variable_definitions(api):
    definitions = api.get("/variable-definitions").json()
    assert {"name": "MM:INCHES", "label": "Screen Position (Inches)"} in definitions


def test_commands(api):
    commands = dict((c["name"], c) for c in api.get("/commands").json())
    assert commands["RELAY_STATUS"]["token"] == "RE"
    assert commands["RELAY_STATUS"]["action"]
    assert not commands["TARGET_POSITION"]["action"]
    assert commands["SCREEN_WIDTH"]["access"] == "R"


def test_action(api, scb):
    response = api.post("/actions/ASPECT_RATIO", json={"index": 2})
    assert response.status_code == 200
    assert response.json() == {"command": "ASPECT_RATIO", "sent": "# 0 SE TA A3\r"}
    assert scb.transport.sent == [b"# 0 SE TA A3\r"]


def test_action_errors(api):
    assert api.post("/actions/NOPE", json={}).status_code == 404
    assert api.post("/actions/MM", json={"value": "abc"}).status_code == 400
    assert api.post("/actions/MM", json={"value": "1", "unit": "FURLONGS"}).status_code == 400


def test_feedback(api, scb):
    scb.transport.receive(b"0 0 GE RE UP\r")
    assert api.post("/feedbacks/RE", json={"status": "UP"}).json() == {"command": "RELAY_STATUS", "match": True}
    assert api.post("/feedbacks/RE", json={"status": "ST"}).json()["match"] is False
    assert api.post("/feedbacks/ZZ", json={}).status_code == 404


def test_relay_feedback_on_fresh_client_does_not_match(api):
    assert api.post("/feedbacks/RE", json={}).json() == {"command": "RELAY_STATUS", "match": False}
