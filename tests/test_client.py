"""Tests for the client: inbound processing, actions, access control and feedbacks."""

import asyncio

import pytest

from dalite_scb.client import ConnectionStatus, ScbClient, ScbClientConfig
from dalite_scb.exceptions import DaliteScbError, ScbTransportError
from dalite_scb.protocol import (
    CommandId,
    CommandRegistry,
    DEFAULT_COMMANDS,
    FeedbackRequest,
    RESET_COMMAND,
    build_poll,
)

from conftest import FakeTransport


def test_chunk_updates_cache_and_variables(client, transport):
    transport.receive(b"0 0 GE RE ST\r0 0 GE MM 12")
    assert client.cache.get(CommandId.RELAY_STATUS) == "ST"
    assert client.variables == {"RE": "ST"}
    transport.receive(b"70\r")
    assert client.variables["MM"] == "1270"
    assert client.variables["MM:INCHES"] == "50.00"


def test_bad_lines_do_not_disturb_state(client, transport):
    transport.receive(b"0 0 GE RE UP\r\r0 0 GE ZZ 1\rgarbage\r0 0 GE A 5\r0 0 GE MM 10\r")
    assert client.cache.snapshot() == {CommandId.RELAY_STATUS: "UP", CommandId.SCREEN_POSITION: "10"}


def test_variables_listener_gets_changes_only(client, transport):
    changes = []
    client.add_variables_listener(changes.append)
    transport.receive(b"0 0 GE RE ST\r")
    transport.receive(b"0 0 GE RE ST\r0 0 GE SV 2.1\r")
    assert changes == [{"RE": "ST"}, {"SV": "2.1"}]


def test_registered_feedbacks_are_reevaluated(client, transport):
    events = []
    client.add_feedback_listener(lambda feedback_id, state: events.append((feedback_id, state)))
    assert not client.add_feedback("stopped", FeedbackRequest(CommandId.RELAY_STATUS, status="ST"))
    transport.receive(b"0 0 GE RE ST\r")
    assert client.feedback_states["stopped"]
    transport.receive(b"0 0 GE RE UP\r")
    assert not client.feedback_states["stopped"]
    assert events == [("stopped", True), ("stopped", False)]
    client.remove_feedback("stopped")
    transport.receive(b"0 0 GE RE ST\r")
    assert len(events) == 2


def test_aspect_ratio_feedback_scenario(client, transport):
    transport.receive(b"0 0 GE A0 1200\r")
    transport.receive(b"0 0 GE TA 1205\r")
    assert client.evaluate_feedback(FeedbackRequest(CommandId.ASPECT_RATIO, index=9))


def test_get_and_set(client, transport):
    assert asyncio.run(client.get("RE")) == "$ 0 GE RE\r"
    assert asyncio.run(client.set(CommandId.RELAY_STATUS, "UP")) == "# 0 SE RE UP\r"
    assert transport.sent == [b"$ 0 GE RE\r", b"# 0 SE RE UP\r"]


def test_get_and_set_keep_the_slot_of_an_indexed_token(client, transport):
    assert asyncio.run(client.get("A5")) == "$ 0 GE A5\r"
    assert asyncio.run(client.get(CommandId.ASPECT_RATIO, wire_slot=2)) == "$ 0 GE A2\r"
    assert asyncio.run(client.set("A5", "1200")) == "# 0 SE A5 1200\r"
    with pytest.raises(DaliteScbError):
        asyncio.run(client.get("A"))
    assert transport.sent == [b"$ 0 GE A5\r", b"$ 0 GE A2\r", b"# 0 SE A5 1200\r"]


def test_failing_listener_does_not_break_processing(client, transport):
    def broken(*args):
        raise RuntimeError("listener failure")

    changes = []
    events = []
    client.add_variables_listener(broken)
    client.add_variables_listener(changes.append)
    client.add_feedback_listener(broken)
    client.add_feedback_listener(lambda feedback_id, state: events.append((feedback_id, state)))
    client.add_status_listener(broken)
    client.add_feedback("stopped", FeedbackRequest(CommandId.RELAY_STATUS, status="ST"))
    transport.receive(b"0 0 GE RE ST\r")
    assert changes == [{"RE": "ST"}]
    assert events == [("stopped", True)]
    assert client.feedback_states["stopped"]
    asyncio.run(transport.shutdown())
    assert client.status == ConnectionStatus.ERROR


def test_access_violations_send_nothing(transport):
    registry = CommandRegistry(DEFAULT_COMMANDS + (RESET_COMMAND,))
    client = ScbClient(transport, registry=registry)
    assert asyncio.run(client.get("RS")) is None
    assert asyncio.run(client.set("SW", "100")) is None
    assert asyncio.run(client.set("RS", "1")) == "# 0 SE RS 1\r"
    assert transport.sent == [b"# 0 SE RS 1\r"]


def test_poll_sends_one_batch(client, transport):
    asyncio.run(client.poll())
    assert transport.sent == [build_poll().encode("ascii")]


def test_relay_action(client, transport):
    assert asyncio.run(client.run_action("RE", {"action": "DN"})) == "# 0 SE RE DN\r"


def test_screen_position_action_converts_units(client, transport):
    sent = asyncio.run(client.run_action(CommandId.SCREEN_POSITION, {"type": "INC", "unit": "INCHES", "value": "2"}))
    assert sent == "# 0 SE MM INC 51\r"
    sent = asyncio.run(client.run_action("MM", {"type": "FIX", "unit": "CENTIMETERS", "value": 120.04}))
    assert sent == "# 0 SE MM FIX 1200\r"


def test_screen_position_action_without_value_sends_nothing(client, transport):
    assert asyncio.run(client.run_action("MM", {"type": "FIX", "unit": "INCHES", "value": None})) is None
    assert transport.sent == []


def test_aspect_ratio_action_sets_rotated_target(client, transport):
    assert asyncio.run(client.run_action("A", {"index": 5})) == "# 0 SE TA A6\r"
    assert asyncio.run(client.run_action("ASPECT_RATIO", {"index": 9})) == "# 0 SE TA A0\r"


def test_unhandled_action_sends_nothing(client, transport):
    assert asyncio.run(client.run_action("SW", {})) is None
    assert asyncio.run(client.run_action("NOPE", {})) is None
    assert transport.sent == []


def test_aspect_ratio_write_then_read_back(client, transport):
    # A device echo answers a read of the selected slot with the stored preset position
    presets = dict((f"A{i}", str(1000 + i)) for i in range(10))
    for index in range(10):
        line = asyncio.run(client.run_action("A", {"index": index}))
        slot_token = line.split(" ")[4].rstrip("\r")
        transport.receive(f"0 0 GE {slot_token} {presets[slot_token]}\r".encode("ascii"))
        assert client.variables[f"A{index}"] == presets[slot_token]
        transport.receive(f"0 0 GE TA {presets[slot_token]}\r".encode("ascii"))
        assert client.evaluate_feedback(FeedbackRequest(CommandId.ASPECT_RATIO, index=index))


def test_transport_close_reports_error_and_stops_poller(client, transport):
    statuses = []
    client.add_status_listener(lambda status, message: statuses.append((status, message)))

    async def run():
        client.start()
        assert client.poller.is_running
        await transport.shutdown(ScbTransportError("Connection reset"))
        assert not client.poller.is_running

    asyncio.run(run())
    assert statuses == [(ConnectionStatus.OK, None), (ConnectionStatus.ERROR, "Connection reset")]
    assert client.status == ConnectionStatus.ERROR


def test_poller_sends_on_interval(transport):
    client = ScbClient(transport, config=ScbClientConfig(host="192.168.1.50", poll_interval_secs=0.01))

    async def run():
        client.start()
        await asyncio.sleep(0.1)
        await client.aclose()

    asyncio.run(run())
    assert len(transport.sent) >= 2
    assert all(data == build_poll().encode("ascii") for data in transport.sent)
    assert not client.poller.is_running


def test_cache_survives_disconnect(client, transport):
    transport.receive(b"0 0 GE RE ST\r")
    asyncio.run(transport.shutdown())
    assert client.status == ConnectionStatus.ERROR
    assert client.cache.get(CommandId.RELAY_STATUS) == "ST"
