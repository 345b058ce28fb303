"""Tests for the raw state cache."""

from dalite_scb.protocol import CommandId, StateCache


def test_scalar_last_write_wins():
    cache = StateCache()
    assert cache.get(CommandId.RELAY_STATUS) is None
    cache.update(CommandId.RELAY_STATUS, "UP")
    cache.update(CommandId.RELAY_STATUS, "ST")
    assert cache.get(CommandId.RELAY_STATUS) == "ST"


def test_slots_are_independent():
    cache = StateCache()
    cache.update(CommandId.ASPECT_RATIO, "1100", wire_slot=1)
    cache.update(CommandId.ASPECT_RATIO, "1200", wire_slot=2)
    cache.update(CommandId.ASPECT_RATIO, "1150", wire_slot=1)
    assert cache.get(CommandId.ASPECT_RATIO) == {1: "1150", 2: "1200"}
    assert cache.get_slot(CommandId.ASPECT_RATIO, 2) == "1200"
    assert cache.get_slot(CommandId.ASPECT_RATIO, 3) is None


def test_snapshot_is_a_copy():
    cache = StateCache()
    cache.update(CommandId.ASPECT_RATIO, "1100", wire_slot=1)
    snapshot = cache.snapshot()
    cache.update(CommandId.ASPECT_RATIO, "1300", wire_slot=1)
    assert snapshot[CommandId.ASPECT_RATIO] == {1: "1100"}


def test_clear():
    cache = StateCache()
    cache.update(CommandId.SCREEN_POSITION, "10")
    cache.clear()
    assert len(cache) == 0
    assert not CommandId.SCREEN_POSITION in cache
