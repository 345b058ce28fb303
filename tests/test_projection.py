"""Tests for deriving display variables from cached state."""

from dalite_scb.protocol import (
    CommandId,
    StateCache,
    StateProjector,
    default_units,
    parse_line,
)


def cache_from_lines(*lines):
    cache = StateCache()
    for line in lines:
        parsed = parse_line(line)
        cache.update(parsed.command.command_id, parsed.value, wire_slot=parsed.slot)
    return cache


def test_position_is_expanded_to_every_unit():
    cache = cache_from_lines("0 0 GE MM 1270")
    variables, projected = StateProjector().project(cache)
    assert variables == {
        "MM": "1270",
        "MM:CENTIMETERS": "127.00",
        "MM:INCHES": "50.00",
    }
    assert projected == [CommandId.SCREEN_POSITION]


def test_unit_values_are_rounded_to_two_decimals():
    cache = cache_from_lines("0 0 GE SH 1000")
    variables, _ = StateProjector().project(cache)
    assert variables["SH"] == "1000"
    assert variables["SH:INCHES"] == f"{round(1000 / 25.4, 2):.2f}"
    assert variables["SH:INCHES"] == "39.37"


def test_unit_round_trip_within_one_native_unit():
    projector = StateProjector()
    for raw in (0, 1, 13, 254, 999, 1372, 2438, 10001):
        cache = cache_from_lines(f"0 0 GE SW {raw}")
        variables, _ = projector.project(cache)
        for unit, factor in default_units:
            name = "SW" if default_units.is_native(unit) else f"SW:{unit}"
            assert abs(round(float(variables[name]) * factor) - raw) <= 1


def test_non_numeric_position_is_passed_through_only():
    cache = cache_from_lines("0 0 GE LM ---")
    variables, _ = StateProjector().project(cache)
    assert variables == {"LM": "---"}


def test_aspect_ratio_slots_are_rotated():
    cache = cache_from_lines("0 0 GE A0 1000", "0 0 GE A1 1010", "0 0 GE A6 1060")
    variables, projected = StateProjector().project(cache)
    assert variables == {"A9": "1000", "A0": "1010", "A5": "1060"}
    assert projected == [CommandId.ASPECT_RATIO]


def test_other_commands_pass_through():
    cache = cache_from_lines("0 0 GE RE ST", "0 0 GE LO Home Theater")
    variables, projected = StateProjector().project(cache)
    assert variables == {"RE": "ST", "LO": "Home Theater"}
    assert projected == [CommandId.LOCATION, CommandId.RELAY_STATUS]


def test_projection_covers_the_whole_cache():
    cache = cache_from_lines("0 0 GE RE ST", "0 0 GE MM 100", "0 0 GE TA A6")
    variables, projected = StateProjector().project(cache)
    assert set(projected) == {CommandId.RELAY_STATUS, CommandId.SCREEN_POSITION, CommandId.TARGET_POSITION}
    assert variables["TA"] == "A6"


def test_variable_definitions():
    definitions = StateProjector().variable_definitions()
    by_name = dict((d.name, d.label) for d in definitions)
    assert by_name["MM"] == "Screen Position (Millimeters)"
    assert by_name["MM:INCHES"] == "Screen Position (Inches)"
    assert by_name["A5"] == "Aspect Ratio (Custom 1)"
    assert by_name["RE"] == "Relay Status"
    assert len([d for d in definitions if d.command_id == CommandId.ASPECT_RATIO]) == 10
