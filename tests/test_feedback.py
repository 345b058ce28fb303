"""Tests for feedback predicates."""

from dalite_scb.protocol import (
    CommandId,
    FeedbackEvaluator,
    FeedbackRequest,
    StateCache,
    parse_line,
)


def cache_from_lines(*lines):
    cache = StateCache()
    for line in lines:
        parsed = parse_line(line)
        cache.update(parsed.command.command_id, parsed.value, wire_slot=parsed.slot)
    return cache


evaluator = FeedbackEvaluator()


def test_relay_status():
    cache = cache_from_lines("0 0 GE RE ST")
    assert cache.get(CommandId.RELAY_STATUS) == "ST"
    assert evaluator.evaluate(FeedbackRequest(CommandId.RELAY_STATUS, status="ST"), cache)
    assert not evaluator.evaluate(FeedbackRequest(CommandId.RELAY_STATUS, status="UP"), cache)


def test_relay_status_without_cached_value():
    assert not evaluator.evaluate(FeedbackRequest(CommandId.RELAY_STATUS), StateCache())
    assert not evaluator.evaluate(FeedbackRequest(CommandId.RELAY_STATUS, status="UP"), StateCache())


def test_relay_status_defaults_to_stopped():
    cache = cache_from_lines("0 0 GE RE ST")
    assert evaluator.evaluate(FeedbackRequest(CommandId.RELAY_STATUS), cache)
    assert evaluator.evaluate(FeedbackRequest.from_jsonable(CommandId.RELAY_STATUS, {}), cache)


def test_aspect_ratio_window():
    cache = cache_from_lines("0 0 GE A0 1200", "0 0 GE TA 1205")
    assert evaluator.evaluate(FeedbackRequest(CommandId.ASPECT_RATIO, index=9), cache)
    assert not evaluator.evaluate(FeedbackRequest(CommandId.ASPECT_RATIO, index=0), cache)


def test_aspect_ratio_window_edges():
    for target, expected in ((1185, True), (1215, True), (1184, False), (1216, False)):
        cache = cache_from_lines("0 0 GE A0 1200", f"0 0 GE TA {target}")
        assert evaluator.evaluate(FeedbackRequest(CommandId.ASPECT_RATIO, index=9), cache) == expected


def test_aspect_ratio_without_target_or_value():
    assert not evaluator.evaluate(FeedbackRequest(CommandId.ASPECT_RATIO, index=9), cache_from_lines("0 0 GE A0 1200"))
    assert not evaluator.evaluate(FeedbackRequest(CommandId.ASPECT_RATIO, index=9), cache_from_lines("0 0 GE TA 1200"))
    cache = cache_from_lines("0 0 GE A0 n/a", "0 0 GE TA 1200")
    assert not evaluator.evaluate(FeedbackRequest(CommandId.ASPECT_RATIO, index=9), cache)


def test_aspect_ratio_zero_is_a_value():
    cache = cache_from_lines("0 0 GE A1 0", "0 0 GE TA 10")
    assert evaluator.evaluate(FeedbackRequest(CommandId.ASPECT_RATIO, index=0), cache)


def test_screen_position_window_edges():
    cache = cache_from_lines("0 0 GE MM 1000")
    def match(value):
        return evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_POSITION, value=value, unit="MILLIMETERS"), cache)
    assert match(950)
    assert match(1050)
    assert match(1000)
    assert not match(949)
    assert not match(1051)


def test_screen_position_uses_unit_factor():
    cache = cache_from_lines("0 0 GE MM 1270")
    assert evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_POSITION, value=50, unit="INCHES"), cache)
    assert evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_POSITION, value=127, unit="CENTIMETERS"), cache)
    assert evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_POSITION, value=50, unit=25.4), cache)
    assert not evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_POSITION, value=60, unit="INCHES"), cache)


def test_screen_position_without_value():
    cache = cache_from_lines("0 0 GE MM 0")
    assert not evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_POSITION), cache)
    assert evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_POSITION, value=0), cache)


def test_screen_position_unknown_unit_is_no_match():
    cache = cache_from_lines("0 0 GE MM 0")
    assert not evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_POSITION, value=0, unit="FURLONGS"), cache)


def test_commands_without_feedback_never_match():
    cache = cache_from_lines("0 0 GE SW 2438")
    assert not evaluator.evaluate(FeedbackRequest(CommandId.SCREEN_WIDTH, value=2438), cache)


def test_from_jsonable():
    request = FeedbackRequest.from_jsonable(CommandId.SCREEN_POSITION, {"value": "", "unit": "INCHES"})
    assert request.value is None
    request = FeedbackRequest.from_jsonable(CommandId.ASPECT_RATIO, {"index": "3"})
    assert request.index == 3
