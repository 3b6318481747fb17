"""Tests for time-string helpers."""

from __future__ import annotations

import pytest

from ghosting_engine.time_format import (
    format_remaining_time,
    parse_duration,
    parse_time_value,
    seconds_to_time_str,
    time_str_to_seconds,
)


class TestSecondsToTimeStr:
    def test_minutes_and_seconds(self) -> None:
        assert seconds_to_time_str(65) == "01:05"
        assert seconds_to_time_str(0) == "00:00"

    def test_precise(self) -> None:
        assert seconds_to_time_str(65.25, precise=True) == "01:05.25"

    def test_invalid_input_formats_as_zero(self) -> None:
        assert seconds_to_time_str(-3) == "00:00"
        assert seconds_to_time_str(-3, precise=True) == "00:00.00"


class TestParsing:
    def test_time_str_to_seconds(self) -> None:
        assert time_str_to_seconds("01:30") == 90.0
        assert time_str_to_seconds("01:05.50") == 65.5
        assert time_str_to_seconds(12) == 12.0
        assert time_str_to_seconds("soon") == 0.0

    def test_parse_duration(self) -> None:
        assert parse_duration("5s") == 5.0
        assert parse_duration("2.5s") == 2.5
        assert parse_duration("5") == 0.0

    @pytest.mark.parametrize(
        "value, expected",
        [("01:30", 90.0), ("5s", 5.0), ("30", 30.0), (45, 45.0), (" 00:10 ", 10.0)],
    )
    def test_parse_time_value(self, value, expected: float) -> None:
        assert parse_time_value(value) == expected

    @pytest.mark.parametrize("value", ["abc", True, None, "1:2:3"])
    def test_parse_time_value_rejects(self, value) -> None:
        assert parse_time_value(value) is None


class TestFormatRemainingTime:
    def test_minutes(self) -> None:
        assert format_remaining_time(65) == "1:05 min"

    def test_seconds(self) -> None:
        assert format_remaining_time(12.5) == "12.5s"
        assert format_remaining_time(0) == "0.0s"
