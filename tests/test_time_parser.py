"""
Tests for time-of-day parsing.
"""

import pytest

from business_day_calculator.core.time_parser import (
    parse_time_of_day,
    parse_time_of_day_strict,
)
from business_day_calculator.data.schemas import TimeOfDay


class TestLenientParser:
    """Tests for parse_time_of_day."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("06:00", (6, 0)),
            ("22:30", (22, 30)),
            ("7", (7, 0)),
            ("7:", (7, 0)),
            (":15", (0, 15)),
            ("", (0, 0)),
            ("ab:cd", (0, 0)),
            ("12:xx", (12, 0)),
            ("25:99", (25, 99)),
            (" 08 : 05 ", (8, 5)),
            ("06:00:30", (6, 0)),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_time_of_day(text).as_tuple() == expected

    def test_none_reads_as_midnight(self):
        assert parse_time_of_day(None) == TimeOfDay(hour=0, minute=0)

    def test_returns_time_of_day(self):
        result = parse_time_of_day("06:45")
        assert isinstance(result, TimeOfDay)
        assert result.hour == 6
        assert result.minute == 45


class TestStrictParser:
    """Tests for parse_time_of_day_strict."""

    def test_valid(self):
        assert parse_time_of_day_strict("23:59").as_tuple() == (23, 59)
        assert parse_time_of_day_strict("6:05").as_tuple() == (6, 5)

    @pytest.mark.parametrize("text", ["", "7", "ab:cd", "6:5", "06:00:30", None])
    def test_malformed(self, text):
        with pytest.raises(ValueError, match="Invalid time format"):
            parse_time_of_day_strict(text)

    @pytest.mark.parametrize("text", ["24:00", "25:99", "12:60"])
    def test_out_of_range(self, text):
        with pytest.raises(ValueError, match="out of range"):
            parse_time_of_day_strict(text)
