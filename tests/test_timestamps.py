"""Unit tests for cue timestamp parsing and formatting.

WHY: Every parser shares parse_timestamp, so an off-by-one-millisecond or
a crash on a stray value would misalign every subtitle line.

HOW: Table-driven checks over the accepted shapes (hours, minutes-only,
bare seconds, comma decimals) plus malformed input.

RULES:
- Valid H:MM:SS.mmm values must be exact to the millisecond.
- Malformed input returns 0.0, never raises.
"""

import pytest

from learning_overlay.core.timestamps import format_timestamp, parse_timestamp


class TestParseTimestamp:
    """Accepted timestamp shapes."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("01:02:03.456", 3723.456),
            ("00:00:01.000", 1.0),
            ("10:00:00.001", 36000.001),
            ("00:01:02,500", 62.5),
            ("01:02.500", 62.5),
            ("12.5", 12.5),
            ("42", 42.0),
        ],
    )
    def test_valid_shapes(self, raw, expected):
        assert parse_timestamp(raw) == expected

    def test_short_fraction_is_right_padded(self):
        """'.5' means 500ms, not 5ms."""
        assert parse_timestamp("00:00:01.5") == 1.5

    def test_long_fraction_is_truncated_to_ms(self):
        assert parse_timestamp("00:00:01.12345") == 1.123

    def test_surrounding_whitespace_and_settings_ignored(self):
        assert parse_timestamp("  00:00:04.000 ") == 4.0

    def test_hours_beyond_two_digits(self):
        assert parse_timestamp("100:00:00.000") == 360000.0


class TestMalformedTimestamps:
    """Unparsable input degrades to zero."""

    @pytest.mark.parametrize("raw", ["", "garbage", "::", "--"])
    def test_unparsable_strings(self, raw):
        assert parse_timestamp(raw) == 0.0

    @pytest.mark.parametrize("raw", [None, 12, 3.5, b"00:00:01.000"])
    def test_non_string_input(self, raw):
        assert parse_timestamp(raw) == 0.0


class TestFormatTimestamp:

    def test_formats_clock_time(self):
        assert format_timestamp(3723.456) == "01:02:03.456"

    def test_zero(self):
        assert format_timestamp(0) == "00:00:00.000"

    def test_negative_clamped(self):
        assert format_timestamp(-3.0) == "00:00:00.000"

    def test_parse_of_formatted_value(self):
        assert parse_timestamp(format_timestamp(62.5)) == 62.5
