"""Tests for identifier formatting and parsing."""

from datetime import date

from logistics.sequence.sequence import (
    DailySequence,
    format_identifier,
    local_day_bounds,
    parse_sequence,
    sequence_key,
)

DAY = date(2024, 1, 15)


class TestFormat:
    def test_zero_padded_to_four_digits(self):
        assert format_identifier("MTN", DAY, 7) == "MTN-20240115-0007"

    def test_wider_values_are_not_truncated(self):
        assert format_identifier("RCP", DAY, 12345) == "RCP-20240115-12345"

    def test_sequence_key(self):
        assert sequence_key("REQ", DAY) == "REQ-20240115"


class TestParse:
    def test_parses_trailing_counter(self):
        assert parse_sequence("MTN-20240115-0042") == 42

    def test_non_numeric_suffix(self):
        assert parse_sequence("MTN-20240115-00AB") is None

    def test_empty(self):
        assert parse_sequence(None) is None
        assert parse_sequence("") is None

    def test_too_short(self):
        assert parse_sequence("12") is None


class TestDailySequence:
    def test_advance_increments(self):
        counter = DailySequence.start("MTN", DAY, seed=3)
        assert counter.key == "MTN-20240115"
        assert counter.advance() == 4
        assert counter.advance() == 5


class TestDayBounds:
    def test_bounds_span_one_local_day(self):
        start, end = local_day_bounds(DAY)
        assert start.tzinfo is not None
        assert start.date() == DAY
        assert end.date() == date(2024, 1, 16)
