"""Unit tests for date range resolution."""

import pytest
from datetime import date, datetime, timedelta, timezone

from callboard_core.analytics import (
    DateRangeResolver,
    InvalidDateError,
    InvalidRangeError,
    parse_date,
)


NOW = datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
def resolver():
    return DateRangeResolver(clock=lambda: NOW)


class TestParseDate:
    """Tests for parse_date."""

    def test_absent(self):
        assert parse_date(None, "date_from") is None
        assert parse_date("   ", "date_from") is None

    def test_date_only_is_midnight(self):
        assert parse_date("2024-01-01", "date_from") == datetime(2024, 1, 1)
        assert parse_date(date(2024, 1, 1), "date_from") == datetime(2024, 1, 1)

    def test_datetime_string(self):
        assert parse_date("2024-01-02T23:59:59", "date_to") == datetime(2024, 1, 2, 23, 59, 59)

    def test_offset_converted_to_utc(self):
        parsed = parse_date("2024-01-01T10:00:00+02:00", "date_from")

        assert parsed == datetime(2024, 1, 1, 8, 0, 0)
        assert parsed.tzinfo is None

    def test_aware_datetime(self):
        aware = datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert parse_date(aware, "date_to") == datetime(2024, 1, 1, 15, 0)

    @pytest.mark.parametrize("raw", ["yesterday", "2024-13-01", "01/02/2024", 20240101])
    def test_malformed(self, raw):
        with pytest.raises(InvalidDateError) as exc_info:
            parse_date(raw, "date_from")

        assert exc_info.value.field == "date_from"


class TestDateRangeResolver:
    """Tests for DateRangeResolver."""

    def test_defaults(self, resolver):
        window = resolver.resolve()

        assert window.end == NOW
        assert window.start == NOW - timedelta(days=7)
        assert window.agent_filter is None

    def test_custom_default_span(self, resolver):
        window = resolver.resolve(default_span_days=30)

        assert window.start == NOW - timedelta(days=30)

    def test_explicit_bounds(self, resolver):
        window = resolver.resolve("2024-01-01", "2024-01-31T23:59:59")

        assert window.start == datetime(2024, 1, 1)
        assert window.end == datetime(2024, 1, 31, 23, 59, 59)

    def test_equal_bounds(self, resolver):
        window = resolver.resolve("2024-01-01", "2024-01-01")

        assert window.start == window.end

    def test_only_end_supplied(self, resolver):
        window = resolver.resolve(None, "2024-03-10")

        assert window.end == datetime(2024, 3, 10)
        assert window.start == NOW - timedelta(days=7)

    def test_inverted_range(self, resolver):
        with pytest.raises(InvalidRangeError) as exc_info:
            resolver.resolve("2024-02-01", "2024-01-01")

        assert exc_info.value.field == "date_from"

    def test_defaulted_start_after_supplied_end(self, resolver):
        """Test a defaulted start later than an early explicit end."""
        with pytest.raises(InvalidRangeError):
            resolver.resolve(None, "2020-01-01")

    def test_malformed_end(self, resolver):
        with pytest.raises(InvalidDateError) as exc_info:
            resolver.resolve("2024-01-01", "not-a-date")

        assert exc_info.value.field == "date_to"

    def test_non_positive_span(self, resolver):
        with pytest.raises(ValueError):
            resolver.resolve(default_span_days=0)

    def test_agent_filter_carried(self, resolver):
        window = resolver.resolve(agent_filter="agt_1")

        assert window.agent_filter == "agt_1"

    def test_explicit_now_overrides_clock(self, resolver):
        now = datetime(2024, 1, 10)

        window = resolver.resolve(now=now)

        assert window.end == now

    def test_default_clock_is_naive_utc(self):
        window = DateRangeResolver().resolve()

        assert window.end.tzinfo is None
        assert window.end - window.start == timedelta(days=7)
