"""Tests for date parsing and relative-time helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.dates import (
    as_utc,
    format_relative_time,
    get_duration_days,
    get_spanned_dates,
    is_date_in_range,
    is_overdue,
    parse_external_date,
    to_iso,
)

UTC = timezone.utc
NOW = datetime(2025, 11, 18, 12, 0, 0, tzinfo=UTC)


class TestParseExternalDate:
    """Tests for parse_external_date."""

    def test_iso_string_with_z(self):
        assert parse_external_date("2025-11-18T09:00:00.000Z") == datetime(2025, 11, 18, 9, tzinfo=UTC)

    def test_iso_date_only_is_utc_midnight(self):
        assert parse_external_date("2025-11-18") == datetime(2025, 11, 18, tzinfo=UTC)

    def test_iso_with_offset_converted_to_utc(self):
        assert parse_external_date("2025-11-18T09:00:00-08:00") == datetime(2025, 11, 18, 17, tzinfo=UTC)

    def test_seconds(self):
        assert parse_external_date(1700000000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    def test_milliseconds(self):
        assert parse_external_date(1700000000000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    @pytest.mark.parametrize("seconds", [10_000_000, 1_234_567_890, 1_700_000_000, 9_999_999_999])
    def test_seconds_and_milliseconds_agree(self, seconds):
        assert parse_external_date(seconds) == parse_external_date(seconds * 1000)

    def test_numeric_string(self):
        assert parse_external_date("1700000000") == parse_external_date(1700000000)

    def test_float_seconds(self):
        parsed = parse_external_date(1700000000.5)
        assert parsed == datetime(2023, 11, 14, 22, 13, 20, 500000, tzinfo=UTC)

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "not a date", "2025-13-45", float("nan"), float("inf"), float("-inf"), True, False],
    )
    def test_unparseable_is_none(self, value):
        assert parse_external_date(value) is None

    def test_out_of_range_is_none(self):
        assert parse_external_date(1e300) is None

    def test_result_is_timezone_aware(self):
        assert parse_external_date("2025-11-18T09:00:00").tzinfo is not None


class TestToIso:
    def test_formats_utc_with_milliseconds(self):
        assert to_iso(datetime(2025, 11, 18, 9, tzinfo=UTC)) == "2025-11-18T09:00:00.000Z"

    def test_naive_treated_as_utc(self):
        assert to_iso(datetime(2025, 11, 18, 9)) == "2025-11-18T09:00:00.000Z"

    def test_none(self):
        assert to_iso(None) is None

    def test_as_utc_converts_offsets(self):
        eastern = timezone(timedelta(hours=-5))
        assert as_utc(datetime(2025, 11, 18, 4, tzinfo=eastern)) == datetime(2025, 11, 18, 9, tzinfo=UTC)
        assert as_utc(datetime(2025, 11, 18, 9)).tzinfo == UTC

    def test_parses_back(self):
        value = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=UTC)
        assert parse_external_date(to_iso(value)) == value


class TestFormatRelativeTime:
    """Tests for format_relative_time."""

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(seconds=0), "just now"),
            (timedelta(seconds=-59), "just now"),
            (timedelta(minutes=-1), "1 minute ago"),
            (timedelta(minutes=-5), "5 minutes ago"),
            (timedelta(hours=-1), "1 hour ago"),
            (timedelta(hours=-3), "3 hours ago"),
            (timedelta(days=-1), "1 day ago"),
            (timedelta(days=-29), "29 days ago"),
            (timedelta(days=-30), "1 month ago"),
            (timedelta(days=-200), "6 months ago"),
            (timedelta(days=-364), "11 months ago"),
            (timedelta(days=-365), "1 year ago"),
            (timedelta(days=-800), "2 years ago"),
        ],
    )
    def test_past(self, delta, expected):
        assert format_relative_time(NOW + delta, NOW) == expected

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(minutes=1), "in 1 minute"),
            (timedelta(hours=2), "in 2 hours"),
            (timedelta(days=3), "in 3 days"),
            (timedelta(days=60), "in 2 months"),
            (timedelta(days=365), "in 1 year"),
        ],
    )
    def test_future(self, delta, expected):
        assert format_relative_time(NOW + delta, NOW) == expected


class TestIsOverdue:
    def test_past_is_overdue(self):
        assert is_overdue(NOW - timedelta(seconds=1), NOW)

    def test_equal_is_not_overdue(self):
        assert not is_overdue(NOW, NOW)

    def test_future_is_not_overdue(self):
        assert not is_overdue(NOW + timedelta(days=1), NOW)

    def test_none_is_not_overdue(self):
        assert not is_overdue(None, NOW)


class TestRanges:
    def test_duration_days_inclusive(self):
        start = datetime(2025, 11, 18, 9, tzinfo=UTC)
        assert get_duration_days(start, start + timedelta(days=2, hours=8)) == 3

    def test_duration_days_same_day(self):
        start = datetime(2025, 11, 18, 9, tzinfo=UTC)
        assert get_duration_days(start, start + timedelta(hours=1)) == 1

    def test_duration_days_missing_end(self):
        assert get_duration_days(NOW, None) == 0

    def test_spanned_dates(self):
        start = datetime(2025, 11, 30, 9, tzinfo=UTC)
        end = datetime(2025, 12, 2, 17, tzinfo=UTC)
        assert get_spanned_dates(start, end) == [date(2025, 11, 30), date(2025, 12, 1), date(2025, 12, 2)]

    def test_date_in_range_is_inclusive(self):
        start = datetime(2025, 11, 18, 9, tzinfo=UTC)
        end = datetime(2025, 11, 20, 9, tzinfo=UTC)
        assert is_date_in_range(datetime(2025, 11, 20, 23, tzinfo=UTC), start, end)
        assert not is_date_in_range(datetime(2025, 11, 21, 0, tzinfo=UTC), start, end)
