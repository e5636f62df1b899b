"""
Unit tests for wastebank_impact/timestamps.py
"""
import logging
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from wastebank_impact.timestamps import month_key, parse_timestamp

UTC = timezone.utc
MARCH_1 = datetime(2024, 3, 1, tzinfo=UTC)
MARCH_1_EPOCH = 1709251200


class TestParseTimestamp:

    def test_object_with_seconds(self):
        value = SimpleNamespace(seconds=MARCH_1_EPOCH, nanoseconds=500_000_000)
        assert parse_timestamp(value) == MARCH_1 + timedelta(milliseconds=500)

    @pytest.mark.parametrize("value", [
        {"seconds": MARCH_1_EPOCH},
        {"_seconds": MARCH_1_EPOCH, "_nanoseconds": 0},
    ])
    def test_mapping_with_seconds(self, value):
        assert parse_timestamp(value) == MARCH_1

    def test_epoch_milliseconds(self):
        assert parse_timestamp(MARCH_1_EPOCH * 1000) == MARCH_1

    def test_naive_datetime_assumed_utc(self):
        assert parse_timestamp(datetime(2024, 3, 1)) == MARCH_1

    def test_aware_datetime_converted_to_utc(self):
        jakarta = timezone(timedelta(hours=7))
        result = parse_timestamp(datetime(2024, 3, 1, 7, 0, tzinfo=jakarta))
        assert result == MARCH_1
        assert result.tzinfo == UTC

    def test_date(self):
        assert parse_timestamp(date(2024, 3, 1)) == MARCH_1

    @pytest.mark.parametrize("value", [
        "2024-03-01",
        "2024-03-01T00:00:00Z",
        "2024-03-01T07:00:00+07:00",
        "  2024-03-01  ",
    ])
    def test_strings(self, value):
        assert parse_timestamp(value) == MARCH_1

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_values_are_silent(self, value, caplog):
        with caplog.at_level(logging.WARNING, logger="wastebank_impact.timestamps"):
            assert parse_timestamp(value) is None
        assert caplog.text == ""

    @pytest.mark.parametrize("value", [
        "n/a",
        float("nan"),
        True,
        {"seconds": "soon"},
        ["2024-03-01"],
    ])
    def test_unparseable_values_warn(self, value, caplog):
        with caplog.at_level(logging.WARNING, logger="wastebank_impact.timestamps"):
            assert parse_timestamp(value) is None
        assert "Unparseable timestamp" in caplog.text


class TestMonthKey:

    def test_zero_padded(self):
        assert month_key(datetime(2024, 3, 9)) == "2024-03"

    def test_december(self):
        assert month_key(datetime(2023, 12, 31)) == "2023-12"
