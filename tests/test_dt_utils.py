"""Tests for utils/dt_utils.py and utils/math_utils.py."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from custom_components.fitstreak.utils import dt_utils, math_utils


class TestDateHelpers:
    """Calendar arithmetic on ISO dates."""

    def test_parse_date(self) -> None:
        assert dt_utils.dt_parse_date("2024-02-29").day == 29
        assert dt_utils.dt_parse_date("2023-02-29") is None
        assert dt_utils.dt_parse_date("") is None
        assert dt_utils.dt_parse_date(None) is None

    def test_date_offset_across_leap_day(self) -> None:
        assert dt_utils.dt_date_offset("2024-03-01", -1) == "2024-02-29"
        assert dt_utils.dt_date_offset("2023-12-31", 1) == "2024-01-01"

    @pytest.mark.parametrize(
        ("day", "monday"),
        [
            ("2024-01-01", "2024-01-01"),
            ("2024-01-03", "2024-01-01"),
            ("2024-01-07", "2024-01-01"),
            ("2024-01-08", "2024-01-08"),
        ],
    )
    def test_week_start_is_monday(self, day: str, monday: str) -> None:
        assert dt_utils.dt_week_start(day) == monday

    def test_week_dates(self) -> None:
        dates = dt_utils.dt_week_dates("2024-03-06")
        assert dates[0] == "2024-03-04"
        assert dates[-1] == "2024-03-10"
        assert len(dates) == 7


class TestTimestamps:
    """Timestamp parsing and the configured timezone."""

    def test_to_utc_converts_offset(self) -> None:
        assert dt_utils.dt_to_utc("2024-03-10T14:00:00+02:00") == datetime(
            2024, 3, 10, 12, 0, tzinfo=UTC
        )

    def test_to_utc_handles_z_suffix(self) -> None:
        assert dt_utils.dt_to_utc("2025-04-07T14:30:00Z") == datetime(
            2025, 4, 7, 14, 30, tzinfo=UTC
        )

    def test_to_utc_rejects_garbage(self) -> None:
        assert dt_utils.dt_to_utc("not a time") is None
        assert dt_utils.dt_to_utc(None) is None

    @freeze_time("2024-03-10 23:30:00+00:00")
    def test_today_uses_timezone(self) -> None:
        assert dt_utils.dt_today_iso(ZoneInfo("UTC")) == "2024-03-10"
        assert dt_utils.dt_today_iso(ZoneInfo("Europe/Berlin")) == "2024-03-11"

    def test_set_default_timezone(self) -> None:
        original = dt_utils.get_default_timezone()
        try:
            dt_utils.set_default_timezone(ZoneInfo("America/New_York"))
            assert dt_utils.dt_to_utc("2024-01-15T07:00:00") == datetime(
                2024, 1, 15, 12, 0, tzinfo=UTC
            )
        finally:
            dt_utils.set_default_timezone(original)


def test_weight_conversion() -> None:
    """Weights are stored in lbs."""
    assert math_utils.to_storage_weight(180, "lbs") == 180
    assert math_utils.round_value(math_utils.to_storage_weight(80, "kg")) == 176.37
    assert math_utils.round_value(math_utils.lbs_to_kg(220)) == 99.79
