from datetime import date, datetime, timezone

import pendulum
import pytest

from mediahub.utils import dates

NOW = datetime(2026, 10, 18, 9, 30)


def test_normalize_to_day():
    assert dates.normalize_to_day(datetime(2026, 10, 18, 23, 59)) == datetime(2026, 10, 18)
    assert dates.normalize_to_day(date(2026, 10, 18)) == datetime(2026, 10, 18)


def test_normalize_to_day_converts_aware_values_to_utc():
    chicago = pendulum.datetime(2026, 10, 18, 21, 0, tz="America/Chicago")
    assert dates.normalize_to_day(chicago) == datetime(2026, 10, 19)
    assert dates.normalize_to_day(datetime(2026, 10, 18, 1, tzinfo=timezone.utc)) == datetime(2026, 10, 18)


def test_yesterday():
    assert dates.yesterday(NOW) == datetime(2026, 10, 17)
    assert dates.yesterday(datetime(2026, 3, 1, 0, 5)) == datetime(2026, 2, 28)


def test_get_date_range_periods():
    assert dates.get_date_range("today", now=NOW) == (datetime(2026, 10, 18), datetime(2026, 10, 18))
    assert dates.get_date_range("yesterday", now=NOW) == (datetime(2026, 10, 17), datetime(2026, 10, 17))
    assert dates.get_date_range("last7days", now=NOW) == (datetime(2026, 10, 12), datetime(2026, 10, 18))
    assert dates.get_date_range("last30days", now=NOW) == (datetime(2026, 9, 19), datetime(2026, 10, 18))
    assert dates.get_date_range("thisMonth", now=NOW) == (datetime(2026, 10, 1), datetime(2026, 10, 18))
    assert dates.get_date_range("lastMonth", now=NOW) == (datetime(2026, 9, 1), datetime(2026, 9, 30))


def test_get_date_range_last_month_across_year_boundary():
    assert dates.get_date_range("lastMonth", now=datetime(2027, 1, 10)) == (datetime(2026, 12, 1), datetime(2026, 12, 31))


def test_get_date_range_custom():
    start, end = dates.get_date_range("custom", datetime(2026, 5, 1, 12), date(2026, 5, 3), now=NOW)
    assert (start, end) == (datetime(2026, 5, 1), datetime(2026, 5, 3))
    with pytest.raises(ValueError):
        dates.get_date_range("custom", datetime(2026, 5, 1), now=NOW)


def test_to_naive_utc():
    aware = pendulum.datetime(2026, 10, 18, 4, 0, tz="America/Chicago")
    assert dates.to_naive_utc(aware) == datetime(2026, 10, 18, 9, 0)
    assert dates.to_naive_utc(NOW) is NOW


def test_parse_and_format():
    assert dates.parse_iso_date("2026-10-18") == datetime(2026, 10, 18)
    assert dates.parse_iso_date("2026-10-18T05:00:00Z") == datetime(2026, 10, 18)
    assert dates.parse_iso_date("2026-10-18T21:00:00-05:00") == datetime(2026, 10, 19)
    with pytest.raises(ValueError):
        dates.parse_iso_date("not a date")
    assert dates.format_date(date(2026, 10, 18)) == "2026-10-18"
