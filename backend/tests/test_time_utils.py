"""Studio calendar-day helpers."""

from datetime import date, datetime, timedelta, timezone

from studiopos.time_utils import parse_calendar_date, to_studio_date, studio_day_bounds


def test_naive_datetime_is_utc(app):
    # 18:00 UTC is 01:00 the next day in Asia/Jakarta
    assert to_studio_date(datetime(2030, 1, 15, 18, 0)) == date(2030, 1, 16)


def test_aware_datetime_keeps_its_zone(app):
    # 14:00 at UTC-05:00 is 19:00 UTC, 02:00 on the 16th in Jakarta
    new_york = timezone(timedelta(hours=-5))
    aware = datetime(2030, 1, 15, 14, 0, tzinfo=new_york)

    assert to_studio_date(aware) == date(2030, 1, 16)
    assert parse_calendar_date(aware) == date(2030, 1, 16)


def test_aware_datetime_in_studio_zone(app):
    jakarta = timezone(timedelta(hours=7))
    # 20:00 local is still the 15th; reading it as UTC would give the 16th
    assert parse_calendar_date(datetime(2030, 1, 15, 20, 0, tzinfo=jakarta)) == date(2030, 1, 15)


def test_parse_iso_strings(app):
    assert parse_calendar_date("2030-01-15") == date(2030, 1, 15)
    assert parse_calendar_date("2030-01-15T20:00:00Z") == date(2030, 1, 16)
    assert parse_calendar_date("") is None


def test_day_bounds_are_utc(app):
    start, end = studio_day_bounds(date(2030, 1, 15))
    assert start == datetime(2030, 1, 14, 17, 0)
    assert end == datetime(2030, 1, 15, 17, 0)
