from datetime import timedelta

from factories import NOW
from lockerhub.core.format import format_currency, format_distance, format_duration, time_remaining
from lockerhub.core.time import parse_datetime


def test_format_distance_switches_units():
    assert format_distance(0.5) == "500m"
    assert format_distance(1.24) == "1.2km"


def test_format_currency_and_duration():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_duration(1) == "1 hour"
    assert format_duration(3) == "3 hours"
    assert format_duration(1.5) == "1.5 hours"


def test_time_remaining():
    assert time_remaining(NOW - timedelta(minutes=1), now=NOW) == "Expired"
    assert time_remaining(NOW + timedelta(hours=2, minutes=5), now=NOW) == "2h 5m remaining"
    assert time_remaining(NOW + timedelta(minutes=5), now=NOW) == "5m remaining"


def test_parse_datetime_attaches_timezone():
    assert parse_datetime("2026-10-18T12:00:00Z", "America/New_York") == NOW
    assert parse_datetime("2026-10-18T08:00", "America/New_York") == NOW
