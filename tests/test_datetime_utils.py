from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.library_system.library_system.common.datetime_utils import day_bounds, format_duration, parse_hhmm
from src.library_system.library_system.common.validators import require_email, require_positive_int
from src.library_system.library_system.core.exceptions import ValidationError


def test_day_bounds_is_half_open():
    start, end = day_bounds(date(2026, 2, 28))
    assert start == datetime(2026, 2, 28, 0, 0)
    assert end == datetime(2026, 3, 1, 0, 0)


def test_format_duration_uses_now_for_open_visits():
    start = datetime(2026, 2, 2, 9, 0)
    assert format_duration(start, datetime(2026, 2, 2, 11, 5)) == "2h 5m"
    assert format_duration(start, None, now=datetime(2026, 2, 2, 9, 59)) == "0h 59m"


def test_parse_hhmm():
    assert parse_hhmm(" 07:45 ") == time(7, 45)
    with pytest.raises(ValueError):
        parse_hhmm("7pm")


def test_validators():
    assert require_email(" Reader@Library.ORG ") == "reader@library.org"
    assert require_positive_int("12", "Seats") == 12
    with pytest.raises(ValidationError):
        require_email("reader@")
    with pytest.raises(ValidationError):
        require_positive_int("-3", "Seats")
