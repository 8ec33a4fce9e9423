from datetime import datetime
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from helpers.datetime_utils import (
    add_days,
    current_hm,
    date_range,
    format_day_label,
    format_hm,
    is_hm,
    is_iso_date,
    parse_iso,
    parse_time_input,
    today_iso,
    weekday_index,
)


def test_today_iso_is_zero_padded_local_date():
    assert today_iso(datetime(2024, 3, 5, 23, 59)) == "2024-03-05"
    assert current_hm(datetime(2024, 3, 5, 7, 4)) == "07:04"


def test_add_days_crosses_month_and_year():
    assert add_days("2024-01-31", 1) == "2024-02-01"
    assert add_days("2024-02-28", 1) == "2024-02-29"
    assert add_days("2024-12-31", 1) == "2025-01-01"
    assert add_days("2024-03-01", -1) == "2024-02-29"


def test_weekday_index_sunday_first():
    assert weekday_index("2024-01-07") == 0  # Sunday
    assert weekday_index("2024-01-01") == 1  # Monday
    assert weekday_index("2024-01-06") == 6  # Saturday


def test_date_range_consecutive_days():
    assert date_range("2024-12-30", 4) == ["2024-12-30", "2024-12-31", "2025-01-01", "2025-01-02"]


def test_iso_validation():
    assert is_iso_date("2024-02-29")
    assert not is_iso_date("2023-02-29")
    assert not is_iso_date("2024-2-9")
    assert not is_iso_date(None)
    with pytest.raises(ValueError):
        parse_iso("tomorrow")


def test_parse_time_input_forms():
    assert parse_time_input("9:05") == "09:05"
    assert parse_time_input("21.30") == "21:30"
    assert parse_time_input("930") == "09:30"
    assert parse_time_input("2359") == "23:59"
    assert parse_time_input("24:00") is None
    assert parse_time_input("12:3") is None
    assert parse_time_input("") is None
    assert parse_time_input(None) is None


def test_format_hm_and_is_hm():
    assert format_hm(7, 5) == "07:05"
    assert format_hm(25, 0) is None
    assert is_hm("00:00")
    assert not is_hm("7:05")
    assert not is_hm(None)


def test_format_day_label_relative_and_absolute():
    today = "2024-01-08"
    assert format_day_label("2024-01-08", today=today) == "Today"
    assert format_day_label("2024-01-09", today=today) == "Tomorrow"
    assert format_day_label("2024-01-07", today=today) == "Yesterday"
    assert format_day_label("2024-01-15", today=today) == "Monday, Jan 15"
