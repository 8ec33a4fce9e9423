import pytest

from helpers.time_extract import extract_time_from_text


@pytest.mark.parametrize(
    "raw, text, time",
    [
        ("Call mom 2:30pm", "Call mom", "14:30"),
        ("Standup at 9am", "Standup at", "09:00"),
        ("Lunch 12 pm sharp", "Lunch sharp", "12:00"),
        ("Night shift 12am", "Night shift", "00:00"),
        ("Deploy 21:15 tonight", "Deploy tonight", "21:15"),
        ("오후 3시 30분 회의", "회의", "15:30"),
        ("오전 12시 약", "약", "00:00"),
        ("운동 7시", "운동", "07:00"),
    ],
)
def test_time_phrase_is_extracted(raw, text, time):
    result = extract_time_from_text(raw)
    assert (result.text, result.time) == (text, time)


def test_text_without_time_is_untouched():
    result = extract_time_from_text("Buy  milk")
    assert result.text == "Buy  milk"
    assert result.time is None


def test_out_of_range_time_is_ignored():
    assert extract_time_from_text("Room 25:99").time is None
