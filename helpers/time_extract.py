"""Best-effort extraction of a clock time from free task text.

``"Call mom 2:30pm"`` -> text ``"Call mom"``, time ``"14:30"``. Korean forms
(``오후 2시 30분``) are understood as well because the quick-add box is used in
both languages.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from helpers.datetime_utils import format_hm

_PM_MODIFIERS = {"오후", "저녁", "밤", "낮"}
_AM_MODIFIERS = {"오전", "아침", "새벽"}


@dataclass(frozen=True)
class TimeParseResult:
    text: str
    time: Optional[str]


def _korean_modifier(match: re.Match) -> Optional[str]:
    modifier = match.group(1)
    hour = int(match.group(2))
    minute = int(match.group(3)) if match.group(3) else 0
    if modifier in _PM_MODIFIERS and hour < 12:
        hour += 12
    if modifier in _AM_MODIFIERS and hour == 12:
        hour = 0
    return format_hm(hour, minute)


def _am_pm(match: re.Match) -> Optional[str]:
    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    marker = match.group(3).lower().replace(".", "")
    if marker == "pm" and hour < 12:
        hour += 12
    if marker == "am" and hour == 12:
        hour = 0
    return format_hm(hour, minute)


def _twenty_four(match: re.Match) -> Optional[str]:
    return format_hm(int(match.group(1)), int(match.group(2)))


def _korean_plain(match: re.Match) -> Optional[str]:
    minute = int(match.group(2)) if match.group(2) else 0
    return format_hm(int(match.group(1)), minute)


# order matters: modifiers before bare numbers
_PATTERNS: tuple[tuple[re.Pattern, Callable[[re.Match], Optional[str]]], ...] = (
    (re.compile(r"(오전|오후|아침|새벽|밤|저녁|낮)\s*(\d{1,2})시(?:\s*(\d{1,2})분)?"), _korean_modifier),
    (re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm|a\.m\.|p\.m\.)", re.IGNORECASE), _am_pm),
    (re.compile(r"\b([01]?\d|2[0-3]):([0-5]\d)\b"), _twenty_four),
    (re.compile(r"\b(\d{1,2})시(?:\s*(\d{1,2})분)?"), _korean_plain),
)


def extract_time_from_text(value: str) -> TimeParseResult:
    """Return the text with the first recognised time phrase removed."""

    for pattern, handler in _PATTERNS:
        match = pattern.search(value)
        if not match:
            continue
        detected = handler(match)
        if detected:
            cleaned = value.replace(match.group(0), "", 1)
            cleaned = re.sub(r"\s+", " ", cleaned).strip()
            return TimeParseResult(text=cleaned, time=detected)
    return TimeParseResult(text=value, time=None)


__all__ = ["TimeParseResult", "extract_time_from_text"]
