"""Metadata for task categories and recurrence types."""
from __future__ import annotations

from typing import Dict

CATEGORY_META: Dict[str, Dict[str, str]] = {
    "personal": {
        "label": "Personal",
        "color": "#A855F7",    # purple-500
        "bgcolor": "#F3E8FF",  # purple-100
    },
    "work": {
        "label": "Work",
        "color": "#3B82F6",    # blue-500
        "bgcolor": "#DBEAFE",  # blue-100
    },
    "health": {
        "label": "Health",
        "color": "#10B981",    # emerald-500
        "bgcolor": "#D1FAE5",  # emerald-100
    },
    "other": {
        "label": "Other",
        "color": "#64748B",    # slate-500
        "bgcolor": "#E2E8F0",  # slate-200
    },
}

CATEGORIES: tuple[str, ...] = tuple(CATEGORY_META.keys())
DEFAULT_CATEGORY = "personal"
FALLBACK_CATEGORY = "other"

TASK_TYPE_LABELS: Dict[str, str] = {
    "one-time": "Once",
    "recurring": "Daily",
    "weekly": "Weekly",
}

TASK_TYPES: tuple[str, ...] = tuple(TASK_TYPE_LABELS.keys())
DEFAULT_TASK_TYPE = "one-time"

DAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def normalize_category(value: str | None) -> str:
    """Map external values onto a known category."""
    if value is None:
        return DEFAULT_CATEGORY
    key = str(value).strip().lower()
    return key if key in CATEGORY_META else FALLBACK_CATEGORY


def category_label(value: str) -> str:
    meta = CATEGORY_META.get(value, CATEGORY_META[FALLBACK_CATEGORY])
    return meta["label"]


def category_color(value: str) -> str:
    meta = CATEGORY_META.get(value, CATEGORY_META[FALLBACK_CATEGORY])
    return meta["color"]


def category_bgcolor(value: str) -> str:
    meta = CATEGORY_META.get(value, CATEGORY_META[FALLBACK_CATEGORY])
    return meta["bgcolor"]


def task_type_label(value: str) -> str:
    return TASK_TYPE_LABELS.get(value, value)


def next_in_cycle(values: tuple[str, ...], current: str) -> str:
    """Return the value after ``current``, wrapping around; unknown -> first."""
    try:
        idx = values.index(current)
    except ValueError:
        return values[0]
    return values[(idx + 1) % len(values)]


def category_options() -> Dict[str, str]:
    """Return mapping of dropdown values -> labels."""
    return {key: meta["label"] for key, meta in CATEGORY_META.items()}


def task_type_options() -> Dict[str, str]:
    return dict(TASK_TYPE_LABELS)
