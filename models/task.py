"""Task record and its JSON shape."""
from __future__ import annotations

import time as _time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from core.categories import TASK_TYPES, normalize_category
from core.settings import TASKS
from helpers.datetime_utils import is_hm, is_iso_date, weekday_index


class TaskFormatError(ValueError):
    """Raised when a stored task record cannot be interpreted."""


@dataclass(frozen=True)
class Task:
    id: int
    text: str
    type: str = "one-time"
    category: str = "personal"
    date_created: str = ""
    completions: frozenset[str] = field(default_factory=frozenset)
    hidden_dates: frozenset[str] = field(default_factory=frozenset)
    weekly_day: Optional[int] = None
    time: Optional[str] = None
    notes: str = ""

    @property
    def is_draft(self) -> bool:
        return self.id < 0

    def is_done_on(self, day: str) -> bool:
        return day in self.completions

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "type": self.type,
            "category": self.category,
            "dateCreated": self.date_created,
            "completions": sorted(self.completions),
            "hiddenDates": sorted(self.hidden_dates),
            "notes": self.notes,
        }
        if self.weekly_day is not None:
            payload["weeklyDay"] = self.weekly_day
        if self.time:
            payload["time"] = self.time
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Build a task from its stored shape, repairing what can be repaired."""

        if not isinstance(data, dict):
            raise TaskFormatError("task record must be an object")
        try:
            task_id = int(data["id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise TaskFormatError("task record has no usable id") from exc

        task_type = data.get("type")
        if task_type not in TASK_TYPES:
            raise TaskFormatError(f"unknown task type: {task_type!r}")

        date_created = data.get("dateCreated")
        if not is_iso_date(date_created):
            raise TaskFormatError(f"invalid dateCreated: {date_created!r}")

        weekly_day = data.get("weeklyDay")
        if isinstance(weekly_day, bool) or not isinstance(weekly_day, int) or not 0 <= weekly_day <= 6:
            weekly_day = None
        if task_type == "weekly" and weekly_day is None:
            weekly_day = weekday_index(date_created)

        time_value = data.get("time")
        if not is_hm(time_value):
            time_value = None

        return cls(
            id=task_id,
            text=str(data.get("text") or "").strip(),
            type=task_type,
            category=normalize_category(data.get("category")),
            date_created=date_created,
            completions=_date_set(data.get("completions")),
            hidden_dates=_date_set(data.get("hiddenDates")),
            weekly_day=weekly_day,
            time=time_value,
            notes=str(data.get("notes") or ""),
        )


def _date_set(values: Optional[Iterable[Any]]) -> frozenset[str]:
    if not values or isinstance(values, (str, bytes)):
        return frozenset()
    return frozenset(v for v in values if is_iso_date(v))


def clean_text(text: str) -> str:
    return (text or "").strip()[: TASKS.max_text_length]


def new_task_id(now: Optional[float] = None) -> int:
    """Creation-timestamp based id, in milliseconds."""
    return int((now if now is not None else _time.time()) * 1000)


__all__ = ["Task", "TaskFormatError", "clean_text", "new_task_id"]
