"""Pure task mutations. Every function returns a new ``Task``."""
from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Optional

from core.categories import CATEGORIES, TASK_TYPES, next_in_cycle
from helpers.datetime_utils import add_days, is_hm, is_iso_date, today_iso, weekday_index
from models.task import Task, clean_text

_EDITABLE = {f.name for f in fields(Task)} - {"id"}


def toggle_completion(task: Task, day: str) -> Task:
    if day in task.completions:
        return replace(task, completions=task.completions - {day})
    return replace(task, completions=task.completions | {day})


def hide_for_date(task: Task, day: str) -> Task:
    """Soft delete of a single occurrence; a hidden day can't stay done."""
    return replace(
        task,
        hidden_dates=task.hidden_dates | {day},
        completions=task.completions - {day},
    )


def move_occurrence(task: Task, from_date: str, direction: int) -> Task:
    """Shift the occurrence on ``from_date`` one day forward (+1) or back (-1).

    One-time tasks are physically relocated. Recurring and weekly tasks only
    lose their ``from_date`` occurrence since they come back on their own.
    """

    if direction not in (1, -1):
        raise ValueError(f"direction must be +1 or -1, got {direction!r}")

    to_date = add_days(from_date, direction)
    changes: dict[str, Any] = {
        "hidden_dates": (task.hidden_dates | {from_date}) - {to_date},
        "completions": task.completions - {from_date},
    }
    if task.type == "one-time":
        changes["date_created"] = to_date
    return replace(task, **changes)


def default_move_direction(context_date: str, today: str) -> int:
    return -1 if context_date > today else 1


def edit_fields(task: Task, *, today: Optional[str] = None, **patch: Any) -> Task:
    """Replace fields on ``task``, validating what the rest of the app relies on."""

    unknown = set(patch) - _EDITABLE
    if unknown:
        raise ValueError(f"Unknown or read-only task fields: {', '.join(sorted(unknown))}")

    if "text" in patch:
        patch["text"] = clean_text(patch["text"])
        if not patch["text"]:
            raise ValueError("Task text cannot be empty")
    if "category" in patch and patch["category"] not in CATEGORIES:
        raise ValueError(f"Unknown category: {patch['category']!r}")
    if "type" in patch and patch["type"] not in TASK_TYPES:
        raise ValueError(f"Unknown task type: {patch['type']!r}")
    if "date_created" in patch and not is_iso_date(patch["date_created"]):
        raise ValueError(f"Invalid date: {patch['date_created']!r}")
    if patch.get("time") is not None:
        if not is_hm(patch["time"]):
            raise ValueError(f"Invalid time: {patch['time']!r}")
    elif "time" in patch:
        patch["time"] = None
    if patch.get("weekly_day") is not None and patch["weekly_day"] not in range(7):
        raise ValueError(f"Invalid weekday: {patch['weekly_day']!r}")
    for key in ("completions", "hidden_dates"):
        if key in patch:
            patch[key] = frozenset(patch[key])
    if "notes" in patch:
        patch["notes"] = patch["notes"] or ""

    updated = replace(task, **patch)
    if updated.type != "weekly":
        # the weekday only means something for weekly tasks
        updated = replace(updated, weekly_day=None)
    elif updated.weekly_day is None:
        updated = replace(updated, weekly_day=weekday_index(today or today_iso()))
    return updated


def cycle_category(task: Task) -> Task:
    return replace(task, category=next_in_cycle(CATEGORIES, task.category))


def cycle_type(task: Task, *, today: Optional[str] = None) -> Task:
    return edit_fields(task, today=today, type=next_in_cycle(TASK_TYPES, task.type))


__all__ = [
    "cycle_category",
    "cycle_type",
    "default_move_direction",
    "edit_fields",
    "hide_for_date",
    "move_occurrence",
    "toggle_completion",
]
