"""Decides whether a task is due on a given calendar date."""
from __future__ import annotations

from typing import Iterable, List, Optional

from helpers.datetime_utils import today_iso, weekday_index
from models.task import Task


def is_due(task: Task, day: str, *, today: Optional[str] = None) -> bool:
    """Return True if ``task`` shows up on ``day``.

    A hidden date always wins. An unfinished one-time task from the past rolls
    forward onto *today* (and only today) until it is completed or moved.
    """

    if day in task.hidden_dates:
        return False

    if task.type == "one-time":
        if day == task.date_created:
            return True
        current = today or today_iso()
        return (
            day == current
            and task.date_created < current
            and task.date_created not in task.completions
        )

    if task.type == "recurring":
        return task.date_created <= day

    if task.type == "weekly":
        return task.date_created <= day and task.weekly_day == weekday_index(day)

    return False


def due_on(tasks: Iterable[Task], day: str, *, today: Optional[str] = None) -> List[Task]:
    current = today or today_iso()
    return [t for t in tasks if is_due(t, day, today=current)]


__all__ = ["is_due", "due_on"]
