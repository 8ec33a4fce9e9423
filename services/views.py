"""Builds the ordered task list and progress figure for Day/Week/History views.

Each view mode is a small strategy object; ``compose_view`` picks one, filters
the collection through the occurrence rule and applies the shared ordering.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.settings import TASKS
from helpers.datetime_utils import add_days, date_range, today_iso, weekday_index
from models.task import Task
from services.occurrence import is_due

VIEW_MODES = ("day", "week", "history")
WEEK_LENGTH = 7

QUOTES: Dict[str, Tuple[str, ...]] = {
    "start": (
        "The secret of getting ahead is getting started.",
        "Make today count.",
        "Your future self will thank you.",
    ),
    "progress": (
        "Keep going, you're doing great!",
        "Momentum is building.",
        "One step at a time.",
    ),
    "finish": (
        "Champion status achieved!",
        "Absolute legend.",
        "You crushed today!",
    ),
}


@dataclass(frozen=True)
class ViewContext:
    view: str = "day"
    selected_date: str = ""
    drilldown_date: Optional[str] = None

    def effective_date(self, today: Optional[str] = None) -> str:
        current = today or today_iso()
        if self.view == "week":
            return current
        if self.view == "history" and self.drilldown_date:
            return self.drilldown_date
        return self.selected_date or current


@dataclass(frozen=True)
class ViewResult:
    tasks: Tuple[Task, ...]
    percentage: int
    anchor: str
    completed_count: int = 0

    @property
    def total(self) -> int:
        return len(self.tasks)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completion_percentage(done: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(100 * done / total)


# ---------- ordering ----------
def effective_sort_date(task: Task, anchor: str) -> str:
    if task.type == "recurring":
        return anchor if task.date_created < anchor else task.date_created
    if task.type == "weekly" and task.weekly_day is not None:
        offset = (task.weekly_day - weekday_index(anchor) + 7) % 7
        return add_days(anchor, offset)
    return task.date_created


def sort_key(task: Task, anchor: str) -> Tuple[str, str, int]:
    return (effective_sort_date(task, anchor), task.time or TASKS.untimed_sort_key, task.id)


def sort_tasks(tasks: Iterable[Task], anchor: str) -> List[Task]:
    return sorted(tasks, key=lambda t: sort_key(t, anchor))


# ---------- strategies ----------
class DayStrategy:
    """Tasks due on the anchor date."""

    def anchor(self, requested: str, today: str) -> str:
        return requested

    def visible(self, tasks: Sequence[Task], anchor: str, today: str) -> List[Task]:
        return [t for t in tasks if is_due(t, anchor, today=today)]


class WeekStrategy(DayStrategy):
    """Tasks due on any of the seven days starting today."""

    def anchor(self, requested: str, today: str) -> str:
        # a stale week window is never shown
        return today

    def visible(self, tasks: Sequence[Task], anchor: str, today: str) -> List[Task]:
        days = date_range(anchor, WEEK_LENGTH)
        week_ids = {t.id for day in days for t in tasks if is_due(t, day, today=today)}
        return [t for t in tasks if t.id in week_ids]


class DrilldownStrategy(DayStrategy):
    """History drill-down: a day view pinned to the picked date."""


STRATEGIES: Dict[str, DayStrategy] = {
    "day": DayStrategy(),
    "week": WeekStrategy(),
    "history": DrilldownStrategy(),
}


def compose_view(
    tasks: Sequence[Task],
    view: str,
    anchor: str,
    *,
    today: Optional[str] = None,
) -> ViewResult:
    """Return visible tasks in display order plus the completion percentage.

    The percentage counts completions on the anchor date only, including in
    week mode where the anchor is today.
    """

    try:
        strategy = STRATEGIES[view]
    except KeyError:
        raise ValueError(f"Unsupported view: {view}") from None

    current = today or today_iso()
    start = strategy.anchor(anchor, current)
    visible = sort_tasks(strategy.visible(tasks, start, current), start)
    done = sum(1 for t in visible if start in t.completions)
    return ViewResult(
        tasks=tuple(visible),
        percentage=completion_percentage(done, len(visible)),
        anchor=start,
        completed_count=done,
    )


def compose_for_context(
    tasks: Sequence[Task], ctx: ViewContext, *, today: Optional[str] = None
) -> ViewResult:
    current = today or today_iso()
    return compose_view(tasks, ctx.view, ctx.effective_date(current), today=current)


# ---------- header extras ----------
def pick_quote(percentage: int, visible_count: int, today: str) -> str:
    if percentage == 100 and visible_count > 0:
        pool = QUOTES["finish"]
    elif percentage > 0:
        pool = QUOTES["progress"]
    else:
        pool = QUOTES["start"]
    return pool[ord(today[-1]) % len(pool)]


def is_celebration(previous: int, current: int, visible_count: int) -> bool:
    return current == 100 and visible_count > 0 and previous < 100


__all__ = [
    "QUOTES",
    "STRATEGIES",
    "VIEW_MODES",
    "ViewContext",
    "ViewResult",
    "completion_percentage",
    "compose_for_context",
    "compose_view",
    "effective_sort_date",
    "is_celebration",
    "pick_quote",
    "sort_key",
    "sort_tasks",
]
