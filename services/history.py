"""Level/XP, streak and heatmap figures for the History page."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set

from core.settings import HISTORY
from helpers.datetime_utils import add_days, today_iso
from models.task import Task
from services.occurrence import is_due
from services.views import completion_percentage


@dataclass(frozen=True)
class LevelInfo:
    xp: int
    level: int
    progress: float
    next_level_xp: int


@dataclass(frozen=True)
class HeatCell:
    day: str
    total: int
    completed: int
    percentage: int
    level: int


@dataclass(frozen=True)
class HistorySummary:
    level: LevelInfo
    streak: int
    heatmap: tuple[HeatCell, ...]

    @property
    def total_completions(self) -> int:
        return self.level.xp


def level_info(tasks: Iterable[Task], *, per_level: int = HISTORY.xp_per_level) -> LevelInfo:
    xp = sum(len(t.completions) for t in tasks)
    level = math.floor(xp / per_level) + 1
    progress = ((xp - (level - 1) * per_level) / per_level) * 100
    return LevelInfo(
        xp=xp,
        level=level,
        progress=min(100.0, max(0.0, progress)),
        next_level_xp=level * per_level,
    )


def completion_dates(tasks: Iterable[Task]) -> Set[str]:
    dates: Set[str] = set()
    for task in tasks:
        dates.update(task.completions)
    return dates


def current_streak(tasks: Iterable[Task], *, today: Optional[str] = None) -> int:
    """Consecutive completed days ending today, or yesterday if today is open."""
    done = completion_dates(tasks)
    current = today or today_iso()
    yesterday = add_days(current, -1)
    if current not in done and yesterday not in done:
        return 0

    cursor = current if current in done else yesterday
    streak = 0
    while cursor in done:
        streak += 1
        cursor = add_days(cursor, -1)
    return streak


def heat_level(percentage: int) -> int:
    if percentage >= 100:
        return 4
    if percentage > 60:
        return 3
    if percentage > 30:
        return 2
    if percentage > 0:
        return 1
    return 0


def heatmap(
    tasks: Sequence[Task],
    *,
    today: Optional[str] = None,
    days: int = HISTORY.heatmap_days,
) -> List[HeatCell]:
    """One cell per day, oldest first, ending with today."""
    current = today or today_iso()
    cells: List[HeatCell] = []
    for offset in range(days - 1, -1, -1):
        day = add_days(current, -offset)
        visible = [t for t in tasks if is_due(t, day, today=current)]
        completed = sum(1 for t in visible if day in t.completions)
        pct = completion_percentage(completed, len(visible))
        cells.append(
            HeatCell(day=day, total=len(visible), completed=completed, percentage=pct, level=heat_level(pct))
        )
    return cells


def summarize(tasks: Sequence[Task], *, today: Optional[str] = None) -> HistorySummary:
    current = today or today_iso()
    return HistorySummary(
        level=level_info(tasks),
        streak=current_streak(tasks, today=current),
        heatmap=tuple(heatmap(tasks, today=current)),
    )


__all__ = [
    "HeatCell",
    "HistorySummary",
    "LevelInfo",
    "completion_dates",
    "current_streak",
    "heat_level",
    "heatmap",
    "level_info",
    "summarize",
]
