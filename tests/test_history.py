import pytest

from models.task import Task
from services.history import current_streak, heat_level, heatmap, level_info, summarize

TODAY = "2024-03-10"


def done_on(*days, task_id=1, **kwargs):
    kwargs.setdefault("date_created", "2024-01-01")
    kwargs.setdefault("type", "recurring")
    return Task(id=task_id, text="Run", completions=frozenset(days), **kwargs)


def test_streak_counts_today_and_yesterday():
    assert current_streak([done_on("2024-03-09", "2024-03-10")], today=TODAY) == 2


def test_streak_broken_by_gap_yesterday():
    assert current_streak([done_on("2024-03-08")], today=TODAY) == 0


def test_streak_may_end_yesterday():
    tasks = [done_on("2024-03-07", "2024-03-08"), done_on("2024-03-09", task_id=2)]
    assert current_streak(tasks, today=TODAY) == 3


def test_streak_empty():
    assert current_streak([], today=TODAY) == 0


def test_level_progression():
    info = level_info([done_on(*[f"2024-02-{d:02d}" for d in range(1, 13)])])
    assert info.xp == 12
    assert info.level == 2
    assert info.progress == pytest.approx(20.0)
    assert info.next_level_xp == 20
    assert level_info([]).level == 1


def test_heat_level_buckets():
    assert [heat_level(p) for p in (0, 1, 30, 31, 60, 61, 99, 100)] == [0, 1, 1, 2, 2, 3, 3, 4]


def test_heatmap_covers_28_days_ending_today():
    cells = heatmap([done_on(TODAY)], today=TODAY)
    assert len(cells) == 28
    assert cells[-1].day == TODAY
    assert cells[0].day == "2024-02-12"
    assert cells[-1].level == 4
    assert cells[-2].level == 0
    assert cells[-2].total == 1


def test_heatmap_partial_day():
    tasks = [
        done_on(TODAY, task_id=1),
        done_on(task_id=2),
        done_on(task_id=3),
    ]
    last = heatmap(tasks, today=TODAY)[-1]
    assert (last.completed, last.total, last.percentage, last.level) == (1, 3, 33, 2)


def test_summary_totals():
    summary = summarize([done_on("2024-03-09", TODAY)], today=TODAY)
    assert summary.total_completions == 2
    assert summary.streak == 2
    assert len(summary.heatmap) == 28
