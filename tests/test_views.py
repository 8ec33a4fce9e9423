import pytest

from models.task import Task
from services.views import (
    QUOTES,
    ViewContext,
    completion_percentage,
    compose_for_context,
    compose_view,
    effective_sort_date,
    is_celebration,
    pick_quote,
)

TODAY = "2024-01-10"  # Wednesday


def make(task_id, **kwargs):
    kwargs.setdefault("text", f"task {task_id}")
    kwargs.setdefault("date_created", TODAY)
    return Task(id=task_id, **kwargs)


def test_day_view_orders_by_date_then_time_then_id():
    tasks = [
        make(1),
        make(3, time="09:00"),
        make(5, type="recurring", date_created="2023-12-01", time="08:00"),
        make(2),
    ]
    result = compose_view(tasks, "day", TODAY, today=TODAY)
    assert [t.id for t in result.tasks] == [5, 3, 1, 2]
    assert result.anchor == TODAY
    assert result.percentage == 0


def test_recurring_sorts_as_anchor_not_creation_date():
    task = make(1, type="recurring", date_created="2020-05-05")
    assert effective_sort_date(task, TODAY) == TODAY


def test_weekly_sorts_on_next_matching_day():
    friday = make(1, type="weekly", weekly_day=5, date_created="2024-01-01")
    tuesday = make(2, type="weekly", weekly_day=2, date_created="2024-01-01")
    assert effective_sort_date(friday, TODAY) == "2024-01-12"
    assert effective_sort_date(tuesday, TODAY) == "2024-01-16"


def test_week_view_is_union_anchored_on_today():
    tasks = [
        make(1, date_created="2024-01-16"),
        make(2, date_created="2024-01-17"),
        make(3, type="weekly", weekly_day=5, date_created="2024-01-01"),
        make(4, type="recurring", date_created="2024-01-01", completions=frozenset({TODAY})),
    ]
    result = compose_view(tasks, "week", "2023-01-01", today=TODAY)
    assert result.anchor == TODAY
    assert [t.id for t in result.tasks] == [4, 3, 1]
    # only today's completions count in week mode
    assert result.completed_count == 1
    assert result.percentage == 33


def test_week_view_lists_recurring_task_once():
    tasks = [make(1, type="recurring", date_created="2024-01-01")]
    result = compose_view(tasks, "week", TODAY, today=TODAY)
    assert result.total == 1


def test_percentage_rounds_half_up_and_handles_empty():
    assert completion_percentage(0, 0) == 0
    assert completion_percentage(1, 3) == 33
    assert completion_percentage(2, 3) == 67
    assert completion_percentage(1, 8) == 13
    assert completion_percentage(4, 4) == 100


def test_history_drilldown_uses_picked_date():
    tasks = [make(1, date_created="2024-01-05", completions=frozenset({"2024-01-05"}))]
    ctx = ViewContext(view="history", selected_date=TODAY, drilldown_date="2024-01-05")
    result = compose_for_context(tasks, ctx, today=TODAY)
    assert result.anchor == "2024-01-05"
    assert result.percentage == 100


def test_context_effective_date():
    assert ViewContext(view="week", selected_date="2024-02-01").effective_date(TODAY) == TODAY
    assert ViewContext(view="day", selected_date="2024-02-01").effective_date(TODAY) == "2024-02-01"
    assert ViewContext(view="day").effective_date(TODAY) == TODAY


def test_unknown_view_rejected():
    with pytest.raises(ValueError):
        compose_view([], "month", TODAY, today=TODAY)


def test_quote_pool_follows_progress():
    # ord("0") % 3 == 0
    assert pick_quote(0, 3, TODAY) == QUOTES["start"][0]
    assert pick_quote(50, 3, TODAY) == QUOTES["progress"][0]
    assert pick_quote(100, 3, TODAY) == QUOTES["finish"][0]
    assert pick_quote(100, 0, TODAY) == QUOTES["start"][0]
    assert pick_quote(0, 0, "2024-01-11") == QUOTES["start"][1]


def test_celebration_only_on_transition_to_full():
    assert is_celebration(67, 100, 3)
    assert not is_celebration(100, 100, 3)
    assert not is_celebration(0, 100, 0)
    assert not is_celebration(0, 50, 2)
