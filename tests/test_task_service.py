import itertools
from dataclasses import replace
import logging

from models.task import Task
from services.tasks import TaskService

TODAY = "2024-01-10"


class FakeStore:
    def __init__(self, tasks=None, *, ok=True):
        self.tasks = list(tasks or [])
        self.ok = ok
        self.saves = 0

    def load_tasks(self):
        return list(self.tasks)

    def save_tasks(self, tasks):
        self.saves += 1
        if self.ok:
            self.tasks = list(tasks)
        return self.ok


def make_service(tasks=None, *, ok=True, ids=None):
    counter = ids or itertools.count(1000).__next__
    store = FakeStore(tasks, ok=ok)
    return TaskService(store, today_fn=lambda: TODAY, id_factory=counter), store


def seeded(**kwargs):
    kwargs.setdefault("date_created", TODAY)
    return Task(id=1, text="Stretch", **kwargs)


def test_new_draft_is_negative_and_unsaved():
    service, store = make_service()
    draft = service.new_draft("2024-01-12")
    assert draft.is_draft
    assert draft.date_created == "2024-01-12"
    assert draft.weekly_day is None
    assert service.list_all() == []
    assert store.saves == 0


def test_empty_draft_is_discarded():
    service, store = make_service()
    draft = service.new_draft()
    assert service.save_draft(draft) is None
    assert service.list_all() == []
    assert store.saves == 0


def test_saved_draft_gets_positive_id_and_is_prepended():
    service, store = make_service([seeded()])
    created = []
    service.subscribe("after_create", created.append)

    draft = service.new_draft()
    task = service.save_draft(replace(draft, text="  Read  "))

    assert task.id > 0
    assert task.text == "Read"
    assert [t.id for t in service.list_all()] == [task.id, 1]
    assert [t.id for t in store.tasks] == [task.id, 1]
    assert created == [task]


def test_saved_ids_stay_unique():
    service, _ = make_service(ids=lambda: 500)
    first = service.add("One")
    second = service.add("Two")
    assert (first.id, second.id) == (500, 501)


def test_add_weekly_with_time():
    service, _ = make_service()
    task = service.add("Gym", type="weekly", category="health", time="18:30")
    assert task.type == "weekly"
    assert task.weekly_day == 3
    assert task.time == "18:30"
    assert task.category == "health"


def test_toggle_and_hide_persist():
    service, store = make_service([seeded(type="recurring")])
    service.toggle(1, TODAY)
    assert TODAY in store.tasks[0].completions
    service.hide(1, TODAY)
    assert TODAY in store.tasks[0].hidden_dates
    assert TODAY not in store.tasks[0].completions


def test_unknown_id_is_a_no_op():
    service, store = make_service([seeded()])
    assert service.toggle(99, TODAY) is None
    assert service.update(99, text="x") is None
    assert store.saves == 0


def test_move_defaults_to_backwards_for_future_day():
    service, _ = make_service([seeded(date_created="2024-01-12")])
    moved = service.move(1, "2024-01-12")
    assert moved.date_created == "2024-01-11"
    assert service.move(1, "2024-01-11", 1).date_created == "2024-01-12"


def test_blank_edit_keeps_previous_text():
    service, _ = make_service([seeded()])
    kept = service.save_draft(Task(id=1, text="   ", date_created=TODAY))
    assert kept.text == "Stretch"
    renamed = service.save_draft(Task(id=1, text="Yoga", date_created=TODAY))
    assert renamed.text == "Yoga"
    assert service.save_draft(Task(id=42, text="Ghost", date_created=TODAY)) is None


def test_failed_save_keeps_memory_and_warns(caplog):
    service, store = make_service([seeded()], ok=False)
    with caplog.at_level(logging.WARNING):
        service.toggle(1, TODAY)
    assert TODAY in service.get(1).completions
    assert store.tasks[0].completions == frozenset()
    assert "not saved" in caplog.text


def test_listener_errors_do_not_break_updates():
    service, _ = make_service([seeded()])

    def boom(task):
        raise RuntimeError("listener failed")

    service.subscribe("after_update", boom)
    assert service.cycle_category(1).category == "work"
    service.unsubscribe("after_update", boom)
    assert service.cycle_type(1).type == "recurring"


def test_blank_update_keeps_previous_text():
    service, store = make_service()
    task = service.add("Buy milk")
    updated = service.update(task.id, text="   ", time="07:30")
    assert updated.text == "Buy milk"
    assert updated.time == "07:30"
    assert store.tasks[0].text == "Buy milk"


def test_blank_add_is_dropped():
    service, store = make_service()
    assert service.add("   ") is None
    assert service.list_all() == []
    assert store.saves == 0


def test_weekday_kept_only_for_weekly_tasks():
    service, _ = make_service()
    once = service.add("Dentist", weekly_day=4)
    assert once.weekly_day is None
    draft = replace(service.new_draft(), text="Laundry", weekly_day=2)
    assert service.save_draft(draft).weekly_day is None

    weekly = service.update(once.id, type="weekly")
    assert weekly.weekly_day == 3
    assert service.update(once.id, type="recurring").weekly_day is None
