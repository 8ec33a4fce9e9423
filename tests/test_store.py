import json
import logging

import pytest
from sqlmodel import Session, SQLModel, create_engine

from models import StateRecord, Task
from storage.store import TASKS_KEY, AppStateStore


@pytest.fixture
def store(tmp_path):
    engine = create_engine(f"sqlite:///{(tmp_path / 'state.db').as_posix()}")
    SQLModel.metadata.create_all(engine)
    return AppStateStore(lambda: Session(engine))


def put_raw(store, value):
    with store._session_factory() as session:
        session.add(StateRecord(key=TASKS_KEY, value=value))
        session.commit()


def test_empty_store_loads_nothing(store):
    assert store.load_tasks() == []
    assert store.export_tasks_json() == "[]"
    assert store.load_theme() is None


def test_tasks_round_trip(store):
    tasks = [
        Task(id=2, text="Gym", type="weekly", category="health", date_created="2024-01-01",
             weekly_day=1, time="18:00", completions=frozenset({"2024-01-08"})),
        Task(id=1, text="Read", type="recurring", date_created="2024-01-02",
             hidden_dates=frozenset({"2024-01-03"}), notes="chapter 4"),
    ]
    assert store.save_tasks(tasks)
    assert store.load_tasks() == tasks

    tasks = tasks[:1]
    assert store.save_tasks(tasks)
    assert store.load_tasks() == tasks
    assert json.loads(store.export_tasks_json())[0]["weeklyDay"] == 1


def test_corrupt_blob_loads_as_empty(store, caplog):
    put_raw(store, "{not json")
    with caplog.at_level(logging.WARNING):
        assert store.load_tasks() == []
    assert "not valid JSON" in caplog.text


def test_bad_and_duplicate_records_are_skipped(store):
    payload = [
        {"id": 1, "text": "ok", "type": "one-time", "dateCreated": "2024-01-01"},
        {"id": 2, "text": "bad", "type": "monthly", "dateCreated": "2024-01-01"},
        {"id": 1, "text": "dup", "type": "one-time", "dateCreated": "2024-01-02"},
        "garbage",
    ]
    put_raw(store, json.dumps(payload))
    loaded = store.load_tasks()
    assert [(t.id, t.text) for t in loaded] == [(1, "ok")]


def test_theme_flag(store):
    assert store.save_theme("dark")
    assert store.load_theme() == "dark"
    assert store.save_theme("light")
    assert store.load_theme() == "light"
    with pytest.raises(ValueError):
        store.save_theme("blue")


def test_broken_backend_never_raises():
    def broken():
        raise RuntimeError("database is locked")

    store = AppStateStore(broken)
    assert store.load_tasks() == []
    assert store.save_tasks([Task(id=1, text="x", date_created="2024-01-01")]) is False
