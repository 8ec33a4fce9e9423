"""Persisted task collection and theme flag.

Both live as JSON blobs in the ``kv_state`` table. Reads never raise: a
missing or corrupt blob means "nothing stored yet". Writes are last-write-wins.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from sqlmodel import Session

from core.logging_setup import get_logger
from models.state import StateRecord
from models.task import Task, TaskFormatError
from storage.db import get_session

TASKS_KEY = "tasks"
THEME_KEY = "theme"
THEMES = ("dark", "light")

logger = get_logger("store")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _serialise_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)


def _deserialise_tasks(payload: Optional[str]) -> List[Task]:
    if not payload:
        return []
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Stored task collection is not valid JSON; starting empty")
        return []
    if not isinstance(data, list):
        logger.warning("Stored task collection is not a list; starting empty")
        return []

    tasks: List[Task] = []
    seen: set[int] = set()
    for raw in data:
        try:
            task = Task.from_dict(raw)
        except TaskFormatError as exc:
            logger.warning("Skipping stored task: %s", exc)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id %s", task.id)
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks


class AppStateStore:
    """High level helper around the ``kv_state`` table."""

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    # ----- raw blobs -----
    def _read(self, key: str) -> Optional[str]:
        try:
            with self._session_factory() as session:
                row = session.get(StateRecord, key)
                return row.value if row else None
        except Exception:
            logger.exception("Reading %r from the state store failed", key)
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            with self._session_factory() as session:
                row = session.get(StateRecord, key)
                if row is None:
                    row = StateRecord(key=key, value=value)
                else:
                    row.value = value
                    row.updated_at = _utcnow()
                session.add(row)
                session.commit()
            return True
        except Exception:
            logger.exception("Writing %r to the state store failed", key)
            return False

    # ----- tasks -----
    def load_tasks(self) -> List[Task]:
        return _deserialise_tasks(self._read(TASKS_KEY))

    def save_tasks(self, tasks: Sequence[Task]) -> bool:
        return self._write(TASKS_KEY, _serialise_tasks(tasks))

    def export_tasks_json(self) -> str:
        return self._read(TASKS_KEY) or "[]"

    # ----- theme -----
    def load_theme(self) -> Optional[str]:
        raw = self._read(THEME_KEY)
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        return value if value in THEMES else None

    def save_theme(self, theme: str) -> bool:
        if theme not in THEMES:
            raise ValueError(f"Unsupported theme: {theme}")
        return self._write(THEME_KEY, json.dumps(theme))


__all__ = ["AppStateStore", "TASKS_KEY", "THEME_KEY", "THEMES"]
