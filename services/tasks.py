"""In-memory task collection with save-after-every-change persistence."""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from core.categories import DEFAULT_CATEGORY, DEFAULT_TASK_TYPE
from core.logging_setup import get_logger
from helpers.datetime_utils import today_iso, weekday_index
from models.task import Task, clean_text, new_task_id
from services import mutations


class TaskStore(Protocol):
    def load_tasks(self) -> List[Task]: ...

    def save_tasks(self, tasks: Sequence[Task]) -> bool: ...


class TaskService:
    EVENTS = ("after_create", "after_update")

    def __init__(
        self,
        store: TaskStore,
        *,
        today_fn: Callable[[], str] = today_iso,
        id_factory: Callable[[], int] = new_task_id,
    ):
        self.store = store
        self._today = today_fn
        self._new_id = id_factory
        self._listeners: Dict[str, set] = {event: set() for event in self.EVENTS}
        self.logger = get_logger("tasks")
        self._tasks: List[Task] = list(store.load_tasks())
        self.logger.info("Loaded %d tasks", len(self._tasks))

    # ---------- events ----------
    def subscribe(self, event: str, callback):
        if event not in self._listeners:
            raise ValueError(f"Unsupported event: {event}")
        self._listeners[event].add(callback)

    def unsubscribe(self, event: str, callback):
        if event not in self._listeners:
            return
        self._listeners[event].discard(callback)

    def _emit(self, event: str, task: Task):
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(task)
            except Exception:
                self.logger.exception("Listener for %s failed", event)

    # ---------- reads ----------
    def list_all(self) -> List[Task]:
        return list(self._tasks)

    def get(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ---------- persistence ----------
    def _persist(self) -> None:
        if not self.store.save_tasks(self._tasks):
            self.logger.warning("Task collection was not saved; keeping it in memory")

    def _replace(self, updated: Task) -> Task:
        self._tasks = [updated if t.id == updated.id else t for t in self._tasks]
        self._persist()
        self._emit("after_update", updated)
        return updated

    def _apply(self, task_id: int, fn: Callable[[Task], Task]) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            self.logger.debug("Task %s not found", task_id)
            return None
        return self._replace(fn(task))

    # ---------- drafts ----------
    def new_draft(self, day: Optional[str] = None) -> Task:
        """A blank task bound to ``day``; negative id until it is saved."""
        current = self._today()
        return Task(
            id=-self._new_id(),
            text="",
            type=DEFAULT_TASK_TYPE,
            category=DEFAULT_CATEGORY,
            date_created=day or current,
        )

    def save_draft(self, draft: Task) -> Optional[Task]:
        """Admit a draft (or store an edited task). Empty text discards a draft."""

        text = clean_text(draft.text)
        if draft.is_draft:
            if not text:
                self.logger.debug("Discarding empty draft %s", draft.id)
                return None
            task_id = self._new_id()
            while self.get(task_id) is not None:
                task_id += 1
            task = replace(draft, id=task_id, text=text)
            if task.type != "weekly":
                task = replace(task, weekly_day=None)
            elif task.weekly_day is None:
                task = replace(task, weekly_day=weekday_index(self._today()))
            self._tasks = [task] + self._tasks
            self._persist()
            self.logger.info("Task %s created (%s)", task.id, task.type)
            self._emit("after_create", task)
            return task

        if self.get(draft.id) is None:
            return None
        if not text:
            # an edit that blanks the text keeps the previous title
            return self.get(draft.id)
        return self._replace(replace(draft, text=text))

    def add(
        self,
        text: str,
        *,
        type: str = DEFAULT_TASK_TYPE,
        category: str = DEFAULT_CATEGORY,
        day: Optional[str] = None,
        weekly_day: Optional[int] = None,
        time: Optional[str] = None,
        notes: str = "",
    ) -> Optional[Task]:
        draft = mutations.edit_fields(
            self.new_draft(day),
            today=self._today(),
            type=type,
            category=category,
            weekly_day=weekly_day,
            time=time,
            notes=notes,
        )
        # blank text is left to save_draft, which drops the draft
        return self.save_draft(replace(draft, text=text))

    # ---------- mutations ----------
    def toggle(self, task_id: int, day: str) -> Optional[Task]:
        return self._apply(task_id, lambda t: mutations.toggle_completion(t, day))

    def hide(self, task_id: int, day: str) -> Optional[Task]:
        return self._apply(task_id, lambda t: mutations.hide_for_date(t, day))

    def move(self, task_id: int, from_date: str, direction: Optional[int] = None) -> Optional[Task]:
        step = direction or mutations.default_move_direction(from_date, self._today())
        return self._apply(task_id, lambda t: mutations.move_occurrence(t, from_date, step))

    def update(self, task_id: int, **patch) -> Optional[Task]:
        if "text" in patch and not clean_text(patch["text"]):
            # an edit that blanks the text keeps the previous title
            patch.pop("text")
        today = self._today()
        return self._apply(task_id, lambda t: mutations.edit_fields(t, today=today, **patch))

    def cycle_category(self, task_id: int) -> Optional[Task]:
        return self._apply(task_id, mutations.cycle_category)

    def cycle_type(self, task_id: int) -> Optional[Task]:
        today = self._today()
        return self._apply(task_id, lambda t: mutations.cycle_type(t, today=today))


__all__ = ["TaskService", "TaskStore"]
