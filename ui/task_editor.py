# ui/task_editor.py
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional

import flet as ft

from core.categories import DAYS, category_options, task_type_options
from core.settings import TASKS
from helpers.datetime_utils import parse_time_input, weekday_index
from helpers.time_extract import extract_time_from_text
from models.task import Task
from services import mutations
from ui.dialogs import close_alert_dialog, open_alert_dialog, toast


class TaskEditor:
    """Modal editor for a draft (negative id) or an existing task."""

    def __init__(self, app, task: Task, on_saved: Callable[[Optional[Task]], None]):
        self.app = app
        self.task = task
        self.on_saved = on_saved

        self.text_tf = ft.TextField(
            label="Task",
            value=task.text,
            autofocus=True,
            max_length=TASKS.max_text_length,
            hint_text="e.g. Gym 7pm",
        )
        self.type_dd = ft.Dropdown(
            label="Repeat",
            value=task.type,
            width=160,
            options=[ft.dropdown.Option(k, v) for k, v in task_type_options().items()],
            on_change=self._on_type_change,
        )
        self.category_dd = ft.Dropdown(
            label="Category",
            value=task.category,
            width=160,
            options=[ft.dropdown.Option(k, v) for k, v in category_options().items()],
        )
        self.weekday_dd = ft.Dropdown(
            label="Day",
            value=str(task.weekly_day if task.weekly_day is not None else weekday_index(task.date_created)),
            width=160,
            options=[ft.dropdown.Option(str(i), name) for i, name in enumerate(DAYS)],
            visible=task.type == "weekly",
        )
        self.time_tf = ft.TextField(label="Time", hint_text="HH:MM", value=task.time or "", width=120)
        self.notes_tf = ft.TextField(label="Notes", value=task.notes, multiline=True, min_lines=2, max_lines=5)
        self._dlg: Optional[ft.AlertDialog] = None

    def open(self):
        is_new = self.task.is_draft
        content = ft.Container(
            width=440,
            content=ft.Column(
                [
                    self.text_tf,
                    ft.Row([self.type_dd, self.category_dd], spacing=12, wrap=True),
                    ft.Row([self.weekday_dd, self.time_tf], spacing=12, wrap=True),
                    self.notes_tf,
                ],
                spacing=12,
                tight=True,
            ),
        )
        actions = [
            ft.TextButton("Cancel", on_click=lambda e: close_alert_dialog(self.app.page, self._dlg)),
            ft.FilledButton("Add" if is_new else "Save", icon=ft.Icons.SAVE, on_click=self._on_save),
        ]
        self._dlg = open_alert_dialog(self.app.page, title="New task" if is_new else "Edit task", content=content, actions=actions)

    def _on_type_change(self, _):
        self.weekday_dd.visible = self.type_dd.value == "weekly"
        self.app.page.update()

    def _collect(self) -> Task:
        text = (self.text_tf.value or "").strip()
        raw_time = (self.time_tf.value or "").strip()
        time_value = parse_time_input(raw_time) if raw_time else None
        if raw_time and time_value is None:
            raise ValueError("Time must look like 14:30")

        # no explicit time: try to read one out of the text
        if time_value is None and text:
            parsed = extract_time_from_text(text)
            if parsed.time:
                time_value = parsed.time
                text = parsed.text or text

        weekly_day = int(self.weekday_dd.value) if self.type_dd.value == "weekly" else None
        edited = mutations.edit_fields(
            self.task,
            type=self.type_dd.value,
            category=self.category_dd.value,
            weekly_day=weekly_day,
            time=time_value,
            notes=self.notes_tf.value or "",
        )
        # text is checked by save_draft so an empty draft is simply dropped
        return replace(edited, text=text)

    def _on_save(self, _):
        try:
            task = self._collect()
        except ValueError as exc:
            toast(self.app.page, str(exc), ok=False)
            return
        close_alert_dialog(self.app.page, self._dlg)
        saved = self.app.tasks.save_draft(task)
        self.on_saved(saved)
