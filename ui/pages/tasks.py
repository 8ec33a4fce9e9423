# ui/pages/tasks.py
from __future__ import annotations

from typing import Optional

import flet as ft

from core.categories import DAYS, category_bgcolor, category_color, category_label, task_type_label
from core.settings import UI
from helpers.datetime_utils import add_days, format_day_label, parse_iso, today_iso
from models.task import Task
from services.mutations import default_move_direction
from services.views import ViewContext, ViewResult, compose_for_context, effective_sort_date, is_celebration, pick_quote
from ui.dialogs import confirm_dialog, toast
from ui.task_editor import TaskEditor


class TasksPage:
    """Day and rolling-week task lists with the progress header."""

    def __init__(self, app, *, view: str = "day"):
        self.app = app
        self.ctx = ViewContext(view=view, selected_date=today_iso())
        self._prev_percentage = 0
        self._last: Optional[ViewResult] = None

        self.title = ft.Text("", size=24, weight=ft.FontWeight.BOLD)
        self.subtitle = ft.Text("", size=12, color=UI.theme.text_subtle)
        self.progress = ft.ProgressBar(value=0, bar_height=8, color=UI.theme.accent)
        self.percentage_text = ft.Text("0%", weight=ft.FontWeight.W_600)
        self.quote = ft.Text("", italic=True, size=12, color=UI.theme.text_subtle)

        self.prev_btn = ft.IconButton(icon=ft.Icons.CHEVRON_LEFT, tooltip="Previous day", on_click=lambda e: self._shift(-1))
        self.next_btn = ft.IconButton(icon=ft.Icons.CHEVRON_RIGHT, tooltip="Next day", on_click=lambda e: self._shift(1))
        self.today_btn = ft.TextButton("Today", on_click=lambda e: self.show_day(today_iso()))
        self.add_btn = ft.FilledButton("Add task", icon=ft.Icons.ADD, on_click=self._on_add)

        self.list_view = ft.ListView(expand=True, spacing=10)

        header = ft.Column(
            [
                ft.Row(
                    [
                        ft.Column([self.title, self.subtitle], spacing=2, expand=True),
                        ft.Row([self.prev_btn, self.today_btn, self.next_btn], spacing=0),
                    ],
                    vertical_alignment=ft.CrossAxisAlignment.CENTER,
                ),
                ft.Row([ft.Container(self.progress, expand=True), self.percentage_text], spacing=12),
                self.quote,
            ],
            spacing=8,
        )

        self.view = ft.Container(
            content=ft.Column(
                [header, ft.Row([self.add_btn]), ft.Container(self.list_view, expand=True)],
                spacing=16,
                expand=True,
            ),
            expand=True,
            padding=20,
        )

    # --- вызов из меню ---
    def activate_from_menu(self, view: Optional[str] = None):
        if view is not None:
            # switching views resets the cursor to today
            self.ctx = ViewContext(view=view, selected_date=today_iso())
        self.load()

    def show_day(self, day: str):
        self.ctx = ViewContext(view="day", selected_date=day)
        self.load()

    def _shift(self, days: int):
        self.show_day(add_days(self.ctx.effective_date(), days))

    # ---------- Data ----------
    def load(self):
        today = today_iso()
        result = compose_for_context(self.app.tasks.list_all(), self.ctx, today=today)
        self._last = result
        self._render_header(result, today)
        self._render_list(result, today)
        if is_celebration(self._prev_percentage, result.percentage, result.total):
            toast(self.app.page, "All done for today!")
        self._prev_percentage = result.percentage
        self.app.page.update()

    # ---------- Rendering ----------
    def _render_header(self, result: ViewResult, today: str):
        is_week = self.ctx.view == "week"
        if is_week:
            self.title.value = "This week"
            end = add_days(result.anchor, 6)
            self.subtitle.value = f"{parse_iso(result.anchor):%b %d} – {parse_iso(end):%b %d}"
        else:
            self.title.value = format_day_label(result.anchor, today=today)
            self.subtitle.value = parse_iso(result.anchor).strftime("%A, %d %B %Y")
        for btn in (self.prev_btn, self.next_btn, self.today_btn):
            btn.visible = not is_week

        self.progress.value = result.percentage / 100
        self.percentage_text.value = f"{result.percentage}%"
        self.quote.value = pick_quote(result.percentage, result.total, today)

    def _render_list(self, result: ViewResult, today: str):
        self.list_view.controls.clear()
        if not result.tasks:
            self.list_view.controls.append(self._empty_state())
            return
        last_day = None
        for task in result.tasks:
            if self.ctx.view == "week":
                sort_day = effective_sort_date(task, result.anchor)
                if sort_day != last_day:
                    self.list_view.controls.append(
                        ft.Text(format_day_label(sort_day, today=today), weight=ft.FontWeight.W_600)
                    )
                    last_day = sort_day
            self.list_view.controls.append(self._task_row(task, result.anchor, today))

    def _empty_state(self) -> ft.Control:
        return ft.Container(
            padding=ft.padding.symmetric(vertical=8, horizontal=12),
            content=ft.Row(
                [
                    ft.Icon(ft.Icons.INFO_OUTLINE, color=ft.Colors.BLUE_GREY_300),
                    ft.Text("Nothing planned here yet", color=ft.Colors.BLUE_GREY_400),
                ],
                spacing=8,
            ),
        )

    def _task_row(self, task: Task, context_date: str, today: str) -> ft.Control:
        done = task.is_done_on(context_date)
        direction = default_move_direction(context_date, today)

        checkbox = ft.Checkbox(
            value=done,
            on_change=lambda e, tid=task.id: self._on_toggle(tid, context_date),
            semantics_label=f"Mark {task.text} done",
        )

        title = ft.Text(
            task.text,
            size=14,
            weight=ft.FontWeight.W_600,
            max_lines=1,
            overflow=ft.TextOverflow.ELLIPSIS,
            color=UI.theme.done_text if done else None,
            style=ft.TextStyle(decoration=ft.TextDecoration.LINE_THROUGH if done else None),
        )

        meta = [
            ft.TextButton(
                category_label(task.category),
                style=ft.ButtonStyle(color=category_color(task.category), bgcolor=category_bgcolor(task.category)),
                on_click=lambda e, tid=task.id: self._mutate(self.app.tasks.cycle_category, tid),
                tooltip="Change category",
            ),
            ft.TextButton(
                task_type_label(task.type)
                + (f" · {DAYS[task.weekly_day][:3]}" if task.type == "weekly" and task.weekly_day is not None else ""),
                on_click=lambda e, tid=task.id: self._mutate(self.app.tasks.cycle_type, tid),
                tooltip="Change repeat",
            ),
        ]
        if task.time:
            meta.insert(0, ft.Row([ft.Icon(ft.Icons.SCHEDULE, size=14), ft.Text(task.time, size=12)], spacing=4))
        if task.type == "one-time" and task.date_created < context_date:
            meta.append(ft.Text("overdue", size=12, color=ft.Colors.RED_400))

        actions = ft.Row(
            [
                ft.IconButton(
                    icon=ft.Icons.ARROW_CIRCLE_RIGHT_OUTLINED if direction > 0 else ft.Icons.ARROW_CIRCLE_LEFT_OUTLINED,
                    tooltip="Move to tomorrow" if direction > 0 else "Move to the previous day",
                    on_click=lambda e, t=task: self._confirm_move(t, context_date, direction),
                ),
                ft.IconButton(
                    icon=ft.Icons.EDIT_OUTLINED,
                    tooltip="Edit",
                    on_click=lambda e, t=task: TaskEditor(self.app, t, lambda _saved: self.load()).open(),
                ),
                ft.IconButton(
                    icon=ft.Icons.DELETE_OUTLINE,
                    tooltip="Delete for this day",
                    on_click=lambda e, t=task: self._confirm_delete(t, context_date),
                ),
            ],
            spacing=0,
        )

        body = ft.Column([title, ft.Row(meta, spacing=6, wrap=True)], spacing=2, expand=True)
        if task.notes:
            body.controls.append(ft.Text(task.notes, size=12, color=UI.theme.text_subtle, max_lines=2))

        return ft.Container(
            content=ft.Row([checkbox, body, actions], vertical_alignment=ft.CrossAxisAlignment.CENTER),
            padding=ft.padding.symmetric(horizontal=12, vertical=8),
            border_radius=12,
            border=ft.border.all(1, ft.Colors.with_opacity(0.08, ft.Colors.ON_SURFACE)),
            opacity=0.6 if done else 1.0,
        )

    # ---------- Actions ----------
    def _mutate(self, fn, *args):
        fn(*args)
        self.load()

    def _on_toggle(self, task_id: int, day: str):
        self._mutate(self.app.tasks.toggle, task_id, day)

    def _on_add(self, _):
        draft = self.app.tasks.new_draft(self.ctx.effective_date())
        TaskEditor(self.app, draft, lambda _saved: self.load()).open()

    def _confirm_delete(self, task: Task, day: str):
        confirm_dialog(
            self.app.page,
            title="Delete task?",
            message=f"“{task.text}” will be removed from {format_day_label(day)}.",
            confirm_label="Delete",
            icon=ft.Icons.DELETE_OUTLINE,
            on_confirm=lambda: self._mutate(self.app.tasks.hide, task.id, day),
        )

    def _confirm_move(self, task: Task, day: str, direction: int):
        target = format_day_label(add_days(day, direction))
        confirm_dialog(
            self.app.page,
            title="Move task?",
            message=f"Move “{task.text}” to {target}?",
            confirm_label="Move",
            icon=ft.Icons.ARROW_FORWARD if direction > 0 else ft.Icons.ARROW_BACK,
            on_confirm=lambda: self._mutate(self.app.tasks.move, task.id, day, direction),
        )
