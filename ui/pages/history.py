# ui/pages/history.py
from __future__ import annotations

from typing import Optional

import flet as ft

from core.settings import UI
from helpers.datetime_utils import format_day_label, parse_iso, today_iso
from services.history import HeatCell, summarize
from services.views import compose_view


class HistoryPage:
    def __init__(self, app):
        self.app = app
        self.drilldown_date: Optional[str] = None

        self.level_text = ft.Text("", size=20, weight=ft.FontWeight.BOLD)
        self.xp_text = ft.Text("", size=12, color=UI.theme.text_subtle)
        self.level_bar = ft.ProgressBar(value=0, bar_height=8, color=UI.theme.accent)
        self.streak_text = ft.Text("", size=20, weight=ft.FontWeight.BOLD)
        self.total_text = ft.Text("", size=20, weight=ft.FontWeight.BOLD)

        self.heatmap_grid = ft.GridView(runs_count=7, max_extent=44, spacing=6, run_spacing=6, height=230)
        self.drill_title = ft.Text("", size=16, weight=ft.FontWeight.W_600)
        self.drill_list = ft.ListView(expand=True, spacing=6)

        stats = ft.Row(
            [
                self._stat_card(ft.Icons.EMOJI_EVENTS, "Level", ft.Column([self.level_text, self.level_bar, self.xp_text], spacing=4)),
                self._stat_card(ft.Icons.LOCAL_FIRE_DEPARTMENT, "Streak", self.streak_text),
                self._stat_card(ft.Icons.BOLT, "Total wins", self.total_text),
            ],
            spacing=12,
            wrap=True,
        )

        self.view = ft.Container(
            content=ft.Column(
                [
                    ft.Text("History", size=24, weight=ft.FontWeight.BOLD),
                    stats,
                    ft.Text("Last 28 days", size=16, weight=ft.FontWeight.W_600),
                    self.heatmap_grid,
                    self.drill_title,
                    ft.Container(self.drill_list, expand=True),
                ],
                spacing=16,
                expand=True,
                scroll=ft.ScrollMode.AUTO,
            ),
            expand=True,
            padding=20,
        )

    def activate_from_menu(self):
        self.drilldown_date = None
        self.load()

    # ---------- Data ----------
    def load(self):
        today = today_iso()
        tasks = self.app.tasks.list_all()
        summary = summarize(tasks, today=today)

        level = summary.level
        self.level_text.value = f"Level {level.level}"
        self.level_bar.value = level.progress / 100
        self.xp_text.value = f"{level.xp} / {level.next_level_xp} XP"
        self.streak_text.value = f"{summary.streak} day{'s' if summary.streak != 1 else ''}"
        self.total_text.value = str(summary.total_completions)

        self.heatmap_grid.controls = [self._heat_cell(cell) for cell in summary.heatmap]
        self._render_drilldown(tasks, today)
        self.app.page.update()

    def _render_drilldown(self, tasks, today: str):
        self.drill_list.controls.clear()
        if not self.drilldown_date:
            self.drill_title.value = "Pick a day to see its tasks"
            return
        result = compose_view(tasks, "history", self.drilldown_date, today=today)
        self.drill_title.value = f"{format_day_label(result.anchor, today=today)} · {result.percentage}%"
        for task in result.tasks:
            done = result.anchor in task.completions
            self.drill_list.controls.append(
                ft.Row(
                    [
                        ft.Icon(
                            ft.Icons.CHECK_CIRCLE if done else ft.Icons.RADIO_BUTTON_UNCHECKED,
                            color=ft.Colors.GREEN_400 if done else ft.Colors.BLUE_GREY_300,
                            size=18,
                        ),
                        ft.Text(task.text, expand=True),
                        ft.Text(task.time or "", size=12, color=UI.theme.text_subtle),
                    ],
                    spacing=8,
                )
            )
        if not result.tasks:
            self.drill_list.controls.append(ft.Text("No tasks that day", color=ft.Colors.BLUE_GREY_400))

    # ---------- Helpers ----------
    def _heat_cell(self, cell: HeatCell) -> ft.Control:
        selected = cell.day == self.drilldown_date
        return ft.Container(
            content=ft.Text(str(parse_iso(cell.day).day), size=11, color=ft.Colors.WHITE if cell.level >= 3 else None),
            alignment=ft.alignment.center,
            bgcolor=UI.theme.heat_levels[cell.level],
            border_radius=8,
            border=ft.border.all(2, UI.theme.accent) if selected else None,
            tooltip=f"{cell.day}: {cell.completed}/{cell.total} ({cell.percentage}%)",
            on_click=lambda e, day=cell.day: self._drill(day),
        )

    def _drill(self, day: str):
        self.drilldown_date = None if day == self.drilldown_date else day
        self.load()

    def _stat_card(self, icon, label: str, body: ft.Control) -> ft.Control:
        return ft.Card(
            content=ft.Container(
                width=200,
                padding=16,
                content=ft.Column(
                    [ft.Row([ft.Icon(icon, color=UI.theme.accent), ft.Text(label, color=UI.theme.text_subtle)], spacing=6), body],
                    spacing=8,
                ),
            )
        )
