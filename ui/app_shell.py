# ui/app_shell.py
from __future__ import annotations

import asyncio

import flet as ft

from core.logging_setup import get_logger
from core.settings import ALARMS, BACKUP, LOG_PATH, UI
from services.alarms import ActiveAlert, AlarmScheduler
from services.capabilities import NullStayAwake, SwitchableAlertOutput, ToneAlertOutput
from services.tasks import TaskService
from services.ticker import PrecisionTicker
from storage.backup import write_daily_snapshot
from storage.config import load_config, update_config
from storage.store import AppStateStore

# страницы
from .alert import AlertOverlay, PageNotifier
from .pages.history import HistoryPage
from .pages.settings import SettingsPage
from .pages.tasks import TasksPage

NAV_VIEWS = ("day", "week", "history", "settings")
ALARM_POLL_SEC = 0.2


class AppShell:
    def __init__(self, page: ft.Page, *, store: AppStateStore | None = None):
        self.page = page
        self.logger = get_logger("app")

        # базовые настройки окна
        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.vertical_alignment = ft.MainAxisAlignment.START

        # --- состояние ---
        self.store = store or AppStateStore()
        self.config = load_config()
        self.tasks = TaskService(self.store)
        self.dark_mode = self.store.load_theme() == "dark"

        # --- будильник ---
        self.alert_overlay = AlertOverlay(page, on_complete=self.complete_alert, on_dismiss=self.dismiss_alert)
        self.scheduler = AlarmScheduler(
            output=SwitchableAlertOutput(ToneAlertOutput(), lambda: self.config.sound_enabled),
            notifier=PageNotifier(page, lambda: self.config.notifications_enabled),
            stay_awake=NullStayAwake(),
            ticker=PrecisionTicker(ALARMS.tick_interval_ms),
            on_fire=self._show_alert,
            on_dismiss=self.alert_overlay.hide,
        )
        self._alarm_task: asyncio.Task | None = None
        self._closed = False

        # --- страницы ---
        self._tasks_page = TasksPage(self)
        self._history = HistoryPage(self)
        self._settings = SettingsPage(self)

        # контейнер контента
        self.content = ft.Container(expand=True)

        # левое меню
        self.nav = ft.NavigationRail(
            selected_index=NAV_VIEWS.index(self.config.last_view),
            label_type=ft.NavigationRailLabelType.ALL,
            min_width=90,
            group_alignment=-0.9,
            on_change=self.on_nav_change,
            destinations=[
                ft.NavigationRailDestination(
                    icon=ft.Icons.HOME_OUTLINED,
                    selected_icon=ft.Icons.HOME,
                    label="Day",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.CALENDAR_VIEW_WEEK_OUTLINED,
                    selected_icon=ft.Icons.CALENDAR_VIEW_WEEK,
                    label="Week",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.BAR_CHART_OUTLINED,
                    selected_icon=ft.Icons.BAR_CHART,
                    label="History",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.SETTINGS_OUTLINED,
                    selected_icon=ft.Icons.SETTINGS,
                    label="Settings",
                ),
            ],
        )

        # корневой лэйаут
        self.root = ft.Row(
            controls=[
                ft.Container(self.nav, width=88),
                ft.VerticalDivider(width=1),
                self.content,
            ],
            expand=True,
            spacing=0,
        )

        self.page.on_disconnect = lambda e: self.close()
        self.page.window.on_event = self._on_window_event

    # ---------- монтаж ----------
    def mount(self):
        self._apply_theme()
        self.page.controls.clear()
        self.page.add(self.root)
        self._backup()
        self._show(self.config.last_view)
        self.scheduler.arm()
        self._alarm_task = self.page.run_task(self._alarm_loop)

    def _backup(self):
        if not BACKUP.enabled:
            return
        try:
            created = write_daily_snapshot(self.store.export_tasks_json(), BACKUP.directory, keep_days=BACKUP.keep_days)
            if created:
                self.logger.info("Snapshot written to %s", created)
        except OSError:
            self.logger.exception("Daily snapshot failed")

    # ---------- переключение вкладок ----------
    def on_nav_change(self, e: ft.ControlEvent):
        view = NAV_VIEWS[int(e.control.selected_index)]
        self._show(view)
        self.config = update_config(last_view=view) if view != "settings" else self.config

    def _show(self, view: str):
        if view in ("day", "week"):
            self.content.content = self._tasks_page.view
            self._tasks_page.activate_from_menu(view)
        elif view == "history":
            self.content.content = self._history.view
            self._history.activate_from_menu()
        else:
            self.content.content = self._settings.view
            self._settings.activate_from_menu()
        self.page.update()

    def refresh_current(self):
        current = self.content.content
        if current is self._tasks_page.view:
            self._tasks_page.load()
        elif current is self._history.view:
            self._history.load()

    # ---------- тема ----------
    def _apply_theme(self):
        self.page.theme_mode = ft.ThemeMode.DARK if self.dark_mode else ft.ThemeMode.LIGHT

    def set_dark_mode(self, enabled: bool):
        self.dark_mode = enabled
        self.store.save_theme("dark" if enabled else "light")
        self._apply_theme()
        self.page.update()

    # ---------- будильник ----------
    async def _alarm_loop(self):
        # ticks arrive from the ticker thread; due-checks run here, one at a time
        while not self._closed:
            await asyncio.sleep(ALARM_POLL_SEC)
            try:
                self.scheduler.pump(self.tasks.list_all)
            except Exception:
                self.logger.exception("Alarm loop iteration failed")

    def _show_alert(self, alert: ActiveAlert):
        self.alert_overlay.show(alert)

    def dismiss_alert(self):
        self.scheduler.dismiss()

    def complete_alert(self):
        self.scheduler.complete_active(self.tasks.toggle, self.tasks.get)
        self.refresh_current()

    # ---------- завершение ----------
    def _on_window_event(self, e):
        if getattr(e, "data", None) == "close":
            self.close()

    def close(self):
        if self._closed:
            return
        self._closed = True
        if self._alarm_task is not None and hasattr(self._alarm_task, "cancel"):
            self._alarm_task.cancel()
        self.scheduler.shutdown()

    def read_log(self, lines: int = 100) -> str:
        try:
            with open(LOG_PATH, "r", encoding="utf-8") as fh:
                content = fh.readlines()
        except FileNotFoundError:
            return "No log yet."
        return "\n".join(line.rstrip("\n") for line in content[-lines:])
