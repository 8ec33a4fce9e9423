# ui/pages/settings.py
import flet as ft

from storage.config import update_config


class SettingsPage:
    def __init__(self, app):
        self.app = app

        self.dark_switch = ft.Switch(label="Dark mode", on_change=self.toggle_theme)
        self.sound_switch = ft.Switch(label="Alarm sound", on_change=self.toggle_sound)
        self.notify_switch = ft.Switch(label="Notifications", on_change=self.toggle_notifications)
        self.refresh_log_btn = ft.TextButton(
            "Refresh log",
            icon=ft.Icons.ARTICLE,
            on_click=self.refresh_log,
        )

        self.log_view = ft.Text("", selectable=True, size=12)

        content = ft.Column(
            controls=[
                ft.Text("Settings", size=24, weight=ft.FontWeight.BOLD),
                self.dark_switch,
                self.sound_switch,
                self.notify_switch,
                ft.Column([
                    ft.Text("Log", size=18, weight=ft.FontWeight.W_600),
                    ft.Container(self.log_view, height=220, padding=10, bgcolor=ft.Colors.SURFACE_CONTAINER_HIGHEST),
                    self.refresh_log_btn,
                ], spacing=8),
            ],
            expand=True,
            spacing=16,
            scroll=ft.ScrollMode.AUTO,
        )

        self.view = ft.Container(content=content, expand=True, padding=20)

    def activate_from_menu(self):
        self.dark_switch.value = self.app.dark_mode
        self.sound_switch.value = self.app.config.sound_enabled
        self.notify_switch.value = self.app.config.notifications_enabled
        self.log_view.value = self.app.read_log()
        self.app.page.update()

    def toggle_theme(self, e):
        self.app.set_dark_mode(bool(e.control.value))

    def toggle_sound(self, e):
        self.app.config = update_config(sound_enabled=bool(e.control.value))

    def toggle_notifications(self, e):
        self.app.config = update_config(notifications_enabled=bool(e.control.value))

    def refresh_log(self, _):
        self.log_view.value = self.app.read_log()
        self.app.page.update()
