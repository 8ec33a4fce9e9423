from __future__ import annotations

from typing import Callable, Optional

import flet as ft

from services.alarms import ActiveAlert


class AlertOverlay:
    """Full-screen blocking card shown while an alarm is firing."""

    def __init__(self, page: ft.Page, *, on_complete: Callable[[], None], on_dismiss: Callable[[], None]):
        self.page = page
        self._on_complete = on_complete
        self._on_dismiss = on_dismiss
        self._layer: Optional[ft.Control] = None

    @property
    def visible(self) -> bool:
        return self._layer is not None

    def show(self, alert: ActiveAlert):
        self.hide(update=False)
        card = ft.Container(
            width=360,
            padding=32,
            border_radius=36,
            bgcolor=ft.Colors.SURFACE,
            border=ft.border.all(4, ft.Colors.INDIGO_400),
            content=ft.Column(
                [
                    ft.Icon(ft.Icons.NOTIFICATIONS_ACTIVE, size=48, color=ft.Colors.INDIGO_400),
                    ft.Text(alert.task.text, size=26, weight=ft.FontWeight.W_900, text_align=ft.TextAlign.CENTER),
                    ft.Text(alert.hm, size=14, color=ft.Colors.BLUE_GREY_400),
                    ft.FilledButton(
                        "Complete task",
                        icon=ft.Icons.CHECK,
                        width=280,
                        on_click=lambda e: self._on_complete(),
                    ),
                    ft.TextButton("Dismiss", on_click=lambda e: self._on_dismiss()),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=16,
                tight=True,
            ),
        )
        backdrop = ft.Container(
            expand=True,
            bgcolor=ft.Colors.with_opacity(0.85, ft.Colors.BLACK),
            data="alarm_backdrop",
        )
        self._layer = ft.Stack(
            [backdrop, ft.Container(card, alignment=ft.alignment.center, expand=True)],
            expand=True,
            data="alarm_layer",
        )
        self.page.overlay.append(self._layer)
        self.page.update()

    def hide(self, *, update: bool = True):
        layer, self._layer = self._layer, None
        if layer is None:
            return
        try:
            self.page.overlay.remove(layer)
        except ValueError:
            pass
        if update:
            self.page.update()


class PageNotifier:
    """Posts alarm notifications as a snack bar when the user opted in."""

    def __init__(self, page: ft.Page, enabled: Callable[[], bool]):
        self.page = page
        self._enabled = enabled

    def permission_granted(self) -> bool:
        return bool(self._enabled())

    def notify(self, title: str, body: str) -> None:
        self.page.open(ft.SnackBar(ft.Text(f"{title} {body}")))
