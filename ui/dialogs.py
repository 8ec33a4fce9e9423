from typing import Callable, Optional

import flet as ft


def open_alert_dialog(page: ft.Page, *, title: str, content: ft.Control, actions: list[ft.Control], modal: bool = True):
    dlg = ft.AlertDialog(
        modal=modal,
        title=ft.Text(title),
        content=content,
        actions=actions,
        actions_alignment=ft.MainAxisAlignment.END,
    )
    page.open(dlg)
    return dlg


def close_alert_dialog(page: ft.Page, dlg: Optional[ft.AlertDialog]):
    if dlg is not None and dlg.open:
        page.close(dlg)


def confirm_dialog(
    page: ft.Page,
    *,
    title: str,
    message: str,
    confirm_label: str,
    on_confirm: Callable[[], None],
    icon=None,
):
    holder: dict = {}

    def _confirm(_):
        close_alert_dialog(page, holder.get("dlg"))
        on_confirm()

    holder["dlg"] = open_alert_dialog(
        page,
        title=title,
        content=ft.Text(message),
        actions=[
            ft.TextButton("Cancel", on_click=lambda e: close_alert_dialog(page, holder.get("dlg"))),
            ft.FilledButton(confirm_label, icon=icon, on_click=_confirm),
        ],
    )
    return holder["dlg"]


def toast(page: ft.Page, text: str, *, ok: bool = True):
    page.open(
        ft.SnackBar(
            ft.Text(text),
            bgcolor=None if ok else ft.Colors.ERROR_CONTAINER,
        )
    )
