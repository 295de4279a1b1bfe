from __future__ import annotations

from nicegui import ui

from springops.core.formatting import format_time_ago
from springops.core.models import priority_color
from springops.services.notifications import NotificationFeed


def render_bell(feed: NotificationFeed, *, interval: float) -> None:
    """Header bell with an unread badge, polling ``feed`` every ``interval`` seconds."""

    @ui.refreshable
    def _menu_body() -> None:
        with ui.row().classes("w-full items-center justify-between px-3 py-2"):
            ui.label("Notifications").classes("font-semibold")
            with ui.row().classes("gap-1"):
                ui.button(icon="refresh", on_click=_refresh).props("dense flat round size=sm")
                if feed.notifications:
                    ui.button("Mark all read", on_click=_mark_all).props("dense flat no-caps size=sm")
        ui.separator()
        if not feed.notifications:
            ui.label("No new notifications").classes("px-3 py-4 text-slate-500")
            return
        for n in feed.notifications:
            with ui.row().classes("w-full items-start gap-2 px-3 py-2 hover:bg-slate-50 no-wrap"):
                ui.icon("circle", color=priority_color(n.priority), size="10px").classes("mt-2")
                with ui.column().classes("gap-0 grow cursor-pointer").on("click", lambda _, n=n: _open(n)):
                    ui.label(n.title or n.notification_type).classes("font-medium")
                    ui.label(n.message).classes("text-sm text-slate-600")
                    ui.label(format_time_ago(n.created_at)).classes("text-xs text-slate-400")
                ui.button(icon="close", on_click=lambda _, nid=n.id: _dismiss(nid)).props("dense flat round size=xs")

    def _render_badge() -> None:
        badge.set_text(str(feed.unread_count))
        badge.set_visibility(feed.unread_count > 0)

    async def _refresh() -> None:
        await feed.poll(force=True)
        _render_badge()
        _menu_body.refresh()

    async def _tick() -> None:
        await feed.poll()
        _render_badge()
        _menu_body.refresh()

    async def _open(n) -> None:
        outcome = await feed.open(n)
        _render_badge()
        _menu_body.refresh()
        if outcome.message:
            ui.notify(outcome.message, type="warning" if outcome.removed else "negative")
        if outcome.route:
            menu.close()
            ui.navigate.to(outcome.route)

    async def _dismiss(notification_id) -> None:
        if await feed.dismiss(notification_id):
            _render_badge()
            _menu_body.refresh()

    async def _mark_all() -> None:
        if await feed.mark_all_read():
            _render_badge()
            _menu_body.refresh()

    with ui.button(icon="notifications").props("flat round color=primary"):
        badge = ui.badge("0", color="negative").props("floating")
        badge.set_visibility(False)
        with ui.menu().classes("w-96") as menu:
            _menu_body()

    # Timers belong to this client and stop when it disconnects.
    ui.timer(0.1, _tick, once=True)
    ui.timer(interval, _tick)
