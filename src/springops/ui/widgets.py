from __future__ import annotations

import inspect
import weakref
from contextlib import contextmanager
from typing import Callable

from nicegui import context, ui

from springops.core.forms import filter_options
from springops.core.models import status_color, status_label
from springops.core.roles import get_role_config


# ui.colors and ui.add_css only reach the client they are called for.
_themed_clients: weakref.WeakSet = weakref.WeakSet()

EMPTY_TABLE_TEXT = "No records found"


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


def apply_theme() -> None:
    """Global colours and the few CSS tweaks the dashboard tables need."""
    ui.colors(
        primary="#2563eb",  # blue-600
        secondary="#0ea5e9",  # sky-500
        positive="#16a34a",  # green-600
        negative="#dc2626",  # red-600
        warning="#f59e0b",  # amber-500
    )

    ui.add_css(
        """
        body { background: #f8fafc; }
        .so-container { max-width: 1280px; margin: 0 auto; padding: 16px; }
        .so-subtitle { color: #475569; }
        .so-header { border-bottom: 1px solid rgba(15, 23, 42, 0.08); }
        .so-kpi .q-card { border: 1px solid rgba(15, 23, 42, 0.08); }
        .so-table .q-table th, .so-table .q-table td { padding: 6px 8px; }
        .so-table td { white-space: normal !important; word-break: break-word; }
        """
    )


def ensure_theme() -> None:
    """Apply the theme once per connected client (requires a page context)."""
    client = context.client
    if client in _themed_clients:
        return
    apply_theme()
    _themed_clients.add(client)


@contextmanager
def page_container():
    ensure_theme()
    with ui.element("div").classes("so-container"):
        yield


def render_header(
    role: str | None,
    *,
    user_name: str = "",
    on_logout: Callable | None = None,
    bell: Callable[[], None] | None = None,
) -> None:
    """Top bar: role title, optional notification bell and logout."""
    ensure_theme()
    cfg = get_role_config(role) or {}
    with ui.header().classes("so-header bg-white text-slate-900"):
        with ui.row().classes("w-full items-center justify-between gap-4 px-4 py-2"):
            with ui.column().classes("gap-0"):
                ui.label(cfg.get("title") or "Spring Ops").classes("text-xl md:text-2xl font-semibold leading-none")
                if cfg.get("subtitle"):
                    ui.label(cfg["subtitle"]).classes("text-sm so-subtitle")
            with ui.row().classes("items-center gap-2"):
                if cfg.get("path"):
                    ui.button("Dashboard", on_click=lambda p=cfg["path"]: ui.navigate.to(f"{p}/dashboard")).props(
                        "dense no-caps flat color=primary"
                    )
                ui.button("Notifications", on_click=lambda: ui.navigate.to("/notifications")).props(
                    "dense no-caps flat color=primary"
                )
                if bell is not None:
                    bell()
                if user_name:
                    ui.label(user_name).classes("text-sm text-slate-600")
                if on_logout is not None:
                    ui.button("Logout", icon="logout", on_click=on_logout).props("dense no-caps outline color=negative")


def stat_cards(cards: list[tuple[str, object]]) -> None:
    with ui.row().classes("w-full gap-4 items-stretch so-kpi"):
        for label, value in cards:
            with ui.card().classes("p-4 min-w-[180px] flex-1"):
                ui.label(label).classes("text-sm text-slate-600")
                ui.label(str(value)).classes("text-2xl font-semibold")


def status_badge(status: str | None) -> None:
    ui.badge(status_label(status), color=status_color(status))


def records_table(
    columns: list[dict],
    rows: list[dict],
    *,
    row_key: str = "id",
    on_sort: Callable[[str], None] | None = None,
    actions: Callable[[dict], None] | None = None,
):
    """Bordered table with an explicit empty-state row.

    ``on_sort`` gets the column name when a sortable header is clicked; sorting
    itself is left to the backend.
    """
    if not rows:
        with ui.card().classes("w-full p-6 items-center"):
            ui.label(EMPTY_TABLE_TEXT).classes("text-slate-500")
        return None

    cols = [dict(c) for c in columns]
    if on_sort is not None:
        for c in cols:
            c.pop("sortable", None)
    if actions is not None:
        cols.append({"name": "_actions", "label": "", "field": "_actions"})

    tbl = ui.table(columns=cols, rows=list(rows), row_key=row_key).classes("w-full so-table").props(
        "dense flat bordered separator=cell wrap-cells"
    )
    if on_sort is not None:
        sortable = {c["name"] for c in columns if c.get("sortable")}

        async def _header_click(e) -> None:
            name = e.args if isinstance(e.args, str) else None
            if name in sortable:
                await _maybe_await(on_sort(name))

        tbl.add_slot(
            "header-cell",
            r"""
<q-th :props="props" @click="$parent.$emit('sort_column', props.col.name)" class="cursor-pointer">
  {{ props.col.label }}
</q-th>
""",
        )
        tbl.on("sort_column", _header_click)

    if actions is not None:
        tbl.add_slot(
            "body-cell-_actions",
            r"""
<q-td :props="props">
  <q-btn dense flat no-caps color="primary" label="Open" @click="$parent.$emit('open_row', props.row)" />
</q-td>
""",
        )
        async def _open_row(e) -> None:
            await _maybe_await(actions(e.args))

        tbl.on("open_row", _open_row)
    return tbl


def searchable_dropdown(
    options: list[dict],
    *,
    display_key: str,
    value_key: str,
    search_keys: list[str] | None = None,
    label: str = "",
    value=None,
    on_change: Callable | None = None,
    placeholder: str = "Search...",
):
    """Search box over several fields of each option, feeding a clearable select."""
    keys = search_keys or [display_key]

    def _labels(opts: list[dict]) -> dict:
        return {opt.get(value_key): str(opt.get(display_key) or "") for opt in opts}

    with ui.column().classes("w-full gap-1"):
        search = ui.input(placeholder=placeholder).props("outlined dense clearable").classes("w-full")
        sel = ui.select(_labels(options), value=value, label=label, clearable=True, on_change=on_change).props(
            "outlined dense"
        ).classes("w-full")

    def _filter() -> None:
        labels = _labels(filter_options(options, search.value, keys))
        # Keep the current choice listed even when the filter excludes it.
        if sel.value is not None and sel.value not in labels:
            labels = {**_labels([o for o in options if o.get(value_key) == sel.value]), **labels}
        sel.set_options(labels, value=sel.value)

    search.on_value_change(lambda _: _filter())
    return sel


def field_error(errors: dict[str, str], key: str) -> None:
    if errors.get(key):
        ui.label(errors[key]).classes("text-sm text-red-600")
