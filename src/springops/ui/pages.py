from __future__ import annotations

from typing import Callable

from nicegui import ui

from springops.api import Backend
from springops.api.session import browser_session
from springops.core.forms import FormValidationError
from springops.core.formatting import format_datetime, format_downtime, format_qty, format_time_ago
from springops.core.models import (
    MO_PRIORITIES,
    MO_STATUSES,
    OUTSOURCING_STATUSES,
    PROCESS_STATUSES,
    ManufacturingOrder,
    Notification,
    UserSession,
    priority_label,
    status_label,
)
from springops.core.roles import ROLE_HIERARCHY, get_role_config, role_home
from springops.data.export_io import export_filename, to_csv_bytes, to_xlsx_bytes
from springops.services import workflows
from springops.services.boards import OutsourcingBoard, StatsPanel, TableQuery, TableTab
from springops.services.notifications import NotificationFeed
from springops.services.workflows import FinalInspectionFlow
from springops.settings import Settings
from springops.ui import dialogs
from springops.ui.bell import render_bell
from springops.ui.gate import backend_for, redirect_if_signed_out, require_role
from springops.ui.widgets import page_container, records_table, render_header, stat_cards, status_badge

OUTSOURCING_TITLE = "Outsourcing Management"
OUTSOURCING_SUBTITLE = "Track items sent to external vendors for processing"
OUTSOURCING_SEARCH = "Search by request ID or vendor..."


def _col(name: str, label: str, *, sortable: bool = False, field: str | None = None) -> dict:
    return {"name": name, "label": label, "field": field or name, "sortable": sortable, "align": "left"}


MO_COLUMNS = [
    _col("mo_id", "MO ID", sortable=True),
    _col("product_code", "Product", sortable=True),
    _col("quantity", "Qty", sortable=True),
    _col("priority_display", "Priority"),
    _col("status_display", "Status"),
    _col("planned_end_date", "Due", sortable=True),
]
PO_COLUMNS = [
    _col("po_id", "PO ID", sortable=True),
    _col("vendor_name", "Vendor"),
    _col("material_name", "Material"),
    _col("quantity_ordered", "Qty"),
    _col("status_display", "Status"),
    _col("expected_date", "Expected", sortable=True),
]
TRACKING_COLUMNS = [
    _col("mo_id", "MO ID"),
    _col("batch_id", "Batch"),
    _col("process_name", "Process"),
    _col("status_display", "Status"),
    _col("supervisor_name", "Supervisor"),
    _col("started", "Started"),
]
WORK_CENTER_COLUMNS = [
    _col("work_center_name", "Work Center"),
    _col("default_supervisor_name", "Default Supervisor"),
    _col("backup_supervisor_name", "Backup Supervisor"),
    _col("check_in_deadline", "Check-in Deadline"),
]
STOCK_COLUMNS = [
    _col("product_code", "Product", sortable=True),
    _col("batch_id", "Batch"),
    _col("mo_id", "MO"),
    _col("quantity_in_stock", "In Stock", sortable=True),
    _col("location_in_store", "Location"),
]
PENDING_DISPATCH_COLUMNS = [
    _col("mo_id", "MO ID", sortable=True),
    _col("customer_name", "Customer"),
    _col("product_code", "Product"),
    _col("quantity", "Ordered"),
    _col("quantity_available", "Available"),
    _col("status_display", "Status"),
]
TRANSACTION_COLUMNS = [
    _col("transaction_id", "Transaction"),
    _col("mo_id", "MO"),
    _col("batch_id", "Batch"),
    _col("quantity_dispatched", "Qty"),
    _col("status_display", "Status"),
    _col("dispatch_date", "Date", sortable=True),
]
ALERT_COLUMNS = [
    _col("product_code", "Product"),
    _col("alert_type", "Alert"),
    _col("current_stock", "Current"),
    _col("threshold", "Threshold"),
    _col("last_triggered", "Last Triggered"),
]
STOP_COLUMNS = [
    _col("mo_id", "MO"),
    _col("batch_id", "Batch"),
    _col("process_name", "Process"),
    _col("stop_reason_display", "Reason"),
    _col("downtime", "Downtime"),
]
OUTSOURCING_COLUMNS = [
    _col("request_id", "Request ID", sortable=True),
    _col("vendor_name", "Vendor"),
    _col("status_display", "Status"),
    _col("date_sent", "Sent"),
    _col("expected_return_date", "Expected Return", sortable=True),
    _col("total_items", "Items"),
    _col("overdue", "Overdue"),
]
BATCH_COLUMNS = [
    _col("batch_id", "Batch"),
    _col("mo_id", "MO"),
    _col("product_code", "Product"),
    _col("planned_quantity", "Qty (kg)"),
    _col("status_display", "Status"),
]
PACKING_COLUMNS = [
    _col("batch_id", "Batch"),
    _col("product_code", "Product"),
    _col("heat_no", "Heat No"),
    _col("available_kg", "Available (kg)"),
    _col("packing_size", "Pack Size"),
]
PATROL_COLUMNS = [
    _col("process_name", "Process"),
    _col("shift", "Shift"),
    _col("scheduled_time", "Scheduled"),
    _col("status_display", "Status"),
]
RM_RETURN_COLUMNS = [
    _col("batch_id", "Batch"),
    _col("location", "Location"),
    _col("quantity_kg", "Returned (kg)"),
    _col("scrapped_quantity_kg", "Scrapped (kg)"),
    _col("created_at", "Date"),
]
USER_COLUMNS = [
    _col("email", "Email", sortable=True),
    _col("full_name", "Name"),
    _col("role_name", "Role"),
    _col("is_active", "Active"),
]


def _decorate(rows: list[dict]) -> list[dict]:
    """Display-only fields layered over API rows."""
    out = []
    for r in rows:
        row = dict(r)
        if "status" in row and not row.get("status_display"):
            row["status_display"] = status_label(row.get("status"))
        if "priority" in row and not row.get("priority_display"):
            row["priority_display"] = priority_label(row.get("priority"))
        if "stopped_at" in row:
            row["downtime"] = format_downtime(row.get("stopped_at"))
        if "is_overdue" in row:
            row["overdue"] = "Overdue" if row.get("is_overdue") else ""
        if "actual_start_time" in row:
            row["started"] = format_datetime(row.get("actual_start_time"))
        primary = row.get("primary_role")
        if isinstance(primary, dict):
            row["role_name"] = primary.get("display_name") or primary.get("name")
        if "first_name" in row and "full_name" not in row:
            row["full_name"] = " ".join(p for p in [row.get("first_name"), row.get("last_name")] if p)
        out.append(row)
    return out


def _options(values: list[str], *, all_label: str) -> dict[str, str]:
    return {"": all_label, **{v: status_label(v) if v not in MO_PRIORITIES else priority_label(v) for v in values}}


def table_section(
    tab: TableTab,
    columns: list[dict],
    *,
    title: str,
    filters: list[tuple[str, str, dict]] | None = None,
    search_placeholder: str | None = None,
    on_row: Callable | None = None,
    export_name: str | None = None,
):
    """Card with filters, search, the records table, paging and export."""

    async def _apply(coro) -> None:
        await coro
        body.refresh()

    with ui.card().classes("w-full p-4"):
        with ui.row().classes("w-full items-center justify-between gap-2"):
            ui.label(title).classes("text-lg font-semibold")
            with ui.row().classes("items-center gap-2"):
                for name, label, options in filters or []:
                    ui.select(
                        options,
                        label=label,
                        value=tab.query.filters.get(name, ""),
                        on_change=lambda e, n=name: _apply(tab.set_filter(n, e.value)),
                    ).props("outlined dense").classes("w-44")
                if search_placeholder:
                    ui.input(
                        placeholder=search_placeholder,
                        on_change=lambda e: _apply(tab.set_search(e.value)),
                    ).props("outlined dense clearable debounce=400").classes("w-72")
                ui.button(icon="refresh", on_click=lambda: _apply(tab.refresh())).props("flat round dense")
                if export_name:
                    with ui.button(icon="download").props("flat round dense"):
                        with ui.menu().props("auto-close"):
                            ui.menu_item(
                                "Excel (.xlsx)",
                                on_click=lambda: ui.download.content(
                                    to_xlsx_bytes(_decorate(tab.rows), columns, sheet_name=title),
                                    export_filename(export_name),
                                ),
                            )
                            ui.menu_item(
                                "CSV",
                                on_click=lambda: ui.download.content(
                                    to_csv_bytes(_decorate(tab.rows), columns), export_filename(export_name, ext="csv")
                                ),
                            )

        @ui.refreshable
        def body() -> None:
            if not tab.loaded:
                ui.spinner(size="lg")
                return
            if tab.error:
                ui.label(tab.error).classes("text-sm text-red-600")
            records_table(
                columns,
                _decorate(tab.rows),
                on_sort=lambda field: _apply(tab.toggle_sort(field)),
                actions=on_row,
            )
            if tab.total_pages > 1:
                ui.pagination(
                    1,
                    tab.total_pages,
                    value=tab.query.page,
                    direction_links=True,
                    on_change=lambda e: _apply(tab.set_page(e.value)),
                )

        body()

    ui.timer(0.1, lambda: _apply(tab.refresh()), once=True)
    return body


def register_pages(settings: Settings) -> None:
    def shell(route: str, *, title: str | None = None) -> tuple[Backend, UserSession] | None:
        """Gate the route, then draw the header (bell included). None when redirected."""
        store = browser_session()
        session = store.current()
        if not require_role(route, session):
            return None
        backend = backend_for(settings, store)

        async def do_logout() -> None:
            await backend.auth.logout()
            ui.navigate.to("/login")

        interval = (
            settings.supervisor_poll_interval_seconds if session.role == "supervisor" else settings.poll_interval_seconds
        )
        feed = NotificationFeed(
            backend.notifications,
            session.role,
            limit=settings.notification_limit,
            mo_lookup=backend.manufacturing.get_mo,
        )
        render_header(
            session.role,
            user_name=session.display_name,
            on_logout=do_logout,
            bell=lambda: render_bell(feed, interval=interval),
        )
        if title:
            ui.page_title(f"{title} | {settings.title}")
        return backend, session

    def stats_section(panel: StatsPanel, cards: list[tuple[str, str]]):
        @ui.refreshable
        def view() -> None:
            stat_cards([(label, panel.value(key)) for key, label in cards])

        async def reload() -> None:
            await panel.load()
            view.refresh()

        with ui.row().classes("w-full items-center justify-end"):
            ui.button("Refresh", icon="refresh", on_click=reload).props("flat dense no-caps")
        view()
        ui.timer(0.1, reload, once=True)
        return reload

    # -- public ---------------------------------------------------------------

    @ui.page("/")
    def index() -> None:
        session = browser_session().current()
        ui.navigate.to(role_home(session.role) if session.is_authenticated else "/login")

    @ui.page("/login")
    def login() -> None:
        ui.page_title(f"Login | {settings.title}")
        store = browser_session()
        backend = backend_for(settings, store)
        roles = {"": "Any role", **{key: label for key, label, _ in ROLE_HIERARCHY}}

        with page_container():
            with ui.card().classes("p-8 mx-auto mt-16").style("width: 92vw; max-width: 420px;"):
                ui.label(settings.title).classes("text-2xl font-semibold")
                ui.label("Sign in to continue").classes("so-subtitle")
                email = ui.input("Email").props("outlined dense").classes("w-full")
                password = ui.input("Password", password=True, password_toggle_button=True).props("outlined dense").classes(
                    "w-full"
                )
                role = ui.select(roles, value="", label="Login as").props("outlined dense").classes("w-full")
                err = ui.label("").classes("text-sm text-red-600")

                async def do_login() -> None:
                    err.set_text("")
                    if not str(email.value or "").strip() or not password.value:
                        err.set_text("Email and password are required")
                        return
                    res = await backend.auth.login(
                        str(email.value).strip(), str(password.value), expected_role=role.value or None
                    )
                    if not res.ok:
                        err.set_text(res.message or "Login failed")
                        return
                    ui.navigate.to(role_home(res.data["role"]))

                password.on("keydown.enter", do_login)
                ui.button("Login", on_click=do_login).props("unelevated color=primary").classes("w-full")

    # -- notifications --------------------------------------------------------

    @ui.page("/notifications")
    def notifications_page() -> None:
        ctx = shell("/notifications", title="Notifications")
        if ctx is None:
            return
        backend, session = ctx
        state = {"filter": "all", "rows": []}

        async def load() -> None:
            flt = state["filter"]
            res = await backend.notifications.list(
                is_read=None if flt in ("all", "action_required") else flt == "read",
                action_required=True if flt == "action_required" else None,
            )
            if not res.ok:
                if redirect_if_signed_out(backend):
                    return
                ui.notify(f"Failed to load notifications: {res.message}", type="negative")
            state["rows"] = [Notification.from_api(r) for r in res.items]
            view.refresh()

        async def mark(n: Notification) -> None:
            res = await backend.notifications.mark_read(n.id)
            if not res.ok:
                ui.notify(res.message, type="negative")
            await load()

        async def mark_all() -> None:
            res = await backend.notifications.mark_all_read()
            if not res.ok:
                ui.notify(res.message, type="negative")
            await load()

        async def set_filter(e) -> None:
            state["filter"] = e.value
            await load()

        with page_container():
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Notifications").classes("text-2xl font-semibold")
                with ui.row().classes("gap-2"):
                    ui.toggle(
                        {"all": "All", "unread": "Unread", "read": "Read", "action_required": "Action required"},
                        value="all",
                        on_change=set_filter,
                    )
                    ui.button("Mark all read", on_click=mark_all).props("outline no-caps")

            @ui.refreshable
            def view() -> None:
                if not state["rows"]:
                    ui.label("No notifications").classes("text-slate-500")
                for n in state["rows"]:
                    with ui.card().classes("w-full p-3" + ("" if n.is_read else " border-l-4 border-blue-500")):
                        with ui.row().classes("w-full items-start justify-between no-wrap"):
                            with ui.column().classes("gap-0"):
                                ui.label(n.title or n.notification_type).classes("font-semibold")
                                ui.label(n.message).classes("text-sm text-slate-700")
                                ui.label(format_time_ago(n.created_at)).classes("text-xs text-slate-400")
                            if not n.is_read:
                                ui.button("Mark read", on_click=lambda _, n=n: mark(n)).props("flat dense no-caps")

            view()
        ui.timer(0.1, load, once=True)

    # -- manager / production head -------------------------------------------

    def management_dashboard(route: str, role: str) -> None:
        ctx = shell(route, title=(get_role_config(role) or {}).get("title"))
        if ctx is None:
            return
        backend, session = ctx
        base = (get_role_config(role) or {}).get("path", "")
        stats = StatsPanel(backend.manufacturing.mo_dashboard_stats)

        with page_container():
            reload_stats = stats_section(
                stats,
                [("total", "Total MOs"), ("in_progress", "In Progress"), ("completed", "Completed"), ("overdue", "Overdue")],
            )
            with ui.tabs().classes("w-full") as tabs:
                t_mo = ui.tab("Manufacturing Orders")
                t_po = ui.tab("Purchase Orders")
                t_track = ui.tab("Process Tracking")
                t_out = ui.tab("Outsourcing")
                t_wc = ui.tab("Work Centers")
            with ui.tab_panels(tabs, value=t_mo).classes("w-full"):
                with ui.tab_panel(t_mo):
                    mo_tab = TableTab(backend.manufacturing.list_mos, TableQuery(sort_by="created_at", sort_order="desc"), name="MOs")

                    async def _mo_done() -> None:
                        await mo_tab.refresh()
                        mo_body.refresh()
                        await reload_stats()

                    with ui.row().classes("gap-2"):
                        ui.button(
                            "Create MO", icon="add", on_click=lambda: dialogs.open_create_mo_dialog(backend, on_done=_mo_done)
                        ).props("unelevated no-caps color=primary")
                        ui.button("MO approvals", on_click=lambda: ui.navigate.to(f"{base}/mo-approval")).props("outline no-caps")
                    mo_body = table_section(
                        mo_tab,
                        MO_COLUMNS,
                        title="Manufacturing Orders",
                        filters=[
                            ("status", "Status", _options(MO_STATUSES, all_label="All Statuses")),
                            ("priority", "Priority", _options(MO_PRIORITIES, all_label="All Priorities")),
                        ],
                        search_placeholder="Search MO ID or product...",
                        on_row=lambda row: ui.navigate.to(f"{base}/mo-detail/{row.get('id')}"),
                        export_name="manufacturing_orders",
                    )
                with ui.tab_panel(t_po):
                    table_section(
                        TableTab(backend.manufacturing.list_pos, name="POs"),
                        PO_COLUMNS,
                        title="Purchase Orders",
                        search_placeholder="Search PO ID or vendor...",
                        export_name="purchase_orders",
                    )
                with ui.tab_panel(t_track):
                    tracking = TableTab(backend.manufacturing.process_executions, name="process tracking")

                    async def _track_done() -> None:
                        await tracking.refresh()
                        track_body.refresh()

                    track_body = table_section(
                        tracking,
                        TRACKING_COLUMNS,
                        title="Process Tracking",
                        filters=[("status", "Status", _options(PROCESS_STATUSES, all_label="All"))],
                        on_row=lambda row: dialogs.open_assign_supervisor_dialog(backend, row, on_done=_track_done),
                    )
                with ui.tab_panel(t_out):
                    ui.button("Open outsourcing management", on_click=lambda: ui.navigate.to("/manager/outsourcing")).props(
                        "outline no-caps"
                    )
                with ui.tab_panel(t_wc):
                    wc_tab = TableTab(lambda _params: backend.work_centers.list(), name="work centers")

                    async def _wc_done() -> None:
                        await wc_tab.refresh()
                        wc_body.refresh()

                    ui.button(
                        "Add work center", icon="add", on_click=lambda: dialogs.open_work_center_dialog(backend, on_done=_wc_done)
                    ).props("unelevated no-caps color=primary")
                    wc_body = table_section(
                        wc_tab,
                        WORK_CENTER_COLUMNS,
                        title="Work Center Supervisors",
                        on_row=lambda row: dialogs.open_work_center_dialog(backend, row, on_done=_wc_done),
                    )

    @ui.page("/manager/dashboard")
    def manager_dashboard() -> None:
        management_dashboard("/manager/dashboard", "manager")

    @ui.page("/production-head/dashboard")
    def production_head_dashboard() -> None:
        management_dashboard("/production-head/dashboard", "production_head")

    def mo_detail(route: str, mo_pk: str) -> None:
        ctx = shell(route, title="MO Detail")
        if ctx is None:
            return
        backend, session = ctx
        state: dict = {"mo": None, "executions": []}
        can_manage = session.role in ("manager", "production_head")

        async def load() -> None:
            res = await backend.manufacturing.get_mo(mo_pk)
            if not res.ok:
                if redirect_if_signed_out(backend):
                    return
                msg = "Manufacturing order not found" if res.status == 404 else res.message
                ui.notify(msg, type="negative")
                view.refresh()
                return
            state["mo"] = ManufacturingOrder.from_api(res.data)
            ex = await backend.manufacturing.executions_for_mo(mo_pk)
            state["executions"] = _decorate(ex.items)
            view.refresh()

        with page_container():

            @ui.refreshable
            def view() -> None:
                mo: ManufacturingOrder | None = state["mo"]
                if mo is None:
                    ui.spinner(size="lg")
                    return
                with ui.row().classes("w-full items-center justify-between"):
                    with ui.column().classes("gap-0"):
                        ui.label(f"MO {mo.mo_id}").classes("text-2xl font-semibold")
                        ui.label(mo.product_line).classes("so-subtitle")
                        if mo.customer_name:
                            ui.label(f"Customer: {mo.customer_name}").classes("text-sm text-slate-600")
                    with ui.row().classes("gap-2 items-center"):
                        status_badge(mo.status)
                        if can_manage and mo.awaiting_approval:
                            ui.button("Approve", on_click=lambda: dialogs.open_approve_mo_dialog(backend, mo, on_done=load)).props(
                                "unelevated color=positive no-caps"
                            )
                        if can_manage and mo.can_stop:
                            ui.button(
                                "Stop MO", on_click=lambda: dialogs.open_stop_mo_dialog(backend, mo, on_done=load)
                            ).props("outline color=negative no-caps")
                records_table(
                    TRACKING_COLUMNS,
                    state["executions"],
                    actions=lambda row: dialogs.open_assign_supervisor_dialog(backend, row, on_done=load)
                    if can_manage
                    else dialogs.open_stop_process_dialog(backend, row, on_done=load),
                )

            view()
        ui.timer(0.1, load, once=True)

    def mo_approval(route: str) -> None:
        ctx = shell(route, title="MO Approval")
        if ctx is None:
            return
        backend, session = ctx
        base = route.rsplit("/", 1)[0]
        pending = TableTab(
            backend.manufacturing.list_mos,
            TableQuery(filters={"status": "submitted"}, sort_by="created_at", sort_order="desc"),
            name="MOs awaiting approval",
        )

        async def _done() -> None:
            await pending.refresh()
            body.refresh()

        def approve(row: dict) -> None:
            dialogs.open_approve_mo_dialog(backend, ManufacturingOrder.from_api(row), on_done=_done)

        with page_container():
            with ui.row().classes("w-full items-center justify-between"):
                with ui.column().classes("gap-0"):
                    ui.label("MO Approval").classes("text-2xl font-semibold")
                    ui.label("Manufacturing orders submitted and waiting for approval").classes("so-subtitle")
                ui.button("Back to dashboard", on_click=lambda: ui.navigate.to(f"{base}/dashboard")).props("flat no-caps")
            body = table_section(
                pending,
                MO_COLUMNS,
                title="Submitted MOs",
                search_placeholder="Search MO ID or product...",
                on_row=approve,
            )

    @ui.page("/manager/mo-approval")
    def manager_mo_approval() -> None:
        mo_approval("/manager/mo-approval")

    @ui.page("/production-head/mo-approval")
    def production_head_mo_approval() -> None:
        mo_approval("/production-head/mo-approval")

    @ui.page("/manager/mo-detail/{mo_pk}")
    def manager_mo_detail(mo_pk: str) -> None:
        mo_detail(f"/manager/mo-detail/{mo_pk}", mo_pk)

    @ui.page("/production-head/mo-detail/{mo_pk}")
    def production_head_mo_detail(mo_pk: str) -> None:
        mo_detail(f"/production-head/mo-detail/{mo_pk}", mo_pk)

    @ui.page("/supervisor/mo-detail/{mo_pk}")
    def supervisor_mo_detail(mo_pk: str) -> None:
        mo_detail(f"/supervisor/mo-detail/{mo_pk}", mo_pk)

    @ui.page("/manager/outsourcing")
    def outsourcing_page() -> None:
        ctx = shell("/manager/outsourcing", title=OUTSOURCING_TITLE)
        if ctx is None:
            return
        backend, session = ctx
        board = OutsourcingBoard(backend.outsourcing, user_id=session.user_id)

        async def run(coro) -> None:
            res = await coro
            if res is not None and hasattr(res, "ok"):
                if res.ok:
                    ui.notify((res.data or {}).get("message", "Done") if isinstance(res.data, dict) else "Done", type="positive")
                else:
                    ui.notify(res.message or "Request failed", type="negative")
            summary.refresh()
            rows.refresh()

        with page_container():
            with ui.row().classes("w-full items-center justify-between"):
                with ui.column().classes("gap-0"):
                    ui.label(OUTSOURCING_TITLE).classes("text-2xl font-semibold")
                    ui.label(OUTSOURCING_SUBTITLE).classes("so-subtitle")
                if session.role == "manager":
                    ui.button(
                        "New request", icon="add", on_click=lambda: dialogs.open_create_outsourcing_dialog(backend, on_done=initial)
                    ).props("unelevated no-caps color=primary")

            @ui.refreshable
            def summary() -> None:
                stat_cards(board.summary_cards())

            summary()

            with ui.card().classes("w-full p-4"):
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label("Outsourcing Requests").classes("text-lg font-semibold")
                    with ui.row().classes("gap-2 items-center"):
                        ui.select(
                            _options(OUTSOURCING_STATUSES, all_label="All Statuses"),
                            value="",
                            on_change=lambda e: run(board.set_status_filter(e.value)),
                        ).props("outlined dense").classes("w-44")
                        ui.input(
                            placeholder=OUTSOURCING_SEARCH, on_change=lambda e: run(board.set_search(e.value))
                        ).props("outlined dense clearable debounce=400").classes("w-72")

                @ui.refreshable
                def rows() -> None:
                    reqs = board.requests
                    if not reqs:
                        ui.label("No records found").classes("text-slate-500 p-4")
                        return
                    for req, raw in zip(reqs, _decorate(board.table.rows)):
                        with ui.row().classes("w-full items-center gap-4 py-2 border-b"):
                            ui.label(req.request_id).classes("font-mono w-48")
                            ui.label(req.vendor_name).classes("w-48")
                            status_badge(req.status)
                            ui.label(raw.get("expected_return_date") or "-").classes("w-28")
                            ui.label(str(req.total_items)).classes("w-12")
                            if req.is_overdue:
                                ui.badge("Overdue", color="negative")
                            with ui.row().classes("ml-auto gap-1"):
                                ui.button("View", on_click=lambda _, r=raw: _view_request(r)).props("flat dense no-caps")
                                if req.can_send:
                                    ui.button("Send", on_click=lambda _, r=req: run(board.send(r.id))).props(
                                        "unelevated dense no-caps color=primary"
                                    )
                                if req.can_return:
                                    ui.button("Mark Returned", on_click=lambda _, r=req: run(board.return_items(r))).props(
                                        "unelevated dense no-caps color=positive"
                                    )
                                if req.can_close:
                                    ui.button("Close", on_click=lambda _, r=req: run(board.close(r.id))).props(
                                        "outline dense no-caps"
                                    )

                rows()

        def _view_request(row: dict) -> None:
            with ui.dialog() as dialog, ui.card().classes("p-6").style("width: 92vw; max-width: 640px;"):
                ui.label(f"Request {row.get('request_id', '')}").classes("text-xl font-semibold")
                ui.label(f"Vendor: {row.get('vendor_name', '')}")
                ui.label(f"Status: {row.get('status_display', '')}")
                ui.label(f"Sent: {row.get('date_sent') or '-'}  Expected: {row.get('expected_return_date') or '-'}")
                for item in row.get("items") or []:
                    ui.label(f"{item.get('mo_number') or item.get('mo_id') or ''} {item.get('product_code', '')}: "
                             f"{format_qty(item.get('qty'))} pcs / {format_qty(item.get('kg'), decimals=2)} kg").classes("text-sm")
                ui.button("Close", on_click=dialog.close).props("flat")
            dialog.open()

        async def initial() -> None:
            await board.load()
            if board.table.error and redirect_if_signed_out(backend):
                return
            summary.refresh()
            rows.refresh()

        ui.timer(0.1, initial, once=True)

    # -- supervisor -----------------------------------------------------------

    @ui.page("/supervisor/dashboard")
    def supervisor_dashboard() -> None:
        ctx = shell("/supervisor/dashboard", title="Supervisor Dashboard")
        if ctx is None:
            return
        backend, session = ctx
        ps = backend.process_supervisor

        with page_container():
            stats_section(
                StatsPanel(backend.manufacturing.supervisor_dashboard),
                [("assigned_processes", "Assigned"), ("in_progress", "In Progress"), ("on_hold", "On Hold"), ("completed_today", "Completed Today")],
            )
            ui.button("Final inspection", on_click=lambda: ui.navigate.to("/supervisor/final-inspection")).props(
                "outline no-caps"
            )
            with ui.tabs().classes("w-full") as tabs:
                t_pending = ui.tab("Incoming Batches")
                t_exec = ui.tab("My Processes")
                t_stops = ui.tab("Active Stops")
                t_rm = ui.tab("Return RM")
            with ui.tab_panels(tabs, value=t_pending).classes("w-full"):
                with ui.tab_panel(t_pending):
                    receipts = TableTab(ps.batch_receipts, TableQuery(filters={"status": "pending"}), name="receipts")

                    async def _rc_done() -> None:
                        await receipts.refresh()
                        rc_body.refresh()

                    rc_body = table_section(
                        receipts,
                        BATCH_COLUMNS,
                        title="Batches awaiting receipt",
                        on_row=lambda row: dialogs.open_receipt_dialog(backend, row, on_done=_rc_done),
                    )
                with ui.tab_panel(t_exec):
                    execs = TableTab(
                        backend.manufacturing.process_executions,
                        TableQuery(filters={"assigned_supervisor": session.user_id, "status": "in_progress"}),
                        name="my processes",
                    )

                    async def _ex_done() -> None:
                        await execs.refresh()
                        ex_body.refresh()

                    ex_body = table_section(
                        execs,
                        TRACKING_COLUMNS,
                        title="Processes in progress",
                        on_row=lambda row: dialogs.open_stop_process_dialog(backend, row, on_done=_ex_done),
                    )
                with ui.tab_panel(t_stops):
                    stops = TableTab(lambda _params: ps.active_stops(), name="active stops")

                    async def _st_done() -> None:
                        await stops.refresh()
                        st_body.refresh()

                    st_body = table_section(
                        stops,
                        STOP_COLUMNS,
                        title="Stopped processes",
                        on_row=lambda row: dialogs.open_resume_process_dialog(backend, row, on_done=_st_done),
                    )
                with ui.tab_panel(t_rm):
                    rm_batches = TableTab(lambda _params: ps.pending_batches(), name="batches for RM return")

                    async def _rm_done() -> None:
                        await rm_batches.refresh()
                        rm_body.refresh()

                    rm_body = table_section(
                        rm_batches,
                        BATCH_COLUMNS,
                        title="Batches with unused raw material",
                        on_row=lambda row: dialogs.open_rm_return_dialog(backend, row, on_done=_rm_done),
                    )

    @ui.page("/supervisor/final-inspection")
    def final_inspection_page() -> None:
        ctx = shell("/supervisor/final-inspection", title="Final Inspection")
        if ctx is None:
            return
        backend, session = ctx
        flow = FinalInspectionFlow(backend.process_supervisor)
        batches = TableTab(
            backend.manufacturing.process_executions,
            TableQuery(filters={"process_name": "Final Inspection", "status": "in_progress"}),
            name="final inspection",
        )

        async def _done() -> None:
            await batches.refresh()
            body.refresh()

        with page_container():
            ui.label("Final Inspection").classes("text-2xl font-semibold")
            body = table_section(
                batches,
                TRACKING_COLUMNS,
                title="Batches at final inspection",
                on_row=lambda row: dialogs.open_fi_completion_dialog(
                    flow, {"id": row.get("batch"), "batch_id": row.get("batch_id"), "mo_id": row.get("mo_id")}, on_done=_done
                ),
            )

    # -- stores ---------------------------------------------------------------

    @ui.page("/fg-store/dashboard")
    def fg_store_dashboard() -> None:
        ctx = shell("/fg-store/dashboard", title="FG Store")
        if ctx is None:
            return
        backend, session = ctx
        fg = backend.fg_store

        with page_container():
            stats_section(
                StatsPanel(fg.dashboard_stats),
                [("total_stock", "Total Stock"), ("pending_dispatch", "Pending Dispatch"), ("dispatched_today", "Dispatched Today"), ("active_alerts", "Active Alerts")],
            )
            with ui.tabs().classes("w-full") as tabs:
                t_stock = ui.tab("Stock Levels")
                t_mos = ui.tab("Pending Dispatch")
                t_log = ui.tab("Transactions Log")
                t_alerts = ui.tab("Stock Alerts")
            with ui.tab_panels(tabs, value=t_stock).classes("w-full"):
                with ui.tab_panel(t_stock):
                    table_section(
                        TableTab(fg.stock_levels, name="stock levels"),
                        STOCK_COLUMNS,
                        title="FG Stock Levels",
                        search_placeholder="Search product or batch...",
                        export_name="fg_stock_levels",
                    )
                with ui.tab_panel(t_mos):
                    mos = TableTab(fg.pending_dispatch_mos, name="pending dispatch")

                    async def _done() -> None:
                        await mos.refresh()
                        mo_body.refresh()

                    mo_body = table_section(
                        mos,
                        PENDING_DISPATCH_COLUMNS,
                        title="MOs ready for dispatch",
                        search_placeholder="Search MO or customer...",
                        on_row=lambda row: dialogs.open_dispatch_dialog(backend, row, on_done=_done),
                    )
                with ui.tab_panel(t_log):
                    table_section(
                        TableTab(fg.transactions_log, TableQuery(sort_by="dispatch_date", sort_order="desc"), name="transactions"),
                        TRANSACTION_COLUMNS,
                        title="Dispatch Transactions",
                        search_placeholder="Search MO or batch...",
                        export_name="dispatch_transactions",
                    )
                with ui.tab_panel(t_alerts):
                    alerts = TableTab(fg.stock_alerts, TableQuery(filters={"is_active": True}), name="stock alerts")

                    async def mark_alert(row: dict) -> None:
                        res = await fg.mark_alert_read(row.get("id"))
                        if not res.ok:
                            ui.notify(res.message or "Failed to update alert", type="negative")
                            return
                        ui.notify("Alert acknowledged", type="positive")
                        await alerts.refresh()
                        alerts_body.refresh()

                    alerts_body = table_section(alerts, ALERT_COLUMNS, title="Stock Alerts", on_row=mark_alert)

    @ui.page("/rm-store/dashboard")
    def rm_store_dashboard() -> None:
        ctx = shell("/rm-store/dashboard", title="RM Store")
        if ctx is None:
            return
        backend, session = ctx
        inv = backend.inventory

        with page_container():
            stats_section(
                StatsPanel(inv.dashboard_stats),
                [("total_materials", "Materials"), ("low_stock", "Low Stock"), ("pending_allocations", "Pending Allocation"), ("returns_today", "Returns Today")],
            )
            with ui.tabs().classes("w-full") as tabs:
                t_mo = ui.tab("MO List")
                t_ret = ui.tab("RM Returns")
            with ui.tab_panels(tabs, value=t_mo).classes("w-full"):
                with ui.tab_panel(t_mo):
                    table_section(
                        TableTab(inv.rm_mos, name="rm mos"),
                        MO_COLUMNS,
                        title="MOs awaiting raw material",
                        search_placeholder="Search MO ID or product...",
                        export_name="rm_mo_list",
                    )
                with ui.tab_panel(t_ret):
                    table_section(
                        TableTab(inv.rm_returns, name="rm returns"),
                        RM_RETURN_COLUMNS,
                        title="RM Returns",
                        export_name="rm_returns",
                    )

    # -- floor roles ----------------------------------------------------------

    @ui.page("/packing-zone/dashboard")
    def packing_zone_dashboard() -> None:
        ctx = shell("/packing-zone/dashboard", title="Packing Zone")
        if ctx is None:
            return
        backend, session = ctx
        pz = backend.packing_zone
        to_verify = TableTab(lambda _params: pz.pending_verification(), name="to verify")
        verified = TableTab(lambda _params: pz.verified_batches(), name="verified")
        loose = TableTab(pz.loose_stock, name="loose stock")

        async def after_verify() -> None:
            await to_verify.refresh()
            verify_body.refresh()
            await verified.refresh()
            pack_body.refresh()
            await reload_stats()

        async def after_pack() -> None:
            await verified.refresh()
            pack_body.refresh()
            await loose.refresh()
            loose_body.refresh()
            await reload_stats()

        with page_container():
            reload_stats = stats_section(
                StatsPanel(pz.dashboard_stats),
                [("to_verify", "To Verify"), ("verified", "Verified"), ("packed_today", "Packed Today"), ("loose_stock_kg", "Loose Stock (kg)")],
            )
            with ui.tabs().classes("w-full") as tabs:
                t_v = ui.tab("Verification")
                t_p = ui.tab("Packing")
                t_l = ui.tab("Loose Stock")
            with ui.tab_panels(tabs, value=t_v).classes("w-full"):
                with ui.tab_panel(t_v):
                    verify_body = table_section(
                        to_verify,
                        BATCH_COLUMNS,
                        title="Batches to verify",
                        on_row=lambda row: dialogs.open_verify_batch_dialog(backend, row, on_done=after_verify),
                    )
                with ui.tab_panel(t_p):
                    pack_body = table_section(
                        verified,
                        PACKING_COLUMNS,
                        title="Ready to pack",
                        on_row=lambda row: dialogs.open_packing_dialog(backend, row, on_done=after_pack),
                    )
                with ui.tab_panel(t_l):
                    loose_body = table_section(
                        loose,
                        [_col("product_code", "Product"), _col("loose_kg", "Loose (kg)"), _col("loose_pcs", "Loose (pcs)")],
                        title="Loose Stock",
                        export_name="loose_stock",
                    )

    @ui.page("/patrol/dashboard")
    def patrol_dashboard() -> None:
        ctx = shell("/patrol/dashboard", title="Patrol")
        if ctx is None:
            return
        backend, session = ctx
        pt = backend.patrol
        state: dict = {"upload_id": None}
        uploads = TableTab(pt.uploads, TableQuery(filters={"status": "pending"}), name="uploads")

        async def handle_upload(e) -> None:
            try:
                res = await workflows.upload_qc_sheet(
                    pt, upload_id=state["upload_id"], filename=e.name, content=e.content.read()
                )
            except FormValidationError as ex:
                ui.notify("; ".join(ex.errors.values()), type="warning")
                return
            if not res.ok:
                ui.notify(res.message, type="negative")
                return
            ui.notify("QC sheet uploaded", type="positive")
            state["upload_id"] = None
            await uploads.refresh()
            uploads_body.refresh()
            await reload_stats()

        def pick(row: dict) -> None:
            state["upload_id"] = row.get("id")
            ui.notify(f"Upload slot {row.get('process_name', '')} {row.get('scheduled_time', '')} selected")

        with page_container():
            reload_stats = stats_section(
                StatsPanel(pt.dashboard_stats),
                [("total_duties", "Duties"), ("uploaded", "Uploaded"), ("pending", "Pending"), ("missed", "Missed")],
            )
            table_section(TableTab(pt.duties, name="patrol duties"), PATROL_COLUMNS, title="Patrol Duties")
            uploads_body = table_section(uploads, PATROL_COLUMNS, title="Pending uploads", on_row=pick)
            ui.upload(label="Upload QC sheet", on_upload=handle_upload, auto_upload=True).props("accept=image/*,.pdf max-files=1")

    @ui.page("/outsourcing-incharge/dashboard")
    def outsourcing_incharge_dashboard() -> None:
        ctx = shell("/outsourcing-incharge/dashboard", title="Outsourcing")
        if ctx is None:
            return
        backend, session = ctx
        with page_container():
            table_section(
                TableTab(backend.outsourcing.list, name="outsourcing batches"),
                OUTSOURCING_COLUMNS,
                title="Outsourcing Batches",
                filters=[("status", "Status", _options(OUTSOURCING_STATUSES, all_label="All Statuses"))],
                search_placeholder=OUTSOURCING_SEARCH,
                export_name="outsourcing",
            )

    # -- admin ----------------------------------------------------------------

    @ui.page("/admin/dashboard")
    def admin_dashboard() -> None:
        ctx = shell("/admin/dashboard", title="Admin")
        if ctx is None:
            return
        backend, session = ctx
        with page_container():
            stats_section(
                StatsPanel(backend.admin.dashboard_stats),
                [("total_users", "Users"), ("active_users", "Active"), ("roles", "Roles"), ("logins_today", "Logins Today")],
            )
            with ui.tabs().classes("w-full") as tabs:
                t_u = ui.tab("Users")
                t_r = ui.tab("Roles")
            with ui.tab_panels(tabs, value=t_u).classes("w-full"):
                with ui.tab_panel(t_u):
                    users = TableTab(backend.admin.users, name="users")

                    async def _users_done() -> None:
                        await users.refresh()
                        users_body.refresh()

                    users_body = table_section(
                        users,
                        USER_COLUMNS,
                        title="Users",
                        search_placeholder="Search users...",
                        on_row=lambda row: dialogs.open_deactivate_user_dialog(backend, row, on_done=_users_done)
                        if row.get("is_active")
                        else ui.notify("User is already inactive"),
                        export_name="users",
                    )
                with ui.tab_panel(t_r):
                    table_section(
                        TableTab(lambda _params: backend.admin.roles(), name="roles"),
                        [_col("name", "Role"), _col("description", "Description"), _col("hierarchy_level", "Level")],
                        title="Roles",
                    )

    # Bare role prefixes land on that role's dashboard.
    def _redirect_page(path: str) -> None:
        def _page() -> None:
            ui.navigate.to(f"{path}/dashboard")

        ui.page(path)(_page)

    for _key, _label, _path in ROLE_HIERARCHY:
        _redirect_page(_path)
