"""Modal workflows opened from dashboard tables.

Every dialog validates locally, calls one service handler and, on success,
closes itself and runs ``on_done`` so the page refetches.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from nicegui import ui

from springops.api import Backend
from springops.core import dispatch as dispatch_core
from springops.core.forms import PACKING_ISSUE_REASONS, RECEIPT_REPORT_REASONS, STOP_REASONS, FormValidationError
from springops.core.formatting import format_downtime, format_qty
from springops.core.models import MO_PRIORITIES, ManufacturingOrder, priority_label
from springops.core.packing import PackingPlan
from springops.services import workflows
from springops.services.dispatch import DispatchIncomplete, confirm_dispatch
from springops.ui.widgets import field_error, searchable_dropdown

logger = logging.getLogger(__name__)

OnDone = Callable[[], Awaitable[None]]


def _card(title: str, subtitle: str = "", *, width: str = "640px"):
    card = ui.card().classes("bg-white p-6").style(f"width: 92vw; max-width: {width};")
    with card:
        ui.label(title).classes("text-xl font-semibold")
        if subtitle:
            ui.label(subtitle).classes("text-sm text-slate-600")
        ui.separator()
    return card


def _error_label():
    return ui.label("").classes("text-sm text-red-600 whitespace-pre-line")


def _show_errors(label, errors: dict[str, str]) -> None:
    label.set_text("\n".join(errors.values()))


async def close_and_refresh(dialog, on_done: OnDone | None) -> None:
    dialog.close()
    if on_done is not None:
        await on_done()


async def _finish(dialog, res, *, success: str, on_done: OnDone | None) -> bool:
    if not res.ok:
        ui.notify(res.message or "Request failed", type="negative")
        return False
    ui.notify(success, type="positive")
    await close_and_refresh(dialog, on_done)
    return True


# -- dispatch ---------------------------------------------------------------


async def open_dispatch_dialog(backend: Backend, mo: dict, *, on_done: OnDone | None = None) -> None:
    res = await backend.fg_store.dispatch_batches(mo.get("id"))
    if not res.ok:
        ui.notify(f"Failed to load batches: {res.message}", type="negative")
        return
    form = dispatch_core.DispatchForm(mo, res.items)

    dialog = ui.dialog().props("persistent")
    with dialog, _card(f"Dispatch {mo.get('mo_id', '')}", str(mo.get("customer_name") or ""), width="820px"):
        # Inputs are built once; only the summary below is redrawn while typing.
        if not form.lines:
            ui.label("No batches available for dispatch").classes("text-slate-500")
        for ln in form.lines:
            with ui.row().classes("w-full items-center gap-4"):
                ui.label(ln.batch_id).classes("font-mono w-40")
                ui.label(ln.product_code).classes("w-32")
                ui.label(f"Available: {format_qty(ln.available_quantity)}").classes("w-36 text-slate-600")
                ui.number(
                    "Dispatch qty",
                    value=ln.dispatch_quantity or None,
                    min=0,
                    on_change=lambda e, b=ln.batch_id: _set_qty(b, e.value),
                ).props("outlined dense").classes("w-36")

        @ui.refreshable
        def summary() -> None:
            for ln in form.lines:
                field_error(form.errors, ln.batch_id)
            field_error(form.errors, "general")
            ui.label(f"Total: {format_qty(form.total)}").classes("font-semibold")

        def _set_qty(batch_id: str, value) -> None:
            form.set_quantity(batch_id, value)
            summary.refresh()

        summary()
        notes = ui.textarea("Notes").props("outlined dense").classes("w-full")
        reference = ui.input("Delivery reference").props("outlined dense").classes("w-full")

        async def do_next() -> None:
            draft = form.review(notes=notes.value or "", delivery_reference=reference.value or "")
            if draft is None:
                summary.refresh()
                return
            dialog.close()
            open_confirm_dispatch_dialog(backend, draft, on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Review dispatch", on_click=do_next).props("unelevated color=primary")
    dialog.open()


def open_confirm_dispatch_dialog(backend: Backend, draft: dispatch_core.DispatchDraft, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Confirm Dispatch", f"MO {draft.mo.get('mo_id', '')}", width="720px"):
        for ln in draft.lines:
            with ui.row().classes("w-full justify-between"):
                ui.label(f"{ln.batch_id} ({ln.product_code})")
                ui.label(f"{format_qty(ln.dispatch_quantity)} units from {ln.location}")
        ui.label(f"Total: {format_qty(draft.total_quantity)} units").classes("font-semibold")
        verified = ui.checkbox("I have physically verified the batches and quantities being dispatched")
        notes = ui.textarea("Confirmation notes").props("outlined dense").classes("w-full")
        err = _error_label()

        async def do_confirm() -> None:
            err.set_text("")
            try:
                await confirm_dispatch(
                    backend.fg_store,
                    draft,
                    verified=bool(verified.value),
                    supervisor_id=backend.session.current().user_id,
                    confirmation_notes=notes.value or "",
                )
            except FormValidationError as ex:
                err.set_text("; ".join(ex.errors.values()))
                return
            except DispatchIncomplete as ex:
                logger.warning("Dispatch for MO %s left incomplete: %s", draft.mo.get("mo_id"), ex.message)
                pending = ", ".join(str(t) for t in ex.unconfirmed) or "none"
                ui.notify(f"Dispatch incomplete: {ex.message}. Unconfirmed transactions: {pending}", type="negative", multi_line=True)
                await close_and_refresh(dialog, on_done)
                return
            ui.notify("Dispatch confirmed", type="positive")
            await close_and_refresh(dialog, on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Back", on_click=dialog.close).props("flat")
            ui.button("Confirm dispatch", on_click=do_confirm).props("unelevated color=positive")
    dialog.open()


# -- process stop / resume --------------------------------------------------


def open_stop_process_dialog(backend: Backend, execution: dict, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Stop Process", f"{execution.get('process_name', '')} - {execution.get('batch_id', '')}"):
        reason = ui.select(dict(STOP_REASONS), label="Stop reason").props("outlined dense").classes("w-full")
        detail = ui.textarea("Details").props("outlined dense").classes("w-full")
        detail.bind_visibility_from(reason, "value", backward=lambda v: v == "others")
        notes = ui.textarea("Notes").props("outlined dense").classes("w-full")
        err = _error_label()

        async def do_stop() -> None:
            try:
                res = await workflows.stop_process(
                    backend.process_supervisor,
                    execution_id=execution.get("id"),
                    batch_id=execution.get("batch"),
                    stop_reason=reason.value,
                    stop_reason_detail=detail.value or "",
                    notes=notes.value or "",
                )
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="Process stopped", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Stop process", on_click=do_stop).props("unelevated color=negative")
    dialog.open()


def open_resume_process_dialog(backend: Backend, stop: dict, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Resume Process", str(stop.get("process_name") or "")):
        ui.label(f"Reason: {stop.get('stop_reason_display') or stop.get('stop_reason') or ''}")
        downtime = ui.label(f"Downtime: {format_downtime(stop.get('stopped_at'))}").classes("font-semibold")
        notes = ui.textarea("Resume notes (optional)").props("outlined dense").classes("w-full")

        # Live downtime; the timer dies with the dialog's client.
        ticker = ui.timer(1.0, lambda: downtime.set_text(f"Downtime: {format_downtime(stop.get('stopped_at'))}"))
        dialog.on("hide", lambda: ticker.deactivate())

        async def do_resume() -> None:
            res = await workflows.resume_process(backend.process_supervisor, stop_id=stop.get("id"), resume_notes=notes.value or "")
            if await _finish(dialog, res, success="Process resumed", on_done=on_done):
                ticker.deactivate()

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Resume", on_click=do_resume).props("unelevated color=positive")
    dialog.open()


# -- final inspection -------------------------------------------------------


def open_fi_completion_dialog(flow: workflows.FinalInspectionFlow, batch: dict, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Final Inspection", f"Batch {batch.get('batch_id', '')}"):
        ok_qty = ui.number("Passed quantity (kg)", min=0).props("outlined dense").classes("w-full")
        scrap_qty = ui.number("Scrapped quantity (kg)", min=0, value=0).props("outlined dense").classes("w-full")
        rework_qty = ui.number("Rework quantity (kg)", min=0, value=0).props("outlined dense").classes("w-full")
        remarks = ui.textarea("Remarks").props("outlined dense").classes("w-full")

        async def do_complete() -> None:
            completion = {
                "ok_quantity": ok_qty.value or 0,
                "scrap_quantity": scrap_qty.value or 0,
                "rework_quantity": rework_qty.value or 0,
                "remarks": remarks.value or "",
            }
            res = await flow.complete(batch, completion)
            if not res.ok:
                ui.notify(res.message or "Failed to complete inspection", type="negative")
                return
            if flow.awaiting_redirect:
                dialog.close()
                await open_rework_redirect_dialog(flow, on_done=on_done)
            else:
                ui.notify("Final inspection completed", type="positive")
                await close_and_refresh(dialog, on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Complete", on_click=do_complete).props("unelevated color=primary")
    dialog.open()


async def open_rework_redirect_dialog(flow: workflows.FinalInspectionFlow, *, on_done: OnDone | None = None) -> None:
    processes = await flow.load_destinations()
    batch = flow.pending_batch or {}
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Redirect Rework", f"Final Inspection - Batch: {batch.get('batch_id', '')}"):
        ui.label(f"MO: {batch.get('mo_id') or 'N/A'}")
        ui.label(f"Rework quantity available: {format_qty(flow.rework_quantity, decimals=2)} kg").classes("font-semibold")
        process = searchable_dropdown(
            processes, display_key="name", value_key="id", search_keys=["name", "code"], label="Rework to process"
        )
        qty = ui.number("Rework quantity (kg)", value=flow.rework_quantity, min=0).props("outlined dense").classes("w-full")
        defect = ui.textarea("Defect description").props("outlined dense").classes("w-full")
        err = _error_label()

        async def do_redirect() -> None:
            try:
                res = await flow.redirect(
                    rework_to_process=process.value, rework_quantity=qty.value, defect_description=defect.value or ""
                )
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            name = flow.destination_name(process.value)
            await _finish(
                dialog,
                res,
                success=f"Rework successfully redirected to {name} for batch {batch.get('batch_id', '')}",
                on_done=on_done,
            )

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Skip", on_click=lambda: skip_rework(flow, dialog, on_done=on_done)).props("flat")
            ui.button("Redirect", on_click=do_redirect).props("unelevated color=warning")
    dialog.open()


async def skip_rework(flow: workflows.FinalInspectionFlow, dialog, *, on_done: OnDone | None = None) -> None:
    """Leave the completed inspection without redirecting rework; the batch list still refetches."""
    flow.cancel()
    await close_and_refresh(dialog, on_done)


# -- assignment / MO control -----------------------------------------------


async def open_assign_supervisor_dialog(backend: Backend, execution: dict, *, on_done: OnDone | None = None) -> None:
    res = await backend.manufacturing.supervisors()
    options = res.items if res.ok else []
    if not res.ok:
        ui.notify(f"Failed to load supervisors: {res.message}", type="negative")
    for opt in options:
        opt.setdefault("full_name", " ".join(p for p in [opt.get("first_name"), opt.get("last_name")] if p) or opt.get("email", ""))

    dialog = ui.dialog().props("persistent")
    with dialog, _card("Assign Supervisor", str(execution.get("process_name") or "")):
        sel = searchable_dropdown(
            options, display_key="full_name", value_key="id", search_keys=["full_name", "email", "department"], label="Supervisor"
        )
        err = _error_label()

        async def do_assign() -> None:
            try:
                res = await workflows.assign_supervisor(backend.manufacturing, execution_id=execution.get("id"), supervisor_id=sel.value)
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="Supervisor assigned", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Assign", on_click=do_assign).props("unelevated color=primary")
    dialog.open()


def open_stop_mo_dialog(backend: Backend, mo: ManufacturingOrder, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Stop Manufacturing Order", mo.mo_id):
        ui.label("Stopping an MO halts all of its processes.").classes("text-sm text-slate-600")
        reason = ui.textarea("Reason").props("outlined dense").classes("w-full")
        err = _error_label()

        async def do_stop() -> None:
            try:
                res = await workflows.stop_mo(backend.manufacturing, mo_id=mo.id, stop_reason=reason.value or "")
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="MO stopped", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Stop MO", on_click=do_stop).props("unelevated color=negative")
    dialog.open()


# -- receipts / RM returns --------------------------------------------------


def open_receipt_dialog(backend: Backend, receipt: dict, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    reasons = {value: label for value, label, _ in RECEIPT_REPORT_REASONS}
    with dialog, _card("Incoming Material", f"Batch {receipt.get('batch_id', '')}"):
        ui.label(f"Expected: {format_qty(receipt.get('expected_quantity'))}")
        reason = ui.select(reasons, label="Report reason").props("outlined dense").classes("w-full")
        actual = ui.number("Actual received quantity").props("outlined dense").classes("w-full")
        detail = ui.textarea("Details").props("outlined dense").classes("w-full")
        err = _error_label()

        async def do_verify() -> None:
            res = await workflows.verify_receipt(
                backend.process_supervisor, batch_id=receipt.get("batch"), process_execution_id=receipt.get("process_execution")
            )
            await _finish(dialog, res, success="Receipt verified", on_done=on_done)

        async def do_report() -> None:
            try:
                res = await workflows.report_receipt(
                    backend.process_supervisor,
                    batch_id=receipt.get("batch"),
                    process_execution_id=receipt.get("process_execution"),
                    report_reason=reason.value,
                    report_detail=detail.value or "",
                    actual_received_quantity=actual.value,
                )
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="Issue reported", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Report issue", on_click=do_report).props("outline color=negative")
            ui.button("Verify", on_click=do_verify).props("unelevated color=positive")
    dialog.open()


def open_rm_return_dialog(backend: Backend, batch: dict, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Return Raw Material", f"Batch {batch.get('batch_id', '')}"):
        total = batch.get("total_quantity_kg") or batch.get("planned_quantity")
        ui.label(f"Batch quantity: {format_qty(total, decimals=2)} kg")
        scrapped = ui.number("Scrapped (kg)", value=0, min=0).props("outlined dense").classes("w-full")
        returned = ui.number("Return quantity (kg)", min=0).props("outlined dense").classes("w-full")
        notes = ui.textarea("Notes").props("outlined dense").classes("w-full")
        err = _error_label()

        async def do_return() -> None:
            try:
                res = await workflows.return_rm(
                    backend.inventory,
                    batch_id=batch.get("id"),
                    process_name=str(batch.get("process_name") or ""),
                    total_batch_quantity_kg=total,
                    scrapped_quantity_kg=scrapped.value,
                    return_quantity_kg=returned.value,
                    notes=notes.value or "",
                )
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="RM return recorded", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Return", on_click=do_return).props("unelevated color=primary")
    dialog.open()


# -- work centers -----------------------------------------------------------


async def open_work_center_dialog(backend: Backend, current: dict | None = None, *, on_done: OnDone | None = None) -> None:
    centers_res, sup_res = await backend.work_centers.available(), await backend.work_centers.supervisors()
    if not centers_res.ok or not sup_res.ok:
        ui.notify("Failed to load work centers or supervisors", type="negative")
        return
    centers = {c.get("id"): c.get("name") for c in centers_res.items}
    sups = sup_res.items
    for s in sups:
        s.setdefault("full_name", " ".join(p for p in [s.get("first_name"), s.get("last_name")] if p) or s.get("email", ""))
    current = current or {}

    dialog = ui.dialog().props("persistent")
    with dialog, _card("Work Center Supervisors", "Edit" if current else "Add"):
        center = ui.select(centers, label="Work center", value=current.get("work_center")).props("outlined dense").classes("w-full")
        default = searchable_dropdown(sups, display_key="full_name", value_key="id", search_keys=["full_name", "email"],
                                      label="Default supervisor", value=current.get("default_supervisor"))
        backup = searchable_dropdown(sups, display_key="full_name", value_key="id", search_keys=["full_name", "email"],
                                     label="Backup supervisor", value=current.get("backup_supervisor"))
        deadline = ui.input("Check-in deadline (HH:MM)", value=current.get("check_in_deadline") or "09:15").props("outlined dense")
        err = _error_label()

        async def do_save() -> None:
            form = {
                "work_center_id": center.value,
                "default_supervisor_id": default.value,
                "backup_supervisor_id": backup.value,
                "check_in_deadline": deadline.value,
            }
            try:
                res = await workflows.save_work_center(backend.work_centers, form, work_center_id=current.get("id"))
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="Work center saved", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Save", on_click=do_save).props("unelevated color=primary")
    dialog.open()


# -- order creation ---------------------------------------------------------


async def open_create_mo_dialog(backend: Backend, *, on_done: OnDone | None = None) -> None:
    res = await backend.manufacturing.products()
    if not res.ok:
        ui.notify(f"Failed to load products: {res.message}", type="negative")
        return
    products = res.items
    for p in products:
        p.setdefault("display_name", p.get("product_code") or "")

    dialog = ui.dialog().props("persistent")
    with dialog, _card("Create Manufacturing Order", width="720px"):
        product = searchable_dropdown(
            products, display_key="display_name", value_key="id", search_keys=["display_name", "product_code"], label="Product"
        )
        customer = ui.input("Customer name").props("outlined dense").classes("w-full")
        quantity = ui.number("Quantity (pcs)", min=1, precision=0).props("outlined dense").classes("w-full")
        with ui.row().classes("w-full gap-4 no-wrap"):
            start = ui.input("Planned start (YYYY-MM-DD)").props("outlined dense type=date").classes("flex-1")
            end = ui.input("Planned end (YYYY-MM-DD)").props("outlined dense type=date").classes("flex-1")
        priority = ui.select({p: priority_label(p) for p in MO_PRIORITIES}, value="medium", label="Priority").props(
            "outlined dense"
        ).classes("w-full")
        instructions = ui.textarea("Special instructions").props("outlined dense").classes("w-full")
        err = _error_label()

        async def do_create() -> None:
            form = {
                "product_code_id": product.value,
                "customer_name": customer.value or "",
                "quantity": quantity.value,
                "planned_start_date": start.value,
                "planned_end_date": end.value,
                "priority": priority.value,
                "special_instructions": instructions.value or "",
            }
            try:
                res = await workflows.create_mo(backend.manufacturing, form)
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="Manufacturing order created", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Create MO", on_click=do_create).props("unelevated color=primary")
    dialog.open()


def open_approve_mo_dialog(backend: Backend, mo: ManufacturingOrder, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Approve Manufacturing Order", f"MO {mo.mo_id}"):
        ui.label(mo.product_line)
        ui.label(f"Customer: {mo.customer_name or '-'}").classes("text-sm text-slate-600")
        ui.label(f"Planned: {mo.planned_start_date or '-'} to {mo.planned_end_date or '-'}").classes("text-sm text-slate-600")
        notes = ui.textarea("Approval notes (optional)").props("outlined dense").classes("w-full")

        async def do_approve() -> None:
            res = await workflows.approve_mo(backend.manufacturing, mo_id=mo.id, notes=notes.value or "")
            await _finish(dialog, res, success="MO approved successfully!", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Approve", on_click=do_approve).props("unelevated color=positive")
    dialog.open()


async def open_create_outsourcing_dialog(backend: Backend, *, on_done: OnDone | None = None) -> None:
    res = await backend.outsourcing.vendors()
    if not res.ok:
        ui.notify(f"Failed to load vendors: {res.message}", type="negative")
        return
    vendors = {v.get("id"): str(v.get("name") or "") for v in res.items}
    items: list[dict] = [{"mo_number": "", "product_code": "", "qty": None, "kg": None, "notes": ""}]

    dialog = ui.dialog().props("persistent")
    with dialog, _card("Create Outsourcing Request", "Items sent to an external vendor", width="900px"):
        vendor = ui.select(vendors, label="Vendor").props("outlined dense").classes("w-full")
        with ui.row().classes("w-full gap-4 no-wrap"):
            expected = ui.input("Expected return date").props("outlined dense type=date").classes("flex-1")
            contact = ui.input("Vendor contact person").props("outlined dense").classes("flex-1")
        notes = ui.textarea("Notes").props("outlined dense").classes("w-full")
        ui.label("Items").classes("font-semibold")

        @ui.refreshable
        def item_rows() -> None:
            for item in items:
                with ui.row().classes("w-full items-center gap-2 no-wrap"):
                    ui.input("MO number").bind_value(item, "mo_number").props("outlined dense").classes("w-40")
                    ui.input("Product code").bind_value(item, "product_code").props("outlined dense").classes("w-40")
                    ui.number("Qty (pcs)", min=0, precision=0).bind_value(item, "qty").props("outlined dense").classes("w-28")
                    ui.number("Weight (kg)", min=0).bind_value(item, "kg").props("outlined dense").classes("w-28")
                    ui.input("Notes").bind_value(item, "notes").props("outlined dense").classes("flex-1")
                    if len(items) > 1:
                        ui.button(icon="delete", on_click=lambda _, it=item: _remove(it)).props("flat round dense color=negative")

        def _add() -> None:
            items.append({"mo_number": "", "product_code": "", "qty": None, "kg": None, "notes": ""})
            item_rows.refresh()

        def _remove(item: dict) -> None:
            items.remove(item)
            item_rows.refresh()

        item_rows()
        ui.button("Add item", icon="add", on_click=_add).props("flat dense no-caps")
        err = _error_label()

        async def do_create() -> None:
            form = {
                "vendor_id": vendor.value,
                "expected_return_date": expected.value,
                "vendor_contact_person": contact.value or "",
                "notes": notes.value or "",
            }
            try:
                res = await workflows.create_outsourcing_request(backend.outsourcing, form, items)
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="Outsourcing request created successfully!", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Create request", on_click=do_create).props("unelevated color=primary")
    dialog.open()


# -- packing zone -----------------------------------------------------------


def open_packing_dialog(backend: Backend, batch: dict, *, on_done: OnDone | None = None) -> None:
    plan = PackingPlan.from_batch(batch)
    dialog = ui.dialog().props("persistent")
    with dialog, _card("Pack Batch", f"{batch.get('batch_id', '')} - {batch.get('product_code', '')}"):
        ui.label(
            f"Available: {format_qty(plan.total_kg, decimals=3)} kg, "
            f"{format_qty(plan.packing_size)} pcs per pack at {format_qty(plan.grams_per_product, decimals=2)} g"
        ).classes("text-sm text-slate-600")
        ui.label(f"Theoretical packs: {plan.theoretical_packs}").classes("font-semibold")
        packs = ui.number("Actual packs", min=0, precision=0).props("outlined dense").classes("w-full")
        loose = ui.number("Loose weight (kg)", min=0, value=0).props("outlined dense").classes("w-full")

        @ui.refreshable
        def figures() -> None:
            ui.label(
                f"Loose pieces: {plan.loose_pieces(loose.value)}  "
                f"Variance: {plan.variance_kg(packs.value, loose.value):.3f} kg"
            ).classes("text-sm")

        figures()
        packs.on_value_change(lambda _: figures.refresh())
        loose.on_value_change(lambda _: figures.refresh())
        err = _error_label()

        async def do_pack() -> None:
            try:
                res = await workflows.pack_batch(backend.packing_zone, plan, actual_packs=packs.value, loose_kg=loose.value)
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="Packing completed successfully!", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Pack", on_click=do_pack).props("unelevated color=primary")
    dialog.open()


def open_verify_batch_dialog(backend: Backend, batch: dict, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    reasons = {value: label for value, label, _ in PACKING_ISSUE_REASONS}
    with dialog, _card("Verify Batch", f"{batch.get('batch_id', '')} - {batch.get('product_code', '')}"):
        ui.label(f"Quantity: {format_qty(batch.get('quantity_kg') or batch.get('planned_quantity'), decimals=3)} kg")
        reason = ui.select(reasons, label="Issue reason").props("outlined dense").classes("w-full")
        actual = ui.number("Actual quantity received (kg)", min=0).props("outlined dense").classes("w-full")
        actual.bind_visibility_from(reason, "value", backward=lambda v: v in ("low_qty", "high_qty"))
        notes = ui.textarea("Notes / details").props("outlined dense").classes("w-full")
        err = _error_label()

        async def do_verify() -> None:
            res = await backend.packing_zone.verify_batch(batch.get("id"))
            await _finish(dialog, res, success="Batch verified", on_done=on_done)

        async def do_report() -> None:
            try:
                res = await workflows.report_packing_issue(
                    backend.packing_zone,
                    batch_id=batch.get("id"),
                    reason=reason.value,
                    notes=notes.value or "",
                    actual_kg=actual.value,
                )
            except FormValidationError as ex:
                _show_errors(err, ex.errors)
                return
            await _finish(dialog, res, success="Issue reported successfully!", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Report issue", on_click=do_report).props("outline color=negative")
            ui.button("Verify", on_click=do_verify).props("unelevated color=positive")
    dialog.open()


# -- admin ------------------------------------------------------------------


def open_deactivate_user_dialog(backend: Backend, user: dict, *, on_done: OnDone | None = None) -> None:
    dialog = ui.dialog().props("persistent")
    name = user.get("full_name") or user.get("email") or ""
    with dialog, _card("Deactivate User", name):
        ui.label("The user will no longer be able to sign in.").classes("text-sm text-slate-600")

        async def do_deactivate() -> None:
            res = await backend.admin.deactivate_user(user.get("id"))
            await _finish(dialog, res, success=f"{name} deactivated", on_done=on_done)

        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button("Deactivate", on_click=do_deactivate).props("unelevated color=negative")
    dialog.open()
