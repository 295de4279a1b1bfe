"""Submit handlers behind the dashboard dialogs.

Each handler validates the form (raising ``FormValidationError``), makes the
backend call and returns its ``ApiResult``. Callers refetch page state after
a successful result; nothing is updated optimistically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from springops.api.results import ApiResult, ErrorKind
from springops.core import forms
from springops.core.forms import FormValidationError
from springops.core.packing import PackingPlan

logger = logging.getLogger(__name__)


def _check(errors: dict[str, str]) -> None:
    if errors:
        raise FormValidationError(errors)


def _log_failure(action: str, res: ApiResult) -> ApiResult:
    if not res.ok:
        logger.error("%s failed: %s", action, res.message)
    return res


async def stop_process(api, *, execution_id, batch_id, stop_reason: str, stop_reason_detail: str = "", notes: str = "") -> ApiResult:
    _check(forms.validate_process_stop(stop_reason, stop_reason_detail))
    payload = {
        "process_execution": execution_id,
        "batch": batch_id,
        "stop_reason": stop_reason,
        "stop_reason_detail": (stop_reason_detail or "").strip(),
        "notes": (notes or "").strip(),
    }
    return _log_failure("Stopping process", await api.stop_process(payload))


async def resume_process(api, *, stop_id, resume_notes: str = "") -> ApiResult:
    return _log_failure("Resuming process", await api.resume_process(stop_id, (resume_notes or "").strip()))


async def assign_supervisor(api, *, execution_id, supervisor_id) -> ApiResult:
    """Assign a supervisor; only a response echoing ``assigned_supervisor`` counts as success."""
    _check(forms.validate_supervisor_assignment(supervisor_id))
    res = await api.assign_supervisor(execution_id, supervisor_id)
    if not res.ok:
        return _log_failure("Assigning supervisor", res)
    data = res.data if isinstance(res.data, dict) else {}
    if isinstance(data.get("data"), dict):
        data = data["data"]
    if not data.get("assigned_supervisor"):
        logger.error("Supervisor assignment for execution %s returned no assigned_supervisor", execution_id)
        return ApiResult.failure(ErrorKind.SERVER, "Failed to assign supervisor", status=res.status, data=res.data)
    return res


async def stop_mo(api, *, mo_id, stop_reason: str) -> ApiResult:
    _check(forms.validate_stop_mo(stop_reason))
    return _log_failure("Stopping MO", await api.stop_mo(mo_id, stop_reason.strip()))


async def verify_receipt(api, *, batch_id, process_execution_id, notes: str = "") -> ApiResult:
    payload = {"batch_id": batch_id, "process_execution_id": process_execution_id, "notes": (notes or "").strip()}
    return _log_failure("Verifying batch receipt", await api.verify_receipt(payload))


async def report_receipt(
    api,
    *,
    batch_id,
    process_execution_id,
    report_reason: str,
    report_detail: str = "",
    actual_received_quantity=None,
) -> ApiResult:
    _check(forms.validate_receipt_report(report_reason, report_detail, actual_received_quantity))
    payload = {
        "batch_id": batch_id,
        "process_execution_id": process_execution_id,
        "report_reason": report_reason,
        "report_detail": (report_detail or "").strip(),
    }
    qty = forms.coerce_float(actual_received_quantity)
    if qty is not None:
        payload["actual_received_quantity"] = qty
    return _log_failure("Reporting batch receipt", await api.report_receipt(payload))


async def return_rm(
    api,
    *,
    batch_id,
    process_name: str,
    total_batch_quantity_kg,
    scrapped_quantity_kg,
    return_quantity_kg,
    notes: str = "",
) -> ApiResult:
    _check(
        forms.validate_rm_return(
            total_batch_quantity_kg=total_batch_quantity_kg,
            scrapped_quantity_kg=scrapped_quantity_kg,
            return_quantity_kg=return_quantity_kg,
            process_name=process_name,
        )
    )
    payload = {
        "batch": batch_id,
        "location": forms.return_location_for(process_name),
        "quantity_kg": forms.coerce_float(return_quantity_kg),
        "scrapped_quantity_kg": forms.coerce_float(scrapped_quantity_kg) or 0.0,
        "notes": (notes or "").strip(),
    }
    return _log_failure("Returning RM", await api.create_rm_return(payload))


async def save_work_center(api, form: dict, *, work_center_id=None) -> ApiResult:
    _check(forms.validate_work_center(form))
    payload = {
        "work_center": form["work_center_id"],
        "default_supervisor": form["default_supervisor_id"],
        "backup_supervisor": form["backup_supervisor_id"],
        "check_in_deadline": form["check_in_deadline"],
        "is_active": bool(form.get("is_active", True)),
    }
    return _log_failure("Saving work center", await api.save(payload, work_center_id=work_center_id))


async def create_mo(api, form: dict) -> ApiResult:
    _check(forms.validate_mo_form(form))
    payload = {
        "product_code_id": forms.parse_int_strict(form["product_code_id"], field="product_code_id"),
        "customer_name": str(form["customer_name"]).strip(),
        "quantity": forms.parse_int_strict(form["quantity"], field="quantity"),
        "planned_start_date": forms.coerce_date(form["planned_start_date"]),
        "planned_end_date": forms.coerce_date(form["planned_end_date"]),
        "priority": form.get("priority") or "medium",
        "special_instructions": str(form.get("special_instructions") or "").strip(),
    }
    return _log_failure("Creating MO", await api.create_mo(payload))


async def approve_mo(api, *, mo_id, notes: str = "") -> ApiResult:
    return _log_failure("Approving MO", await api.approve_mo(mo_id, (notes or "").strip()))


async def create_outsourcing_request(api, form: dict, items: list[dict]) -> ApiResult:
    _check(forms.validate_outsourcing_request(form, items))
    payload = {
        "vendor_id": forms.parse_int_strict(form["vendor_id"], field="vendor_id"),
        "expected_return_date": forms.coerce_date(form["expected_return_date"]),
        "vendor_contact_person": str(form.get("vendor_contact_person") or "").strip(),
        "notes": str(form.get("notes") or "").strip(),
        "items_data": [
            {
                "mo_number": str(item["mo_number"]).strip(),
                "product_code": str(item["product_code"]).strip(),
                "qty": forms.parse_int_strict(item["qty"], field="qty"),
                "kg": forms.coerce_float(item["kg"]),
                "notes": str(item.get("notes") or "").strip(),
            }
            for item in items
        ],
    }
    return _log_failure("Creating outsourcing request", await api.create(payload))


async def pack_batch(api, plan: PackingPlan, *, actual_packs, loose_kg) -> ApiResult:
    payload = plan.payload(actual_packs, loose_kg)
    return _log_failure("Packing batch", await api.create_packing_transaction(payload))


async def report_packing_issue(api, *, batch_id, reason: str, notes: str = "", actual_kg=None) -> ApiResult:
    _check(forms.validate_packing_issue(reason, actual_kg))
    payload = {"reason": reason, "notes": (notes or "").strip()}
    kg = forms.coerce_float(actual_kg)
    if kg is not None:
        payload["actual_kg"] = kg
    return _log_failure("Reporting packing issue", await api.report_issue(batch_id, payload))


async def upload_qc_sheet(api, *, upload_id, filename: str, content: bytes) -> ApiResult:
    if not upload_id:
        raise FormValidationError({"upload": "Select a duty slot first"})
    return _log_failure("Uploading QC sheet", await api.upload_sheet(upload_id, filename=filename, content=content))


@dataclass
class FinalInspectionFlow:
    """Two-step final inspection: complete the batch, then redirect any rework.

    The completion record stays pending between the steps; it is cleared once
    the redirect succeeds or the user cancels.
    """

    api: object
    pending_completion: dict | None = None
    pending_batch: dict | None = None
    processes: list[dict] = field(default_factory=list)

    @property
    def awaiting_redirect(self) -> bool:
        return self.pending_completion is not None

    @property
    def rework_quantity(self) -> float:
        if not self.pending_completion:
            return 0.0
        return forms.coerce_float(self.pending_completion.get("rework_quantity")) or 0.0

    async def complete(self, batch: dict, completion: dict) -> ApiResult:
        payload = {"batch_id": batch.get("id"), **completion}
        res = await self.api.complete_batch(payload)
        if not res.ok:
            return _log_failure("Completing final inspection", res)
        record = res.data if isinstance(res.data, dict) else {}
        if isinstance(record.get("data"), dict):
            record = record["data"]
        record = {**completion, **record}
        if (forms.coerce_float(record.get("rework_quantity")) or 0) > 0:
            self.pending_completion = record
            self.pending_batch = dict(batch)
        else:
            self.cancel()
        return res

    async def load_destinations(self) -> list[dict]:
        res = await self.api.process_options()
        if res.ok:
            self.processes = forms.rework_destinations(res.items)
        else:
            logger.error("Failed to load rework processes: %s", res.message)
        return self.processes

    async def redirect(self, *, rework_to_process, rework_quantity, defect_description: str) -> ApiResult:
        if not self.awaiting_redirect:
            raise FormValidationError({"general": "No completed inspection is waiting for a rework redirect"})
        _check(
            forms.validate_rework_redirect(
                rework_to_process=rework_to_process,
                rework_quantity=rework_quantity,
                defect_description=defect_description,
                available_quantity=self.rework_quantity,
            )
        )
        payload = {
            "fi_batch_completion_id": self.pending_completion.get("id"),
            "batch_id": (self.pending_batch or {}).get("id"),
            "rework_to_process_id": rework_to_process,
            "rework_quantity": forms.coerce_float(rework_quantity),
            "defect_description": defect_description.strip(),
        }
        res = await self.api.create_fi_rework(payload)
        if res.ok:
            self.cancel()
        else:
            _log_failure("Redirecting rework", res)
        return res

    def destination_name(self, process_id) -> str:
        for p in self.processes:
            if str(p.get("id")) == str(process_id):
                return str(p.get("name") or "selected process")
        return "selected process"

    def cancel(self) -> None:
        self.pending_completion = None
        self.pending_batch = None
