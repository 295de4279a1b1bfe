"""Client-side form checks for the dashboard dialogs.

Validators return a dict of field -> message; an empty dict means the form can
be submitted. These are presence/format checks only, the backend owns every
business rule.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Iterable


class FormValidationError(ValueError):
    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()) or "invalid form")


STOP_REASONS: list[tuple[str, str]] = [
    ("machine_breakdown", "Machine Breakdown / Repair"),
    ("power_cut", "Power Cut"),
    ("maintenance", "Maintenance"),
    ("material_shortage", "Material Shortage"),
    ("quality_issue", "Quality Issue"),
    ("others", "Others"),
]

# (value, label, requires actual received quantity)
RECEIPT_REPORT_REASONS: list[tuple[str, str, bool]] = [
    ("low_qty_received", "Low Qty Received", True),
    ("high_qty_received", "High Qty Received", True),
    ("damaged_defective", "Damaged / Defective Parts", False),
    ("wrong_product", "Wrong Product Received", False),
    ("others", "Others", False),
]

REWORK_EXCLUDED_PROCESSES = {"final_inspection", "packing", "rm_store", "fg_store"}

# Process name -> RM return location code.
RETURN_LOCATIONS = {
    "Coiling Setup": "coiling",
    "Coiling Operation": "coiling",
    "Coiling QC": "coiling",
    "Coiling/Forming": "coiling",
    "Coiling": "coiling",
    "Tempering Setup": "tempering",
    "Tempering Process": "tempering",
    "Tempering QC": "tempering",
    "Tempering": "tempering",
    "Plating Preparation": "plating",
    "Plating Process": "plating",
    "Plating QC": "plating",
    "Plating": "plating",
    "Packing Setup": "packing",
    "Packing Process": "packing",
    "Label Printing": "packing",
    "Packing": "packing",
}

MIN_STOP_MO_REASON = 10


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def coerce_float(value) -> float | None:
    """Coerce user-typed numbers to float.

    Returns None when value is empty. Accepts ',' as decimal separator.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    s = str(value).strip()
    if not s or s.lower() == "nan":
        return None

    # 1.234,56 -> 1234.56
    if "," in s and "." in s:
        s = s.replace(".", "").replace(",", ".")
    elif "," in s:
        s = s.replace(",", ".")

    try:
        return float(s)
    except ValueError:
        return None


_DIGITS_RE = re.compile(r"^-?\d+$")


def parse_int_strict(value, *, field: str) -> int:
    """Parse an integer field.

    Accepts ints, floats like 12.0, and digit-only strings. Raises ValueError otherwise.
    """
    if value is None:
        raise ValueError(f"{field} is required")
    if isinstance(value, bool):
        raise ValueError(f"{field} is invalid: {value!r}")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(f"{field} must be a whole number: {value!r}")

    s = str(value).strip()
    if not s:
        raise ValueError(f"{field} is required")
    if _DIGITS_RE.match(s):
        return int(s)
    raise ValueError(f"{field} is invalid: {value!r}")


def coerce_date(value) -> str:
    """Coerce date inputs to ISO YYYY-MM-DD."""
    if value is None:
        raise ValueError("date is required")
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    s = str(value).strip()
    if not s:
        raise ValueError("date is required")
    try:
        return datetime.fromisoformat(s).date().isoformat()
    except ValueError:
        pass

    for fmt in ("%d-%m-%Y", "%d/%m/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(s, fmt).date().isoformat()
        except ValueError:
            continue

    raise ValueError(f"invalid date: {value!r}")


def validate_positive(value, *, field: str, label: str | None = None) -> dict[str, str]:
    name = label or field.replace("_", " ").capitalize()
    if _blank(value):
        return {field: f"{name} is required"}
    num = coerce_float(value)
    if num is None:
        return {field: f"{name} must be a valid number"}
    if num <= 0:
        return {field: f"{name} must be greater than 0"}
    return {}


def validate_date_range(
    start,
    end,
    *,
    start_field: str = "start_date",
    end_field: str = "end_date",
    allow_same_day: bool = True,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    parsed: dict[str, str] = {}
    for field, value in ((start_field, start), (end_field, end)):
        try:
            parsed[field] = coerce_date(value)
        except ValueError as ex:
            errors[field] = str(ex).capitalize()
    if errors:
        return errors
    if parsed[end_field] < parsed[start_field]:
        errors[end_field] = "End date cannot be before start date"
    elif not allow_same_day and parsed[end_field] == parsed[start_field]:
        errors[end_field] = "End date must be after start date"
    return errors


def validate_process_stop(stop_reason: str | None, stop_reason_detail: str | None) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(stop_reason):
        errors["stop_reason"] = "Stop reason is required"
    elif stop_reason not in {value for value, _ in STOP_REASONS}:
        errors["stop_reason"] = "Unknown stop reason"
    if stop_reason == "others" and _blank(stop_reason_detail):
        errors["stop_reason_detail"] = 'Please provide details for "Others" reason'
    return errors


def validate_stop_mo(reason: str | None) -> dict[str, str]:
    if _blank(reason) or len(str(reason).strip()) < MIN_STOP_MO_REASON:
        return {"stop_reason": f"Stop reason must be at least {MIN_STOP_MO_REASON} characters"}
    return {}


def validate_rework_redirect(
    *,
    rework_to_process: Any,
    rework_quantity: Any,
    defect_description: str | None,
    available_quantity: float | None,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(rework_to_process):
        errors["rework_to_process"] = "Please select a process for rework"

    if _blank(rework_quantity):
        errors["rework_quantity"] = "Rework quantity is required"
    else:
        qty = coerce_float(rework_quantity) or 0.0
        if qty <= 0:
            errors["rework_quantity"] = "Rework quantity must be greater than 0"
        elif available_quantity and qty > float(available_quantity):
            errors["rework_quantity"] = f"Cannot exceed available rework quantity ({available_quantity} kg)"

    if _blank(defect_description):
        errors["defect_description"] = "Defect description is required"
    return errors


def rework_destinations(processes: Iterable[dict]) -> list[dict]:
    """Processes a final-inspection rework can be redirected to."""
    out = []
    for p in processes:
        key = re.sub(r"\s+", "_", str(p.get("name") or "").strip().lower())
        if key in REWORK_EXCLUDED_PROCESSES:
            continue
        out.append(p)
    return out


def validate_supervisor_assignment(supervisor_id: Any) -> dict[str, str]:
    if _blank(supervisor_id):
        return {"supervisor": "Please select a supervisor"}
    return {}


def validate_work_center(form: dict) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(form.get("work_center_id")):
        errors["work_center_id"] = "Work Center is required"
    if _blank(form.get("default_supervisor_id")):
        errors["default_supervisor_id"] = "Default Supervisor is required"
    if _blank(form.get("backup_supervisor_id")):
        errors["backup_supervisor_id"] = "Backup Supervisor is required"
    if _blank(form.get("check_in_deadline")):
        errors["check_in_deadline"] = "Check-in Deadline is required"

    default_id = form.get("default_supervisor_id")
    if not _blank(default_id) and str(default_id) == str(form.get("backup_supervisor_id")):
        errors["backup_supervisor_id"] = "Backup must be different from default supervisor"
    return errors


def validate_receipt_report(
    report_reason: str | None,
    report_detail: str | None,
    actual_received_quantity: Any,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(report_reason):
        errors["report_reason"] = "Report reason is required"

    requires_actual = any(v == report_reason and req for v, _, req in RECEIPT_REPORT_REASONS)
    if requires_actual and _blank(actual_received_quantity):
        errors["actual_received_quantity"] = "Actual received quantity is required for this reason"
    if not _blank(actual_received_quantity) and coerce_float(actual_received_quantity) is None:
        errors["actual_received_quantity"] = "Actual quantity must be a valid number"

    if report_reason == "others" and _blank(report_detail):
        errors["report_detail"] = 'Please provide details for "Others" reason'
    return errors


def return_location_for(process_name: str | None) -> str | None:
    return RETURN_LOCATIONS.get(str(process_name or "").strip())


def validate_rm_return(
    *,
    total_batch_quantity_kg: Any,
    scrapped_quantity_kg: Any,
    return_quantity_kg: Any,
    process_name: str | None,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    total = coerce_float(total_batch_quantity_kg) or 0.0
    scrapped = coerce_float(scrapped_quantity_kg) or 0.0
    returned = coerce_float(return_quantity_kg) or 0.0

    if total <= 0:
        errors["total_batch_quantity_kg"] = "Total batch quantity must be greater than zero"
    if scrapped < 0:
        errors["scrapped_quantity_kg"] = "Scrapped quantity cannot be negative"
    elif scrapped > total:
        errors["scrapped_quantity_kg"] = "Scrapped quantity cannot exceed total batch quantity"
    if returned <= 0:
        errors["quantity_kg"] = "Return quantity must be greater than zero"
    if return_location_for(process_name) is None:
        errors["location"] = "Unsupported process location"
    return errors


def _whole_positive(value) -> int | None:
    try:
        num = parse_int_strict(value, field="value")
    except ValueError:
        return None
    return num if num > 0 else None


def validate_mo_form(form: dict) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(form.get("product_code_id")):
        errors["product_code_id"] = "Product is required"
    if _blank(form.get("customer_name")):
        errors["customer_name"] = "Customer name is required"
    if _whole_positive(form.get("quantity")) is None:
        errors["quantity"] = "Valid quantity is required"

    start, end = form.get("planned_start_date"), form.get("planned_end_date")
    if _blank(start):
        errors["planned_start_date"] = "Start date is required"
    if _blank(end):
        errors["planned_end_date"] = "End date is required"
    if not _blank(start) and not _blank(end):
        errors.update(
            validate_date_range(
                start,
                end,
                start_field="planned_start_date",
                end_field="planned_end_date",
                allow_same_day=False,
            )
        )
    if form.get("priority") and form["priority"] not in {"low", "medium", "high", "urgent"}:
        errors["priority"] = "Unknown priority"
    return errors


def validate_outsourcing_request(form: dict, items: list[dict]) -> dict[str, str]:
    """Request header plus one entry per item; item errors are keyed ``item_<n>_<field>``."""
    errors: dict[str, str] = {}
    if _blank(form.get("vendor_id")):
        errors["vendor_id"] = "Vendor is required"
    if _blank(form.get("expected_return_date")):
        errors["expected_return_date"] = "Expected return date is required"
    else:
        try:
            coerce_date(form["expected_return_date"])
        except ValueError:
            errors["expected_return_date"] = "Expected return date is invalid"

    if not items:
        errors["items"] = "Add at least one item"
    for i, item in enumerate(items):
        if _blank(item.get("mo_number")):
            errors[f"item_{i}_mo_number"] = "MO Number is required"
        if _blank(item.get("product_code")):
            errors[f"item_{i}_product_code"] = "Product Code is required"
        if _whole_positive(item.get("qty")) is None:
            errors[f"item_{i}_qty"] = "Valid quantity is required"
        if validate_positive(item.get("kg"), field="kg"):
            errors[f"item_{i}_kg"] = "Valid weight (kg) is required"
    return errors


def validate_packing(actual_packs, loose_kg) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _whole_positive(actual_packs) is None:
        errors["actual_packs"] = "Please enter valid number of packs"
    loose = coerce_float(loose_kg)
    if _blank(loose_kg) or loose is None or loose < 0:
        errors["loose_kg"] = "Please enter valid loose weight"
    return errors


# (value, label, requires actual kg)
PACKING_ISSUE_REASONS: list[tuple[str, str, bool]] = [
    ("low_qty", "Received Low Qty", True),
    ("high_qty", "Received High Qty", True),
    ("product_mismatch", "Different Product Received", False),
    ("other", "Others", False),
]


def validate_packing_issue(reason: str | None, actual_kg: Any) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(reason):
        errors["reason"] = "Please select a reason"
    requires_actual = any(v == reason and req for v, _, req in PACKING_ISSUE_REASONS)
    if requires_actual and _blank(actual_kg):
        errors["actual_kg"] = "Please enter actual quantity received"
    elif not _blank(actual_kg) and coerce_float(actual_kg) is None:
        errors["actual_kg"] = "Actual quantity must be a valid number"
    return errors


def filter_options(options: list[dict], term: str | None, search_keys: Iterable[str]) -> list[dict]:
    """Case-insensitive substring filter across the given keys."""
    needle = str(term or "").strip().lower()
    if not needle:
        return list(options)
    keys = list(search_keys)
    out = []
    for opt in options:
        for key in keys:
            value = opt.get(key)
            if value is not None and needle in str(value).lower():
                out.append(opt)
                break
    return out
