from __future__ import annotations

from dataclasses import dataclass, field, replace

from springops.core.forms import FormValidationError, coerce_float


@dataclass(frozen=True)
class DispatchLine:
    batch_id: str
    product_code: str = ""
    available_quantity: float = 0
    dispatch_quantity: int = 0
    location: str = "FG Store"


@dataclass(frozen=True)
class DispatchDraft:
    mo: dict
    lines: list[DispatchLine] = field(default_factory=list)
    total_quantity: int = 0
    notes: str = ""
    delivery_reference: str = ""


def lines_from_batches(batches: list[dict]) -> list[DispatchLine]:
    return [
        DispatchLine(
            batch_id=str(b.get("batch_id") or ""),
            product_code=str(b.get("product_code") or ""),
            available_quantity=coerce_float(b.get("quantity_available")) or 0.0,
            location=str(b.get("location_in_store") or "FG Store"),
        )
        for b in batches
    ]


def set_quantity(lines: list[DispatchLine], batch_id: str, quantity) -> list[DispatchLine]:
    """Return new lines with the typed quantity applied; junk input counts as 0."""
    qty = coerce_float(quantity)
    qty_int = int(qty) if qty is not None else 0
    return [replace(ln, dispatch_quantity=qty_int) if ln.batch_id == batch_id else ln for ln in lines]


def total_quantity(lines: list[DispatchLine]) -> int:
    return sum(ln.dispatch_quantity for ln in lines)


def validate_dispatch(lines: list[DispatchLine]) -> dict[str, str]:
    """Errors keyed by batch id, plus 'general' when nothing was selected."""
    errors: dict[str, str] = {}
    selected = False
    for ln in lines:
        if ln.dispatch_quantity < 0:
            errors[ln.batch_id] = f"Batch {ln.batch_id}: dispatch quantity must be greater than 0"
            continue
        if ln.dispatch_quantity == 0:
            continue
        selected = True
        if ln.dispatch_quantity > ln.available_quantity:
            errors[ln.batch_id] = (
                f"Batch {ln.batch_id}: cannot dispatch {ln.dispatch_quantity} units. "
                f"Available: {ln.available_quantity:g}"
            )
    if not selected and not errors:
        errors["general"] = "Please specify quantities to dispatch for at least one batch"
    return errors


def build_draft(mo: dict, lines: list[DispatchLine], *, notes: str = "", delivery_reference: str = "") -> DispatchDraft:
    errors = validate_dispatch(lines)
    if errors:
        raise FormValidationError(errors)
    selected = [ln for ln in lines if ln.dispatch_quantity > 0]
    return DispatchDraft(
        mo=dict(mo),
        lines=selected,
        total_quantity=total_quantity(selected),
        notes=str(notes or "").strip(),
        delivery_reference=str(delivery_reference or "").strip(),
    )


def transaction_payload(draft: DispatchDraft, line: DispatchLine, *, supervisor_id, confirmation_notes: str = "") -> dict:
    notes = draft.notes
    if confirmation_notes:
        notes = f"{notes}\nConfirmation Notes: {confirmation_notes}"
    return {
        "mo": draft.mo.get("mo_id"),
        "dispatch_batch": line.batch_id,
        "customer_c_id": draft.mo.get("customer_c_id"),
        "quantity_dispatched": line.dispatch_quantity,
        "supervisor_id": supervisor_id,
        "notes": notes.strip(),
        "delivery_reference": draft.delivery_reference,
    }


class DispatchForm:
    """Quantities typed into the dispatch dialog, plus the errors of the last review attempt.

    Typing only updates ``lines`` and clears ``errors``; the quantity inputs
    themselves are never rebuilt.
    """

    def __init__(self, mo: dict, batches: list[dict]):
        self.mo = dict(mo)
        self.lines = lines_from_batches(batches)
        self.errors: dict[str, str] = {}

    def set_quantity(self, batch_id: str, value) -> None:
        self.lines = set_quantity(self.lines, batch_id, value)
        self.errors = {}

    @property
    def total(self) -> int:
        return total_quantity(self.lines)

    def review(self, *, notes: str = "", delivery_reference: str = "") -> DispatchDraft | None:
        try:
            return build_draft(self.mo, self.lines, notes=notes, delivery_reference=delivery_reference)
        except FormValidationError as ex:
            self.errors = ex.errors
            return None
