from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from springops.core.formatting import format_qty
from springops.core.forms import coerce_float


MO_STATUSES = [
    "submitted",
    "mo_approved",
    "rm_allocated",
    "in_progress",
    "completed",
    "stopped",
    "cancelled",
]
MO_PRIORITIES = ["low", "medium", "high", "urgent"]
PROCESS_STATUSES = ["pending", "in_progress", "completed", "on_hold", "failed"]
OUTSOURCING_STATUSES = ["draft", "sent", "returned", "closed"]

_STATUS_LABELS = {
    "submitted": "Submitted",
    "mo_approved": "MO Approved",
    "rm_allocated": "RM Allocated",
    "in_progress": "In Progress",
    "completed": "Completed",
    "stopped": "Stopped",
    "cancelled": "Cancelled",
    "pending": "Pending",
    "on_hold": "On Hold",
    "failed": "Failed",
    "draft": "Draft",
    "sent": "Sent",
    "returned": "Returned",
    "closed": "Closed",
    "pending_dispatch": "Pending Dispatch",
    "partially_dispatched": "Partially Dispatched",
    "dispatched": "Dispatched",
}

# Quasar colour names, used for status/priority badges.
_STATUS_COLORS = {
    "submitted": "grey-7",
    "mo_approved": "blue",
    "rm_allocated": "cyan-8",
    "in_progress": "amber-8",
    "completed": "positive",
    "stopped": "negative",
    "cancelled": "grey-6",
    "pending": "grey-7",
    "on_hold": "orange",
    "failed": "negative",
    "draft": "grey-7",
    "sent": "blue",
    "returned": "positive",
    "closed": "purple",
}
_PRIORITY_COLORS = {"low": "grey-6", "medium": "blue", "high": "orange", "urgent": "negative"}


def status_label(status: str | None) -> str:
    s = str(status or "").strip()
    if not s:
        return "-"
    return _STATUS_LABELS.get(s, s.replace("_", " ").title())


def status_color(status: str | None) -> str:
    return _STATUS_COLORS.get(str(status or ""), "grey-6")


def priority_label(priority: str | None) -> str:
    p = str(priority or "").strip()
    return p.title() if p else "-"


def priority_color(priority: str | None) -> str:
    return _PRIORITY_COLORS.get(str(priority or ""), "grey-6")


def _ref_id(value: Any) -> Any:
    """Related objects come either as a bare id or as a nested {id: ...} dict."""
    if isinstance(value, dict):
        return value.get("id")
    return value


@dataclass(frozen=True)
class ManufacturingOrder:
    id: int | None
    mo_id: str
    product_code: str = ""
    quantity: float = 0
    priority: str = "medium"
    status: str = "submitted"
    customer_name: str = ""
    planned_start_date: str | None = None
    planned_end_date: str | None = None
    actual_start_date: str | None = None
    actual_end_date: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "ManufacturingOrder":
        product = data.get("product_code")
        if isinstance(product, dict):
            product = product.get("product_code") or product.get("display_name") or ""
        return cls(
            id=data.get("id"),
            mo_id=str(data.get("mo_id") or ""),
            product_code=str(product or ""),
            quantity=data.get("quantity") or 0,
            priority=str(data.get("priority") or "medium"),
            status=str(data.get("status") or "submitted"),
            customer_name=str(data.get("customer_name") or ""),
            planned_start_date=data.get("planned_start_date"),
            planned_end_date=data.get("planned_end_date"),
            actual_start_date=data.get("actual_start_date"),
            actual_end_date=data.get("actual_end_date"),
        )

    @property
    def awaiting_approval(self) -> bool:
        return self.status == "submitted"

    @property
    def can_stop(self) -> bool:
        return self.status in {"rm_allocated", "in_progress"}

    @property
    def product_line(self) -> str:
        return f"{self.product_code} - {format_qty(self.quantity)} pcs"


@dataclass(frozen=True)
class OutsourcingRequest:
    id: int | None
    request_id: str
    vendor_name: str = ""
    status: str = "draft"
    date_sent: str | None = None
    expected_return_date: str | None = None
    actual_return_date: str | None = None
    total_items: int = 0
    is_overdue: bool = False
    items: list[dict] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "OutsourcingRequest":
        return cls(
            id=data.get("id"),
            request_id=str(data.get("request_id") or ""),
            vendor_name=str(data.get("vendor_name") or ""),
            status=str(data.get("status") or "draft"),
            date_sent=data.get("date_sent"),
            expected_return_date=data.get("expected_return_date"),
            actual_return_date=data.get("actual_return_date"),
            total_items=int(coerce_float(data.get("total_items")) or 0),
            is_overdue=bool(data.get("is_overdue")),
            items=list(data.get("items") or []),
        )

    @property
    def can_send(self) -> bool:
        return self.status == "draft"

    @property
    def can_return(self) -> bool:
        return self.status == "sent"

    @property
    def can_close(self) -> bool:
        return self.status == "returned"


@dataclass(frozen=True)
class Notification:
    id: int
    notification_type: str = ""
    title: str = ""
    message: str = ""
    priority: str = "medium"
    related_mo: Any = None
    related_batch: Any = None
    related_process: Any = None
    mo_id: str | None = None
    is_read: bool = False
    created_at: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Notification":
        return cls(
            id=data.get("id"),
            notification_type=str(data.get("notification_type") or ""),
            title=str(data.get("title") or ""),
            message=str(data.get("message") or ""),
            priority=str(data.get("priority") or "medium"),
            related_mo=_ref_id(data.get("related_mo")),
            related_batch=_ref_id(data.get("related_batch")),
            related_process=_ref_id(data.get("related_process")),
            mo_id=data.get("mo_id"),
            is_read=bool(data.get("is_read")),
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class UserSession:
    token: str | None
    role: str | None
    user: dict = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and bool(self.role)

    @property
    def user_id(self) -> Any:
        return self.user.get("id")

    @property
    def display_name(self) -> str:
        full = " ".join(p for p in [self.user.get("first_name"), self.user.get("last_name")] if p)
        return full or str(self.user.get("email") or self.user.get("username") or "")
