from __future__ import annotations

from dataclasses import dataclass

from springops.core.models import UserSession


LOGIN_ROUTE = "/login"

# (key, label, path); position is the hierarchy level (admin = 0).
ROLE_HIERARCHY: list[tuple[str, str, str]] = [
    ("admin", "Admin", "/admin"),
    ("manager", "Manager", "/manager"),
    ("production_head", "Production Head", "/production-head"),
    ("supervisor", "Supervisor", "/supervisor"),
    ("outsourcing_incharge", "Outsourcing Incharge", "/outsourcing-incharge"),
    ("rm_store", "RM Store", "/rm-store"),
    ("fg_store", "FG Store", "/fg-store"),
    ("packing_zone", "Packing Zone", "/packing-zone"),
    ("patrol", "Patrol", "/patrol"),
]

ROLE_CONFIG: dict[str, dict] = {
    "admin": {
        "title": "Admin Portal",
        "subtitle": "System Administration Access",
        "description": "Manage system settings, users, and global configurations",
        "color": "#dc2626",
        "permissions": ["all"],
    },
    "manager": {
        "title": "Manager Dashboard",
        "subtitle": "Management Operations",
        "description": "Oversee MO Management, Stock, Allocation, Reports, and Part Master",
        "color": "#7c3aed",
        "permissions": ["manage_orders", "view_reports", "stock_allocation", "part_master"],
    },
    "production_head": {
        "title": "Production Head Dashboard",
        "subtitle": "Production Management",
        "description": "Full production oversight with all manager operations plus quality control",
        "color": "#f59e0b",
        "permissions": [
            "manage_orders",
            "view_reports",
            "stock_allocation",
            "part_master",
            "quality_control",
            "process_management",
        ],
    },
    "supervisor": {
        "title": "Supervisor Panel",
        "subtitle": "Process Supervision",
        "description": "Monitor process-specific tasks and team operations",
        "color": "#059669",
        "permissions": ["supervise_processes", "view_batches", "quality_checks", "machine_allocation"],
    },
    "outsourcing_incharge": {
        "title": "Outsourcing Incharge Dashboard",
        "subtitle": "Outsourcing Management",
        "description": "Send and receive batches for outsourcing processes and manage vendor operations",
        "color": "#8b5cf6",
        "permissions": ["send_outsource", "receive_outsource", "manage_outsource_batches", "view_outsource_history"],
    },
    "rm_store": {
        "title": "RM Store Dashboard",
        "subtitle": "Raw Material Management",
        "description": "Manage raw materials, RM stock and returns",
        "color": "#0891b2",
        "permissions": ["manage_inventory", "rawmaterials_crud", "rmstock_management", "stock_transactions"],
    },
    "fg_store": {
        "title": "FG Store & Dispatch Dashboard",
        "subtitle": "Finished Goods Management",
        "description": "Manage finished goods inventory, dispatch operations, and stock levels",
        "color": "#ea580c",
        "permissions": ["dispatch_management", "stock_levels", "mo_dispatch", "transactions_log", "stock_alerts"],
    },
    "packing_zone": {
        "title": "Packing Zone Dashboard",
        "subtitle": "Packing & Labeling Operations",
        "description": "Verify batches, pack products and manage loose stock",
        "color": "#6366f1",
        "permissions": ["verify_batches", "pack_products", "manage_loose_stock"],
    },
    "patrol": {
        "title": "Patrol Dashboard",
        "subtitle": "Quality Control Monitoring",
        "description": "Upload QC sheets at scheduled intervals and track patrol duties",
        "color": "#10b981",
        "permissions": ["upload_qc", "view_patrol_duties", "view_qc_sheets"],
    },
}

ALL_ROLES: frozenset[str] = frozenset(key for key, _, _ in ROLE_HIERARCHY)

# Route prefix -> roles allowed to open it. Longest matching prefix wins;
# routes without a matching prefix are public.
ROUTE_ACCESS: dict[str, frozenset[str]] = {
    "/admin": frozenset({"admin"}),
    "/manager": frozenset({"manager"}),
    "/manager/outsourcing": frozenset({"manager", "production_head", "supervisor"}),
    "/production-head": frozenset({"production_head"}),
    "/supervisor": frozenset({"supervisor"}),
    "/outsourcing-incharge": frozenset({"outsourcing_incharge"}),
    "/rm-store": frozenset({"rm_store"}),
    "/fg-store": frozenset({"fg_store"}),
    "/packing-zone": frozenset({"packing_zone", "production_head", "manager"}),
    "/patrol": frozenset({"patrol"}),
    "/notifications": ALL_ROLES,
}


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect_to: str | None = None


def is_valid_role(role: str | None) -> bool:
    return str(role or "") in ALL_ROLES


def role_level(role: str | None) -> int | None:
    for idx, (key, _, _) in enumerate(ROLE_HIERARCHY):
        if key == role:
            return idx
    return None


def get_role_config(role: str | None) -> dict | None:
    cfg = ROLE_CONFIG.get(str(role or ""))
    if cfg is None:
        return None
    for key, label, path in ROLE_HIERARCHY:
        if key == role:
            return {**cfg, "key": key, "label": label, "path": path}
    return None


def get_role_by_path(path: str) -> str | None:
    for key, _, role_path in ROLE_HIERARCHY:
        if role_path == path:
            return key
    return None


def role_home(role: str | None) -> str:
    cfg = get_role_config(role)
    if not cfg:
        return LOGIN_ROUTE
    return f"{cfg['path']}/dashboard"


def allowed_roles_for(route: str) -> frozenset[str] | None:
    """Return the allowed roles for a route, or None when the route is public."""
    path = "/" + str(route or "").strip().strip("/")
    best: str | None = None
    for prefix in ROUTE_ACCESS:
        if path == prefix or path.startswith(prefix + "/"):
            if best is None or len(prefix) > len(best):
                best = prefix
    if best is None:
        return None
    return ROUTE_ACCESS[best]


def check_access(route: str, session: UserSession) -> AccessDecision:
    allowed = allowed_roles_for(route)
    if allowed is None:
        return AccessDecision(allowed=True)
    if not session.is_authenticated:
        return AccessDecision(allowed=False, redirect_to=LOGIN_ROUTE)
    if session.role not in allowed:
        return AccessDecision(allowed=False, redirect_to=LOGIN_ROUTE)
    return AccessDecision(allowed=True)
