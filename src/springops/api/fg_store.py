from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/fg-store"
DISPATCHABLE_STATUSES = "pending_dispatch,partially_dispatched"


class FgStoreApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def stock_levels(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/dashboard/stock_levels/", filters)

    async def pending_dispatch_mos(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/dashboard/pending_dispatch_mos/", filters)

    async def transactions_log(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/dashboard/transactions_log/", filters)

    async def stock_alerts(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/stock-alerts/", filters)

    async def mark_alert_read(self, alert_id) -> ApiResult:
        return await self.client.post(f"{BASE}/stock-alerts/{alert_id}/mark_read/")

    async def dispatch_batches(self, mo_id) -> ApiResult:
        return await self.client.get(f"{BASE}/dispatch-batches/", {"mo": mo_id, "status": DISPATCHABLE_STATUSES})

    async def create_transaction(self, payload: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/dispatch-transactions/", payload)

    async def confirm_transaction(self, transaction_id, notes: str = "") -> ApiResult:
        return await self.client.post(f"{BASE}/dispatch-transactions/{transaction_id}/confirm/", {"notes": notes})

    async def dashboard_stats(self) -> ApiResult:
        return await self.client.get(f"{BASE}/dashboard/analytics/")
