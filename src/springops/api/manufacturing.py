from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/manufacturing"


class ManufacturingApi:
    """Manufacturing orders, purchase orders, batches and process executions."""

    def __init__(self, client: ApiClient):
        self.client = client

    # -- manufacturing orders
    async def list_mos(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/manufacturing-orders/", filters)

    async def get_mo(self, mo_id) -> ApiResult:
        return await self.client.get(f"{BASE}/manufacturing-orders/{mo_id}/")

    async def create_mo(self, data: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/manufacturing-orders/", data)

    async def approve_mo(self, mo_id, notes: str = "") -> ApiResult:
        return await self.client.post(f"{BASE}/workflow/approve-mo/", {"mo_id": mo_id, "approval_notes": notes})

    async def stop_mo(self, mo_id, stop_reason: str) -> ApiResult:
        return await self.client.post(f"{BASE}/manufacturing-orders/{mo_id}/stop_mo/", {"stop_reason": stop_reason})

    async def mo_dashboard_stats(self) -> ApiResult:
        return await self.client.get(f"{BASE}/manufacturing-orders/dashboard_stats/")

    # -- lookups
    async def products(self) -> ApiResult:
        return await self.client.get(f"{BASE}/manufacturing-orders/products/")

    async def supervisors(self) -> ApiResult:
        return await self.client.get(f"{BASE}/manufacturing-orders/supervisors/")

    # -- purchase orders
    async def list_pos(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/purchase-orders/", filters)

    # -- process executions
    async def process_executions(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/process-executions/", filters)

    async def executions_for_mo(self, mo_id) -> ApiResult:
        return await self.client.get(f"{BASE}/process-executions/by_mo/", {"mo_id": mo_id})

    async def assign_supervisor(self, execution_id, supervisor_id) -> ApiResult:
        return await self.client.post(
            f"{BASE}/process-executions/{execution_id}/assign_supervisor/", {"supervisor_id": supervisor_id}
        )

    async def supervisor_dashboard(self) -> ApiResult:
        return await self.client.get(f"{BASE}/process-executions/supervisor_dashboard/")
