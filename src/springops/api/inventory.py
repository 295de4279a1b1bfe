from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/inventory"


class InventoryApi:
    """Raw material store: materials, heat numbers and RM returns."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def rm_mos(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get("/manufacturing/manufacturing-orders/", {"status": "mo_approved", **(filters or {})})

    async def rm_returns(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/rm-returns/", filters)

    async def create_rm_return(self, payload: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/rm-returns/", payload)

    async def dashboard_stats(self) -> ApiResult:
        return await self.client.get(f"{BASE}/dashboard/stats/")
