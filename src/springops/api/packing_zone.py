from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/packing-zone"


class PackingZoneApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def pending_verification(self) -> ApiResult:
        return await self.client.get(f"{BASE}/batches/to_be_verified/")

    async def verify_batch(self, batch_id) -> ApiResult:
        return await self.client.post(f"{BASE}/batches/{batch_id}/verify/", {"verified": True})

    async def report_issue(self, batch_id, data: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/batches/{batch_id}/report_issue/", data)

    async def verified_batches(self) -> ApiResult:
        return await self.client.get(f"{BASE}/batches/verified/")

    async def create_packing_transaction(self, data: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/transactions/", data)

    async def loose_stock(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/loose-stock/", filters)

    async def dashboard_stats(self) -> ApiResult:
        return await self.client.get(f"{BASE}/dashboard/stats/")
