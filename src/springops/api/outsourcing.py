from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/manufacturing/outsourcing"


class OutsourcingApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/", filters)

    async def create(self, data: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/", data)

    async def send(self, request_id, data: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/{request_id}/send/", data)

    async def return_items(self, request_id, data: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/{request_id}/return_items/", data)

    async def close(self, request_id) -> ApiResult:
        return await self.client.post(f"{BASE}/{request_id}/close/")

    async def summary(self) -> ApiResult:
        return await self.client.get(f"{BASE}/summary/")

    async def vendors(self) -> ApiResult:
        return await self.client.get("/third-party/vendors/", {"vendor_type": "outsource_vendor"})
