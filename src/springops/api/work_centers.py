from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/processes/work-centers"


class WorkCentersApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self) -> ApiResult:
        return await self.client.get(f"{BASE}/")

    async def available(self) -> ApiResult:
        return await self.client.get(f"{BASE}/available_work_centers/")

    async def supervisors(self) -> ApiResult:
        return await self.client.get(f"{BASE}/supervisors/")

    async def save(self, data: dict, *, work_center_id=None) -> ApiResult:
        if work_center_id:
            return await self.client.patch(f"{BASE}/{work_center_id}/", data)
        return await self.client.post(f"{BASE}/", data)
