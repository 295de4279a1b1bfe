from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/patrol"


class PatrolApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def duties(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/duties/", filters)

    async def uploads(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/uploads/", filters)

    async def upload_sheet(self, upload_id, *, filename: str, content: bytes) -> ApiResult:
        return await self.client.upload(f"{BASE}/uploads/{upload_id}/upload/", filename=filename, content=content, field="qc_image")

    async def dashboard_stats(self) -> ApiResult:
        return await self.client.get(f"{BASE}/duties/dashboard_stats/")
