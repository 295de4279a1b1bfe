from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult


class AdminApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def users(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get("/auth/users/", filters)

    async def deactivate_user(self, user_id) -> ApiResult:
        return await self.client.post(f"/auth/users/{user_id}/deactivate/")

    async def roles(self) -> ApiResult:
        return await self.client.get("/auth/roles/")

    async def dashboard_stats(self) -> ApiResult:
        return await self.client.get("/auth/users/dashboard_stats/")
