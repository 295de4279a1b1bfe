from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/notifications/workflow-notifications"


class NotificationsApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, *, is_read: bool | None = None, action_required: bool | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/", {"is_read": is_read, "action_required": action_required})

    async def unread(self, *, cached: bool = True) -> ApiResult:
        return await self.client.get(f"{BASE}/", {"is_read": False}, cached=cached)

    async def mark_read(self, notification_id) -> ApiResult:
        return await self.client.post(f"{BASE}/{notification_id}/mark_read/")

    async def mark_all_read(self) -> ApiResult:
        return await self.client.post(f"{BASE}/mark_all_read/")
