from __future__ import annotations

from springops.api.client import ApiClient
from springops.api.results import ApiResult

BASE = "/manufacturing"


class ProcessSupervisorApi:
    """Stops, receipts, final-inspection rework and batch completion."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def stop_process(self, payload: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/process-stops/", payload)

    async def resume_process(self, stop_id, resume_notes: str = "") -> ApiResult:
        return await self.client.post(f"{BASE}/process-stops/{stop_id}/resume/", {"resume_notes": resume_notes})

    async def active_stops(self) -> ApiResult:
        return await self.client.get(f"{BASE}/process-stops/active_stops/")

    async def batch_receipts(self, filters: dict | None = None) -> ApiResult:
        return await self.client.get(f"{BASE}/batch-receipts/", filters)

    async def verify_receipt(self, payload: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/batch-receipts/verify/", payload)

    async def report_receipt(self, payload: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/batch-receipts/report/", payload)

    async def create_fi_rework(self, payload: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/fi-reworks/", payload)

    async def complete_batch(self, payload: dict) -> ApiResult:
        return await self.client.post(f"{BASE}/batch-completions/", payload)

    async def pending_batches(self) -> ApiResult:
        return await self.client.get(f"{BASE}/process-executions/supervisor_dashboard/")

    async def process_options(self) -> ApiResult:
        return await self.client.get("/processes/processes/dropdown/")
