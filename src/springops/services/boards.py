"""Page state for dashboard tabs and summary panels.

These objects hold what a dashboard page keeps between renders (filters, sort,
page, loaded rows, stats) and talk to the API through injected callables, so
they can be exercised without a browser.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable

from springops.api.results import ApiResult
from springops.core.models import OutsourcingRequest

logger = logging.getLogger(__name__)

Fetch = Callable[[dict], Awaitable[ApiResult]]


@dataclass
class TableQuery:
    filters: dict[str, Any] = field(default_factory=dict)
    search: str = ""
    sort_by: str | None = None
    sort_order: str = "asc"
    page: int = 1
    page_size: int | None = None

    def set_filter(self, name: str, value: Any) -> None:
        self.filters[name] = value
        self.page = 1

    def set_search(self, text: str | None) -> None:
        self.search = str(text or "")
        self.page = 1

    def clear_filters(self) -> None:
        self.filters.clear()
        self.search = ""
        self.page = 1

    def toggle_sort(self, field_name: str) -> None:
        if self.sort_by == field_name:
            self.sort_order = "desc" if self.sort_order == "asc" else "asc"
        else:
            self.sort_by = field_name
            self.sort_order = "asc"

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        for name, value in self.filters.items():
            if value is None or (isinstance(value, str) and value.strip() == ""):
                continue
            params[name] = value
        if self.search.strip():
            params["search"] = self.search.strip()
        if self.sort_by:
            params["sort_by"] = self.sort_by
            params["sort_order"] = self.sort_order
        if self.page > 1:
            params["page"] = self.page
        if self.page_size:
            params["page_size"] = self.page_size
        return params


class TableTab:
    """One list tab: server-side filtered/sorted/paged rows.

    Sorting is delegated to the backend through ``sort_by``/``sort_order``.
    """

    def __init__(self, fetch: Fetch, query: TableQuery | None = None, *, name: str = ""):
        self._fetch = fetch
        self.query = query or TableQuery()
        self.name = name
        self.rows: list[dict] = []
        self.total_pages = 1
        self.count = 0
        self.loading = False
        self.error: str | None = None
        self.loaded = False

    async def refresh(self) -> list[dict]:
        self.loading = True
        try:
            res = await self._fetch(self.query.to_params())
        finally:
            self.loading = False
        self.loaded = True
        if not res.ok:
            self.error = res.message or "Failed to load records"
            logger.warning("Loading %s failed: %s", self.name or "table", self.error)
            return self.rows
        self.error = None
        self.rows = list(res.items)
        self.total_pages = res.total_pages
        self.count = res.count
        return self.rows

    async def set_filter(self, name: str, value: Any) -> list[dict]:
        self.query.set_filter(name, value)
        return await self.refresh()

    async def set_search(self, text: str | None) -> list[dict]:
        self.query.set_search(text)
        return await self.refresh()

    async def toggle_sort(self, field_name: str) -> list[dict]:
        self.query.toggle_sort(field_name)
        return await self.refresh()

    async def set_page(self, page: int) -> list[dict]:
        self.query.page = max(1, min(int(page), max(1, self.total_pages)))
        return await self.refresh()

    async def clear_filters(self) -> list[dict]:
        self.query.clear_filters()
        return await self.refresh()

    @property
    def is_empty(self) -> bool:
        return self.loaded and not self.rows


class StatsPanel:
    """Aggregate stats fetched once per page build and on manual refresh.

    A failed load keeps the previously shown values.
    """

    def __init__(self, fetch: Callable[[], Awaitable[ApiResult]], placeholder: dict | None = None):
        self._fetch = fetch
        self.stats: dict = dict(placeholder or {})
        self.loading = False
        self.last_error: str | None = None

    async def load(self) -> dict:
        self.loading = True
        try:
            res = await self._fetch()
        finally:
            self.loading = False
        if not res.ok:
            self.last_error = res.message
            logger.error("Failed to load dashboard stats: %s", res.message)
            return self.stats
        self.last_error = None
        data = res.data
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        if isinstance(data, dict):
            self.stats = data
        return self.stats

    def value(self, key: str, default: Any = 0) -> Any:
        value = self.stats.get(key)
        return default if value is None else value


SUMMARY_CARDS: list[tuple[str, str]] = [
    ("total_requests", "Total Requests"),
    ("pending_returns", "Pending Returns"),
    ("overdue_returns", "Overdue Returns"),
    ("recent_requests", "Recent (30 days)"),
]


class OutsourcingBoard:
    """Outsourcing management: summary cards, filtered request list, row actions."""

    def __init__(self, api, *, user_id=None, today: Callable[[], date] = date.today):
        self.api = api
        self.user_id = user_id
        self._today = today
        self.table = TableTab(api.list, name="outsourcing requests")
        self.summary = StatsPanel(api.summary, placeholder={k: 0 for k, _ in SUMMARY_CARDS})

    async def load(self) -> None:
        await self.summary.load()
        await self.table.refresh()

    def summary_cards(self) -> list[tuple[str, str]]:
        """(label, rendered value) pairs, values shown as-is."""
        return [(label, str(self.summary.value(key))) for key, label in SUMMARY_CARDS]

    @property
    def requests(self) -> list[OutsourcingRequest]:
        return [OutsourcingRequest.from_api(r) for r in self.table.rows]

    async def set_status_filter(self, status: str | None) -> list[dict]:
        return await self.table.set_filter("status", status or "")

    async def set_search(self, text: str | None) -> list[dict]:
        return await self.table.set_search(text)

    async def _after(self, res: ApiResult, action: str) -> ApiResult:
        if res.ok:
            await self.load()
        else:
            logger.error("Outsourcing %s failed: %s", action, res.message)
        return res

    async def send(self, request_id, *, contact_person: str = "") -> ApiResult:
        payload = {"date_sent": self._today().isoformat(), "vendor_contact_person": contact_person}
        return await self._after(await self.api.send(request_id, payload), "send")

    async def return_items(self, request: OutsourcingRequest, *, returned_items: list[dict] | None = None) -> ApiResult:
        if returned_items is None:
            returned_items = [
                {
                    "id": item.get("id"),
                    "returned_qty": item.get("qty") or item.get("quantity") or 0,
                    "returned_kg": item.get("kg") or 0,
                }
                for item in request.items
            ]
        payload = {
            "collection_date": self._today().isoformat(),
            "collected_by_id": self.user_id,
            "returned_items": returned_items,
        }
        return await self._after(await self.api.return_items(request.id, payload), "return")

    async def close(self, request_id) -> ApiResult:
        return await self._after(await self.api.close(request_id), "close")
