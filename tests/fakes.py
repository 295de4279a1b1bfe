"""Hand-written stand-ins for the domain API objects used by the board/feed tests."""

from __future__ import annotations

from springops.api.results import ApiResult, ErrorKind


def ok(data, status: int = 200) -> ApiResult:
    return ApiResult.success(data, status=status)


def fail(kind: ErrorKind, message: str = "boom", status: int | None = None) -> ApiResult:
    return ApiResult.failure(kind, message, status=status)


MOCK_REQUESTS = [
    {
        "id": 1,
        "request_id": "OUT-20240101-0001",
        "vendor_name": "Test Vendor",
        "status": "draft",
        "status_display": "Draft",
        "date_sent": None,
        "expected_return_date": "2024-01-15",
        "total_items": 2,
        "is_overdue": False,
        "items": [{"id": 11, "qty": 100, "kg": 12.5}, {"id": 12, "qty": 50, "kg": 6.0}],
    },
    {
        "id": 2,
        "request_id": "OUT-20240101-0002",
        "vendor_name": "Another Vendor",
        "status": "sent",
        "status_display": "Sent",
        "date_sent": "2024-01-01",
        "expected_return_date": "2024-01-10",
        "total_items": 1,
        "is_overdue": True,
        "items": [{"id": 21, "qty": 10, "kg": 1.5}],
    },
]

MOCK_SUMMARY = {"total_requests": 2, "pending_returns": 1, "overdue_returns": 1, "recent_requests": 2}


class FakeOutsourcingApi:
    def __init__(self, requests=None, summary=None):
        self.requests = list(MOCK_REQUESTS if requests is None else requests)
        self.summary_data = dict(MOCK_SUMMARY if summary is None else summary)
        self.calls: list[tuple] = []

    async def list(self, params):
        self.calls.append(("list", dict(params)))
        return ok(list(self.requests))

    async def summary(self):
        self.calls.append(("summary",))
        return ok(dict(self.summary_data))

    async def send(self, request_id, payload):
        self.calls.append(("send", request_id, payload))
        return ok({"message": "Request sent successfully"})

    async def return_items(self, request_id, payload):
        self.calls.append(("return_items", request_id, payload))
        return ok({"message": "Items returned successfully"})

    async def close(self, request_id):
        self.calls.append(("close", request_id))
        return ok({"message": "Request closed successfully"})

    def calls_named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


class FakeNotificationsApi:
    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.unread_result: ApiResult | None = None
        self.mark_read_result: ApiResult | None = None
        self.calls: list[tuple] = []

    async def unread(self, *, cached: bool = True):
        self.calls.append(("unread", cached))
        if self.unread_result is not None:
            return self.unread_result
        return ok({"count": len(self.rows), "results": list(self.rows)})

    async def mark_read(self, notification_id):
        self.calls.append(("mark_read", notification_id))
        if self.mark_read_result is not None:
            return self.mark_read_result
        self.rows = [r for r in self.rows if r["id"] != notification_id]
        return ok({"success": True})

    async def mark_all_read(self):
        self.calls.append(("mark_all_read",))
        self.rows = []
        return ok({"success": True})


class FakeFgStoreApi:
    """Creates transactions with sequential ids; failures are configured per batch / per id."""

    def __init__(self, *, fail_create_for=(), fail_confirm_for=()):
        self.fail_create_for = set(fail_create_for)
        self.fail_confirm_for = set(fail_confirm_for)
        self.created: list[dict] = []
        self.confirmed: list = []
        self._next_id = 100

    async def create_transaction(self, payload):
        if payload["dispatch_batch"] in self.fail_create_for:
            return fail(ErrorKind.VALIDATION, f"Batch {payload['dispatch_batch']} is locked", status=400)
        self._next_id += 1
        self.created.append({**payload, "id": self._next_id})
        return ok({"id": self._next_id, **payload}, status=201)

    async def confirm_transaction(self, transaction_id, notes=""):
        if transaction_id in self.fail_confirm_for:
            return fail(ErrorKind.SERVER, "confirm failed", status=500)
        self.confirmed.append(transaction_id)
        return ok({"id": transaction_id, "status": "confirmed"})
