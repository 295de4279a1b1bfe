import asyncio
from datetime import date

from springops.api.results import ErrorKind
from springops.core.models import ManufacturingOrder, OutsourcingRequest
from springops.services.boards import OutsourcingBoard

from fakes import MOCK_REQUESTS, FakeOutsourcingApi, fail


def _board(api=None):
    api = api or FakeOutsourcingApi()
    board = OutsourcingBoard(api, user_id=42, today=lambda: date(2024, 1, 20))
    asyncio.run(board.load())
    return api, board


def test_load_fills_summary_and_rows():
    api, board = _board()
    cards = dict(board.summary_cards())
    assert cards["Total Requests"] == "2"
    assert cards["Overdue Returns"] == "1"
    assert cards["Recent (30 days)"] == "2"
    assert [r.request_id for r in board.requests] == ["OUT-20240101-0001", "OUT-20240101-0002"]
    assert api.calls_named("list") == [("list", {})]


def test_row_actions_follow_status():
    draft, sent = (OutsourcingRequest.from_api(r) for r in MOCK_REQUESTS)
    assert draft.can_send and not draft.can_return
    assert sent.can_return and not sent.can_close
    assert sent.is_overdue


def test_status_filter_refetches():
    api, board = _board()
    asyncio.run(board.set_status_filter("sent"))
    assert api.calls_named("list")[-1] == ("list", {"status": "sent"})

    asyncio.run(board.set_status_filter(None))
    assert api.calls_named("list")[-1] == ("list", {})


def test_search_refetches():
    api, board = _board()
    asyncio.run(board.set_search("Another"))
    assert api.calls_named("list")[-1] == ("list", {"search": "Another"})


def test_send_posts_todays_date_and_reloads():
    api, board = _board()
    res = asyncio.run(board.send(1))
    assert res.ok
    assert api.calls_named("send") == [("send", 1, {"date_sent": "2024-01-20", "vendor_contact_person": ""})]
    assert len(api.calls_named("list")) == 2
    assert len(api.calls_named("summary")) == 2


def test_return_items_sends_every_item():
    api, board = _board()
    request = board.requests[1]
    asyncio.run(board.return_items(request))
    (_, request_id, payload), = api.calls_named("return_items")
    assert request_id == 2
    assert payload["collection_date"] == "2024-01-20"
    assert payload["collected_by_id"] == 42
    assert payload["returned_items"] == [{"id": 21, "returned_qty": 10, "returned_kg": 1.5}]


def test_failed_action_does_not_reload():
    class Failing(FakeOutsourcingApi):
        async def close(self, request_id):
            self.calls.append(("close", request_id))
            return fail(ErrorKind.VALIDATION, "Cannot close", status=400)

    api, board = _board(Failing())
    res = asyncio.run(board.close(2))
    assert not res.ok
    assert len(api.calls_named("list")) == 1


def test_summary_failure_keeps_previous_values():
    class FlakySummary(FakeOutsourcingApi):
        async def summary(self):
            return fail(ErrorKind.SERVER, "down", status=500)

    _, board = _board(FlakySummary())
    assert dict(board.summary_cards())["Total Requests"] == "0"
    assert board.summary.last_error == "down"


def test_total_items_accepts_decimal_strings():
    assert OutsourcingRequest.from_api({"id": 1, "request_id": "OUT-1", "total_items": "2.0"}).total_items == 2
    assert OutsourcingRequest.from_api({"id": 1, "request_id": "OUT-1", "total_items": "junk"}).total_items == 0


def test_manufacturing_order_actions_follow_status():
    mo = ManufacturingOrder.from_api(
        {"id": 4, "mo_id": "MO-4", "product_code": {"product_code": "SP-9"}, "quantity": 1500, "status": "submitted"}
    )
    assert mo.awaiting_approval
    assert not mo.can_stop
    assert mo.product_line == "SP-9 - 1,500 pcs"

    running = ManufacturingOrder.from_api({"id": 4, "mo_id": "MO-4", "status": "in_progress"})
    assert running.can_stop
    assert not running.awaiting_approval
