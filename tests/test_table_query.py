import asyncio

from springops.api.results import ErrorKind
from springops.services.boards import StatsPanel, TableQuery, TableTab

from fakes import fail, ok


def test_toggle_sort_flips_order_then_resets_for_new_column():
    q = TableQuery()
    q.toggle_sort("mo_id")
    assert (q.sort_by, q.sort_order) == ("mo_id", "asc")
    q.toggle_sort("mo_id")
    assert q.sort_order == "desc"
    q.toggle_sort("priority")
    assert (q.sort_by, q.sort_order) == ("priority", "asc")


def test_filters_reset_page_and_skip_blank_values():
    q = TableQuery(page=4)
    q.set_filter("status", "in_progress")
    q.set_filter("priority", "")
    assert q.page == 1
    q.page = 3
    q.set_search("  MO-1  ")
    assert q.page == 1
    assert q.to_params() == {"status": "in_progress", "search": "MO-1"}

    q.toggle_sort("created_at")
    q.page = 2
    assert q.to_params()["sort_order"] == "asc"
    assert q.to_params()["page"] == 2

    q.clear_filters()
    assert q.to_params() == {"sort_by": "created_at", "sort_order": "asc"}


class Recorder:
    def __init__(self, *results):
        self.results = list(results)
        self.params = []

    async def __call__(self, params):
        self.params.append(params)
        return self.results.pop(0) if len(self.results) > 1 else self.results[0]


def test_refresh_loads_rows_and_paging():
    fetch = Recorder(ok({"results": [{"id": 1}, {"id": 2}], "count": 42, "total_pages": 3}))
    tab = TableTab(fetch, name="mos")
    asyncio.run(tab.refresh())
    assert tab.rows == [{"id": 1}, {"id": 2}]
    assert (tab.count, tab.total_pages) == (42, 3)

    asyncio.run(tab.set_page(9))
    assert fetch.params[-1] == {"page": 3}
    asyncio.run(tab.toggle_sort("mo_id"))
    assert fetch.params[-1] == {"page": 3, "sort_by": "mo_id", "sort_order": "asc"}


def test_refresh_error_keeps_rows():
    fetch = Recorder(ok([{"id": 1}]), fail(ErrorKind.SERVER, "Server exploded", status=500))
    tab = TableTab(fetch)
    asyncio.run(tab.refresh())
    asyncio.run(tab.set_filter("status", "completed"))
    assert tab.rows == [{"id": 1}]
    assert tab.error == "Server exploded"
    assert not tab.is_empty


def test_empty_result_is_empty():
    tab = TableTab(Recorder(ok([])))
    assert not tab.is_empty
    asyncio.run(tab.refresh())
    assert tab.is_empty


def test_stats_panel_unwraps_data_envelope():
    async def fetch():
        return ok({"success": True, "data": {"total_mos": 12, "in_progress": None}})

    panel = StatsPanel(fetch, placeholder={"total_mos": 0})
    asyncio.run(panel.load())
    assert panel.value("total_mos") == 12
    assert panel.value("in_progress", "-") == "-"
