import asyncio

import pytest

from springops.api.results import ErrorKind
from springops.core.forms import FormValidationError
from springops.core.packing import PackingPlan
from springops.services import workflows
from springops.services.workflows import FinalInspectionFlow

from fakes import fail, ok


class FakeSupervisorApi:
    def __init__(self):
        self.calls = []
        self.responses = {}

    def _answer(self, name, *args):
        self.calls.append((name, *args))
        return self.responses.get(name, ok({"success": True, "data": {"id": 77}}))

    async def stop_process(self, payload):
        return self._answer("stop_process", payload)

    async def resume_process(self, stop_id, notes):
        return self._answer("resume_process", stop_id, notes)

    async def assign_supervisor(self, execution_id, supervisor_id):
        return self._answer("assign_supervisor", execution_id, supervisor_id)

    async def stop_mo(self, mo_id, reason):
        return self._answer("stop_mo", mo_id, reason)

    async def report_receipt(self, payload):
        return self._answer("report_receipt", payload)

    async def create_rm_return(self, payload):
        return self._answer("create_rm_return", payload)

    async def save(self, payload, *, work_center_id=None):
        return self._answer("save", payload, work_center_id)

    async def complete_batch(self, payload):
        return self._answer("complete_batch", payload)

    async def process_options(self):
        return self._answer("process_options")

    async def create_fi_rework(self, payload):
        return self._answer("create_fi_rework", payload)

    async def create_mo(self, payload):
        return self._answer("create_mo", payload)

    async def approve_mo(self, mo_id, notes):
        return self._answer("approve_mo", mo_id, notes)

    async def create(self, payload):
        return self._answer("create", payload)

    async def create_packing_transaction(self, payload):
        return self._answer("create_packing_transaction", payload)

    async def report_issue(self, batch_id, payload):
        return self._answer("report_issue", batch_id, payload)

    async def upload_sheet(self, upload_id, *, filename, content):
        return self._answer("upload_sheet", upload_id, filename, content)


def test_stop_process_validates_before_calling():
    api = FakeSupervisorApi()
    with pytest.raises(FormValidationError):
        asyncio.run(workflows.stop_process(api, execution_id=5, batch_id=9, stop_reason="others"))
    assert api.calls == []

    asyncio.run(
        workflows.stop_process(api, execution_id=5, batch_id=9, stop_reason="power_cut", notes="  grid down ")
    )
    assert api.calls == [
        (
            "stop_process",
            {"process_execution": 5, "batch": 9, "stop_reason": "power_cut", "stop_reason_detail": "", "notes": "grid down"},
        )
    ]


def test_assign_supervisor_requires_echoed_assignment():
    api = FakeSupervisorApi()
    res = asyncio.run(workflows.assign_supervisor(api, execution_id=3, supervisor_id=8))
    assert not res.ok
    assert res.message == "Failed to assign supervisor"

    api.responses["assign_supervisor"] = ok({"id": 3, "assigned_supervisor": 8})
    assert asyncio.run(workflows.assign_supervisor(api, execution_id=3, supervisor_id=8)).ok

    with pytest.raises(FormValidationError):
        asyncio.run(workflows.assign_supervisor(api, execution_id=3, supervisor_id=None))


def test_stop_mo_needs_a_real_reason():
    api = FakeSupervisorApi()
    with pytest.raises(FormValidationError):
        asyncio.run(workflows.stop_mo(api, mo_id=1, stop_reason="short"))
    asyncio.run(workflows.stop_mo(api, mo_id=1, stop_reason="  Customer cancelled order  "))
    assert api.calls[-1] == ("stop_mo", 1, "Customer cancelled order")


def test_report_receipt_sends_parsed_quantity():
    api = FakeSupervisorApi()
    asyncio.run(
        workflows.report_receipt(
            api, batch_id=4, process_execution_id=6, report_reason="low_qty_received", actual_received_quantity="95,5"
        )
    )
    payload = api.calls[-1][1]
    assert payload["actual_received_quantity"] == 95.5
    assert payload["report_reason"] == "low_qty_received"


def test_return_rm_maps_location():
    api = FakeSupervisorApi()
    asyncio.run(
        workflows.return_rm(
            api,
            batch_id=4,
            process_name="Tempering QC",
            total_batch_quantity_kg=100,
            scrapped_quantity_kg="",
            return_quantity_kg="12.5",
        )
    )
    payload = api.calls[-1][1]
    assert payload["location"] == "tempering"
    assert payload["quantity_kg"] == 12.5
    assert payload["scrapped_quantity_kg"] == 0.0


def test_save_work_center_passes_id_for_update():
    api = FakeSupervisorApi()
    form = {"work_center_id": 2, "default_supervisor_id": 5, "backup_supervisor_id": 6, "check_in_deadline": "09:15"}
    asyncio.run(workflows.save_work_center(api, form, work_center_id=11))
    name, payload, wc_id = api.calls[-1]
    assert wc_id == 11
    assert payload["is_active"] is True
    assert payload["backup_supervisor"] == 6


def test_final_inspection_without_rework_finishes_immediately():
    api = FakeSupervisorApi()
    flow = FinalInspectionFlow(api)
    asyncio.run(flow.complete({"id": 9, "batch_id": "B-9"}, {"ok_quantity": 100, "rework_quantity": 0}))
    assert not flow.awaiting_redirect
    assert api.calls[0] == ("complete_batch", {"batch_id": 9, "ok_quantity": 100, "rework_quantity": 0})


def test_final_inspection_rework_redirect():
    api = FakeSupervisorApi()
    api.responses["process_options"] = ok(
        [{"id": 1, "name": "Coiling"}, {"id": 2, "name": "Final Inspection"}, {"id": 3, "name": "Plating"}]
    )
    flow = FinalInspectionFlow(api)
    asyncio.run(flow.complete({"id": 9}, {"ok_quantity": 90, "rework_quantity": "10"}))
    assert flow.awaiting_redirect
    assert flow.rework_quantity == 10.0

    asyncio.run(flow.load_destinations())
    assert [p["id"] for p in flow.processes] == [1, 3]
    assert flow.destination_name(3) == "Plating"

    with pytest.raises(FormValidationError) as ex:
        asyncio.run(flow.redirect(rework_to_process=3, rework_quantity=15, defect_description="Pitting"))
    assert "rework_quantity" in ex.value.errors

    api.responses["create_fi_rework"] = fail(ErrorKind.SERVER, "boom", status=500)
    asyncio.run(flow.redirect(rework_to_process=3, rework_quantity=10, defect_description="Pitting"))
    assert flow.awaiting_redirect

    del api.responses["create_fi_rework"]
    res = asyncio.run(flow.redirect(rework_to_process=3, rework_quantity=10, defect_description=" Pitting "))
    assert res.ok
    assert not flow.awaiting_redirect
    assert api.calls[-1] == (
        "create_fi_rework",
        {
            "fi_batch_completion_id": 77,
            "batch_id": 9,
            "rework_to_process_id": 3,
            "rework_quantity": 10.0,
            "defect_description": "Pitting",
        },
    )


def test_redirect_without_pending_completion_is_rejected():
    with pytest.raises(FormValidationError):
        asyncio.run(FinalInspectionFlow(FakeSupervisorApi()).redirect(
            rework_to_process=1, rework_quantity=1, defect_description="x"
        ))


def test_create_mo_parses_form_values():
    api = FakeSupervisorApi()
    form = {
        "product_code_id": "4",
        "customer_name": " Acme Springs ",
        "quantity": 500.0,
        "planned_start_date": "01/02/2024",
        "planned_end_date": "2024-02-10",
        "priority": "",
        "special_instructions": "Zinc plate",
    }
    asyncio.run(workflows.create_mo(api, form))
    assert api.calls == [
        (
            "create_mo",
            {
                "product_code_id": 4,
                "customer_name": "Acme Springs",
                "quantity": 500,
                "planned_start_date": "2024-02-01",
                "planned_end_date": "2024-02-10",
                "priority": "medium",
                "special_instructions": "Zinc plate",
            },
        )
    ]


def test_create_mo_rejects_invalid_form_without_calling():
    api = FakeSupervisorApi()
    with pytest.raises(FormValidationError) as ex:
        asyncio.run(workflows.create_mo(api, {"customer_name": "Acme", "quantity": "abc"}))
    assert ex.value.errors["quantity"] == "Valid quantity is required"
    assert api.calls == []


def test_approve_mo_trims_notes():
    api = FakeSupervisorApi()
    asyncio.run(workflows.approve_mo(api, mo_id=12, notes="  ok to run  "))
    assert api.calls == [("approve_mo", 12, "ok to run")]


def test_create_outsourcing_request_payload():
    api = FakeSupervisorApi()
    form = {"vendor_id": 3, "expected_return_date": "2024-03-01", "vendor_contact_person": "Ravi ", "notes": ""}
    items = [{"mo_number": "MO-1", "product_code": "SP-9", "qty": "100", "kg": "12,5", "notes": " rush "}]
    asyncio.run(workflows.create_outsourcing_request(api, form, items))
    assert api.calls == [
        (
            "create",
            {
                "vendor_id": 3,
                "expected_return_date": "2024-03-01",
                "vendor_contact_person": "Ravi",
                "notes": "",
                "items_data": [{"mo_number": "MO-1", "product_code": "SP-9", "qty": 100, "kg": 12.5, "notes": "rush"}],
            },
        )
    ]


def test_pack_batch_posts_transaction():
    api = FakeSupervisorApi()
    plan = PackingPlan.from_batch({"id": 5, "available_kg": 10, "grams_per_product": 500, "packing_size": 2})
    res = asyncio.run(workflows.pack_batch(api, plan, actual_packs=9, loose_kg=1))
    assert res.ok
    name, payload = api.calls[0]
    assert name == "create_packing_transaction"
    assert payload["theoretical_packs"] == 10
    assert payload["loose_pieces"] == 2
    assert payload["variance_kg"] == 0.0


def test_report_packing_issue_sends_actual_weight_only_when_given():
    api = FakeSupervisorApi()
    asyncio.run(workflows.report_packing_issue(api, batch_id=5, reason="high_qty", actual_kg="51.5"))
    asyncio.run(workflows.report_packing_issue(api, batch_id=6, reason="other", notes=" bent coils "))
    assert api.calls == [
        ("report_issue", 5, {"reason": "high_qty", "notes": "", "actual_kg": 51.5}),
        ("report_issue", 6, {"reason": "other", "notes": "bent coils"}),
    ]


def test_upload_qc_sheet_needs_a_selected_slot():
    api = FakeSupervisorApi()
    with pytest.raises(FormValidationError):
        asyncio.run(workflows.upload_qc_sheet(api, upload_id=None, filename="qc.pdf", content=b"%PDF"))
    asyncio.run(workflows.upload_qc_sheet(api, upload_id=9, filename="qc.pdf", content=b"%PDF"))
    assert api.calls == [("upload_sheet", 9, "qc.pdf", b"%PDF")]
