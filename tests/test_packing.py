import pytest

from springops.core.forms import FormValidationError
from springops.core.packing import PackingPlan

BATCH = {
    "id": 31,
    "batch_id": "BATCH-2024-031",
    "product_code": "SP-1020",
    "product": {"id": 8, "product_code": "SP-1020"},
    "ipc": "IPC-7",
    "heat_no": "H-5521",
    "available_kg": "25.000",
    "grams_per_product": "250",
    "packing_size": 4,
}


def test_plan_figures():
    plan = PackingPlan.from_batch(BATCH)
    assert plan.pack_kg == 1.0
    assert plan.theoretical_packs == 25
    assert plan.loose_pieces("0.5") == 2
    assert plan.variance_kg(24, "0.75") == -0.25


def test_payload_matches_backend_shape():
    payload = PackingPlan.from_batch(BATCH).payload("24", 0.75)
    assert payload == {
        "batch_ids": [31],
        "product_code": "SP-1020",
        "product": 8,
        "ipc": "IPC-7",
        "heat_no": "H-5521",
        "total_weight_kg": 25.0,
        "grams_per_product": 250.0,
        "packing_size": 4,
        "theoretical_packs": 25,
        "actual_packs": 24,
        "loose_weight_kg": 0.75,
        "loose_pieces": 3,
        "variance_kg": -0.25,
    }


def test_payload_rejects_bad_counts():
    with pytest.raises(FormValidationError) as ex:
        PackingPlan.from_batch(BATCH).payload("", -1)
    assert set(ex.value.errors) == {"actual_packs", "loose_kg"}


def test_missing_weights_do_not_divide_by_zero():
    plan = PackingPlan.from_batch({"id": 1, "quantity_kg": 4})
    assert plan.total_kg == 4.0
    assert plan.theoretical_packs == 0
    assert plan.loose_pieces(1) == 0
