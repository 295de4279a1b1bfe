import pytest

from springops.core import forms


def test_process_stop_requires_reason():
    assert forms.validate_process_stop("", "") == {"stop_reason": "Stop reason is required"}
    assert "stop_reason" in forms.validate_process_stop("coffee_break", "")


def test_process_stop_others_needs_detail():
    errors = forms.validate_process_stop("others", "  ")
    assert list(errors) == ["stop_reason_detail"]
    assert forms.validate_process_stop("others", "Tool change") == {}
    assert forms.validate_process_stop("power_cut", "") == {}


def test_stop_mo_reason_min_length():
    assert forms.validate_stop_mo("too short") != {}
    assert forms.validate_stop_mo("Customer cancelled the order") == {}


def test_rework_redirect_checks():
    errors = forms.validate_rework_redirect(
        rework_to_process="", rework_quantity="", defect_description="", available_quantity=10
    )
    assert set(errors) == {"rework_to_process", "rework_quantity", "defect_description"}

    errors = forms.validate_rework_redirect(
        rework_to_process=3, rework_quantity="12", defect_description="Burr on ends", available_quantity=10
    )
    assert errors == {"rework_quantity": "Cannot exceed available rework quantity (10 kg)"}

    errors = forms.validate_rework_redirect(
        rework_to_process=3, rework_quantity=0, defect_description="Burr on ends", available_quantity=10
    )
    assert errors["rework_quantity"] == "Rework quantity must be greater than 0"

    assert (
        forms.validate_rework_redirect(
            rework_to_process=3, rework_quantity="4,5", defect_description="Burr on ends", available_quantity=10
        )
        == {}
    )


def test_rework_destinations_exclude_terminal_processes():
    processes = [
        {"id": 1, "name": "Coiling"},
        {"id": 2, "name": "Final Inspection"},
        {"id": 3, "name": "Packing"},
        {"id": 4, "name": "RM Store"},
        {"id": 5, "name": "FG Store"},
        {"id": 6, "name": "Tempering"},
    ]
    assert [p["id"] for p in forms.rework_destinations(processes)] == [1, 6]


def test_supervisor_assignment_required():
    assert forms.validate_supervisor_assignment(None) == {"supervisor": "Please select a supervisor"}
    assert forms.validate_supervisor_assignment(7) == {}


def test_work_center_backup_must_differ():
    form = {"work_center_id": 1, "default_supervisor_id": 5, "backup_supervisor_id": 5, "check_in_deadline": "09:15"}
    assert forms.validate_work_center(form) == {"backup_supervisor_id": "Backup must be different from default supervisor"}

    form["backup_supervisor_id"] = 6
    assert forms.validate_work_center(form) == {}

    assert set(forms.validate_work_center({})) == {
        "work_center_id",
        "default_supervisor_id",
        "backup_supervisor_id",
        "check_in_deadline",
    }


def test_receipt_report_quantity_rules():
    errors = forms.validate_receipt_report("low_qty_received", "", None)
    assert "actual_received_quantity" in errors

    errors = forms.validate_receipt_report("damaged_defective", "", "abc")
    assert errors == {"actual_received_quantity": "Actual quantity must be a valid number"}

    assert forms.validate_receipt_report("high_qty_received", "", "120") == {}
    assert "report_detail" in forms.validate_receipt_report("others", "", None)
    assert "report_reason" in forms.validate_receipt_report(None, "", None)


def test_rm_return_rules():
    ok = forms.validate_rm_return(
        total_batch_quantity_kg=100, scrapped_quantity_kg=5, return_quantity_kg=20, process_name="Coiling Setup"
    )
    assert ok == {}
    errors = forms.validate_rm_return(
        total_batch_quantity_kg=100, scrapped_quantity_kg=150, return_quantity_kg=0, process_name="Welding"
    )
    assert set(errors) == {"scrapped_quantity_kg", "quantity_kg", "location"}
    assert forms.return_location_for("Plating QC") == "plating"
    assert forms.return_location_for("Unknown") is None


def test_positive_and_date_range():
    assert forms.validate_positive("", field="quantity") == {"quantity": "Quantity is required"}
    assert forms.validate_positive("x", field="quantity")["quantity"].endswith("valid number")
    assert forms.validate_positive("-1", field="quantity")["quantity"].endswith("greater than 0")
    assert forms.validate_positive("3", field="quantity") == {}

    assert forms.validate_date_range("2024-01-10", "2024-01-01") == {"end_date": "End date cannot be before start date"}
    assert forms.validate_date_range("01/01/2024", "2024-01-02") == {}
    assert "start_date" in forms.validate_date_range("", "2024-01-02")


def test_parse_int_strict():
    assert forms.parse_int_strict("0042", field="qty") == 42
    assert forms.parse_int_strict(12.0, field="qty") == 12
    with pytest.raises(ValueError):
        forms.parse_int_strict("12.5", field="qty")
    with pytest.raises(ValueError):
        forms.parse_int_strict(True, field="qty")


def test_filter_options_matches_any_key_case_insensitively():
    options = [
        {"id": 1, "full_name": "Asha Rao", "email": "asha@plant.test", "department": "Coiling"},
        {"id": 2, "full_name": "Ben Ortiz", "email": "ben@plant.test", "department": "Plating"},
    ]
    keys = ["full_name", "email", "department"]
    assert forms.filter_options(options, "PLAT", keys) == [options[1]]
    assert forms.filter_options(options, "asha@", keys) == [options[0]]
    assert forms.filter_options(options, "   ", keys) == options
    assert forms.filter_options(options, "zzz", keys) == []


def test_date_range_can_require_a_later_end():
    assert forms.validate_date_range("2024-01-10", "2024-01-10") == {}
    assert forms.validate_date_range("2024-01-10", "2024-01-10", allow_same_day=False) == {
        "end_date": "End date must be after start date"
    }


def _mo_form(**overrides):
    form = {
        "product_code_id": 4,
        "customer_name": "Acme Springs",
        "quantity": 500,
        "planned_start_date": "2024-02-01",
        "planned_end_date": "2024-02-10",
        "priority": "high",
    }
    form.update(overrides)
    return form


def test_mo_form_messages():
    assert forms.validate_mo_form(_mo_form()) == {}
    assert forms.validate_mo_form(_mo_form(quantity=100.0)) == {}
    errors = forms.validate_mo_form(
        _mo_form(product_code_id=None, customer_name="  ", quantity="12.5", planned_start_date="")
    )
    assert errors == {
        "product_code_id": "Product is required",
        "customer_name": "Customer name is required",
        "quantity": "Valid quantity is required",
        "planned_start_date": "Start date is required",
    }
    assert forms.validate_mo_form(_mo_form(quantity=0))["quantity"] == "Valid quantity is required"
    assert forms.validate_mo_form(_mo_form(planned_end_date="2024-02-01")) == {
        "planned_end_date": "End date must be after start date"
    }


def test_outsourcing_request_checks_every_item():
    form = {"vendor_id": 3, "expected_return_date": "2024-03-01"}
    good = {"mo_number": "MO-1", "product_code": "SP-9", "qty": "100", "kg": "12,5"}
    assert forms.validate_outsourcing_request(form, [good]) == {}

    errors = forms.validate_outsourcing_request(
        {"vendor_id": "", "expected_return_date": ""},
        [good, {"mo_number": "", "product_code": "SP-9", "qty": "1.5", "kg": "0"}],
    )
    assert errors == {
        "vendor_id": "Vendor is required",
        "expected_return_date": "Expected return date is required",
        "item_1_mo_number": "MO Number is required",
        "item_1_qty": "Valid quantity is required",
        "item_1_kg": "Valid weight (kg) is required",
    }
    assert forms.validate_outsourcing_request(form, []) == {"items": "Add at least one item"}


def test_packing_inputs():
    assert forms.validate_packing("12", "0") == {}
    assert forms.validate_packing(0, "") == {
        "actual_packs": "Please enter valid number of packs",
        "loose_kg": "Please enter valid loose weight",
    }
    assert forms.validate_packing(3, -0.5) == {"loose_kg": "Please enter valid loose weight"}


def test_packing_issue_needs_actual_weight_for_quantity_reasons():
    assert forms.validate_packing_issue("", None) == {"reason": "Please select a reason"}
    assert forms.validate_packing_issue("low_qty", None) == {"actual_kg": "Please enter actual quantity received"}
    assert forms.validate_packing_issue("low_qty", "48.2") == {}
    assert forms.validate_packing_issue("product_mismatch", None) == {}
