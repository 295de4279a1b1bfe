import io
from datetime import datetime

import pandas as pd

from springops.data.export_io import export_filename, rows_to_frame, to_csv_bytes, to_xlsx_bytes

COLUMNS = [
    {"name": "batch_id", "label": "Batch", "field": "batch_id"},
    {"name": "qty", "label": "Quantity", "field": "quantity_available"},
    {"name": "loc", "label": "Location", "field": "location_in_store"},
]

ROWS = [
    {"batch_id": "B-1", "quantity_available": 50, "location_in_store": "Rack A", "extra": "x"},
    {"batch_id": "B-2", "quantity_available": 20, "product": {"id": 1}},
]


def test_rows_to_frame_uses_column_labels():
    df = rows_to_frame(ROWS, COLUMNS)
    assert list(df.columns) == ["Batch", "Quantity", "Location"]
    assert df["Quantity"].tolist() == [50, 20]


def test_csv_export_flattens_nested_values():
    text = to_csv_bytes(ROWS).decode("utf-8")
    assert text.splitlines()[0] == "batch_id,quantity_available,location_in_store,extra,product"
    assert "{'id': 1}" in text


def test_xlsx_export_reads_back():
    content = to_xlsx_bytes(ROWS, COLUMNS, sheet_name="FG stock levels for the whole plant")
    df = pd.read_excel(io.BytesIO(content), sheet_name="FG stock levels for the whole p")
    assert list(df.columns) == ["Batch", "Quantity", "Location"]
    assert df["Batch"].tolist() == ["B-1", "B-2"]


def test_export_filename():
    assert export_filename("Stock Levels", now=datetime(2024, 3, 5, 14, 7)) == "stock_levels_20240305_1407.xlsx"
    assert export_filename("", ext="csv", now=datetime(2024, 3, 5)) == "export_20240305_0000.csv"
