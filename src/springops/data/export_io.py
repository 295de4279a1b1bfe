from __future__ import annotations

import io
from datetime import datetime

import pandas as pd


def rows_to_frame(rows: list[dict], columns: list[dict] | None = None) -> pd.DataFrame:
    """Build a DataFrame from table rows.

    ``columns`` uses the ui.table column shape ({name, label, field}); when
    given, only those fields are exported, in that order, headed by label.
    """
    df = pd.DataFrame(list(rows or []))
    if not columns:
        return df
    fields = [str(c.get("field") or c.get("name")) for c in columns]
    labels = [str(c.get("label") or c.get("name") or f) for c, f in zip(columns, fields)]
    for f in fields:
        if f not in df.columns:
            df[f] = None
    out = df[fields].copy()
    out.columns = labels
    return out


def _flatten(df: pd.DataFrame) -> pd.DataFrame:
    # Nested API values (dicts/lists) are written as text.
    df = df.copy()
    for col in df.columns:
        if df[col].map(lambda v: isinstance(v, (dict, list))).any():
            df[col] = df[col].map(lambda v: str(v) if isinstance(v, (dict, list)) else v)
    return df


def to_xlsx_bytes(rows: list[dict], columns: list[dict] | None = None, *, sheet_name: str = "Export") -> bytes:
    df = _flatten(rows_to_frame(rows, columns))
    bio = io.BytesIO()
    with pd.ExcelWriter(bio, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name[:31] or "Export", index=False)
    return bio.getvalue()


def to_csv_bytes(rows: list[dict], columns: list[dict] | None = None) -> bytes:
    df = _flatten(rows_to_frame(rows, columns))
    return df.to_csv(index=False).encode("utf-8")


def export_filename(name: str, *, ext: str = "xlsx", now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M")
    slug = "_".join(str(name or "export").strip().lower().split()) or "export"
    return f"{slug}_{stamp}.{ext}"
