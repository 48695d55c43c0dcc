from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd

from fcrgen.models.records import FCR_EXPORT_COLUMNS, PO_OUTPUT_COLUMNS

"""CSV writers for processed records.

- PO output: Invoice Number, PO Numbers, Description, Goods
- FCR tracking export: human-readable FCR columns plus Copied Status
"""

__all__ = [
    "COPIED_STATUS_COLUMN",
    "po_output_filename",
    "tracking_filename",
    "write_po_csv",
    "write_tracking_csv",
]

COPIED_STATUS_COLUMN = "Copied Status"


def po_output_filename(day: date | None = None) -> str:
    return f"output_{(day or date.today()).isoformat()}.csv"


def tracking_filename(day: date | None = None) -> str:
    return f"fcr_export_{(day or date.today()).isoformat()}.csv"


def _write(frame: pd.DataFrame, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False, encoding="utf-8")
    return path


def write_po_csv(records: Sequence[Mapping[str, Any]], path: Path) -> Path:
    """Write PO output records. A directory path gets the dated default name."""
    if path.is_dir():
        path = path / po_output_filename()
    rows = [{col: record.get(col, "") for col in PO_OUTPUT_COLUMNS} for record in records]
    return _write(pd.DataFrame(rows, columns=PO_OUTPUT_COLUMNS), path)


def write_tracking_csv(
    records: Sequence[Mapping[str, Any]],
    copied: Mapping[str, bool],
    path: Path,
) -> Path:
    """Write FCR records with their copy status, in record order."""
    if path.is_dir():
        path = path / tracking_filename()
    columns = list(FCR_EXPORT_COLUMNS.values()) + [COPIED_STATUS_COLUMN]
    rows = []
    for record in records:
        row = {label: record.get(attr, "") for attr, label in FCR_EXPORT_COLUMNS.items()}
        row[COPIED_STATUS_COLUMN] = "Copied" if copied.get(record.get("id", "")) else "Not Copied"
        rows.append(row)
    return _write(pd.DataFrame(rows, columns=columns), path)
