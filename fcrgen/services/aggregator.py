from __future__ import annotations

from collections.abc import Iterable, Mapping

from fcrgen.models.config_models import MaterialType
from fcrgen.models.processing_result import TypeCounts
from fcrgen.models.records import InvoiceRecord

"""Invoice aggregation for PO mode.

One left-to-right pass groups PO and goods values by invoice number; every
invoice is classified against the recycled PO set after the pass:

- at least one recycled PO and at least one other PO -> MIXED
- only recycled POs -> RECYCLED
- anything else, including an empty PO list -> NORMAL
"""

__all__ = [
    "build_recycled_set",
    "classify",
    "aggregate_invoices",
    "count_types",
]


def _trimmed(row: Mapping[str, str | None], column: str) -> str:
    value = row.get(column)
    return (value or "").strip()


def build_recycled_set(rows: Iterable[Mapping[str, str | None]]) -> set[str]:
    """Trimmed, non-empty PO values of the recycled reference rows."""
    return {po for po in (_trimmed(r, "PO") for r in rows) if po}


def classify(po_numbers: Iterable[str], recycled: set[str]) -> MaterialType:
    has_recycled = False
    has_normal = False
    for po in po_numbers:
        if not po:
            continue
        if po in recycled:
            has_recycled = True
        else:
            has_normal = True
    if has_recycled and has_normal:
        return MaterialType.MIXED
    if has_recycled:
        return MaterialType.RECYCLED
    return MaterialType.NORMAL


def aggregate_invoices(
    rows: Iterable[Mapping[str, str | None]], recycled: set[str]
) -> dict[str, InvoiceRecord]:
    """Group rows by invoice, preserving first-seen invoice order.

    Rows without an invoice number are ignored.
    """
    invoices: dict[str, InvoiceRecord] = {}
    for row in rows:
        invoice = _trimmed(row, "Invoice")
        if not invoice:
            continue
        record = invoices.get(invoice)
        if record is None:
            record = invoices[invoice] = InvoiceRecord(invoice_number=invoice)
        record.add(_trimmed(row, "PO"), _trimmed(row, "Goods"))

    for record in invoices.values():
        record.material_type = classify(record.po_numbers, recycled)
    return invoices


def count_types(records: Iterable[InvoiceRecord]) -> TypeCounts:
    counts = {t: 0 for t in MaterialType}
    for record in records:
        counts[record.material_type or MaterialType.NORMAL] += 1
    return TypeCounts(
        mixed=counts[MaterialType.MIXED],
        recycled=counts[MaterialType.RECYCLED],
        normal=counts[MaterialType.NORMAL],
    )
