from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

from .config_models import MaterialType

"""Output record models.

InvoiceRecord is the PO-mode accumulator (one per invoice number) and
FCRBoxRecord is one formatted FCR box per input row. Both are exposed to the
store and the exporters as flat mappings (OutputRecord).
"""

__all__ = [
    "PO_OUTPUT_COLUMNS",
    "FCR_RECORD_FIELDS",
    "FCR_EXPORT_COLUMNS",
    "InvoiceRecord",
    "FCRBoxRecord",
]

PO_OUTPUT_COLUMNS: list[str] = ["Invoice Number", "PO Numbers", "Description", "Goods"]

# FCRBoxRecord attribute -> human readable export column (tracking CSV)
FCR_EXPORT_COLUMNS: dict[str, str] = {
    "invoiceNo": "Invoice Number",
    "description": "Description",
    "poNumbers": "PO Numbers",
    "goods": "Goods",
    "invoiceDate": "Invoice Date",
    "entryDate": "Entry Date",
    "contactDate": "Contact Date",
    "expSerial": "EXP Serial",
    "adCode": "AD Code",
    "expYear": "EXP Year",
    "lcContact": "LC Contact",
    "countryCode": "Country Code",
}


@dataclass
class InvoiceRecord:
    """Per-invoice accumulator (PO mode).

    Lifecycle: created on the first row naming the invoice, extended by every
    later row for the same invoice, classified once the whole file is scanned.
    material_type stays None until classification.
    """
    invoice_number: str
    po_numbers: list[str] = field(default_factory=list)
    goods_descriptions: list[str] = field(default_factory=list)
    material_type: MaterialType | None = None

    def add(self, po: str, goods: str) -> None:
        if po:
            self.po_numbers.append(po)
        if goods:
            self.goods_descriptions.append(goods)


@dataclass(frozen=True)
class FCRBoxRecord:
    """One FCR box. Field names match the project store document shape."""
    id: str  # box_<0-based row position>
    index: int  # 1-based row position
    description: str
    poNumbers: str
    goods: str
    invoiceNo: str
    invoiceDate: str
    adCode: str
    expSerial: str
    expYear: str
    entryDate: str
    lcContact: str
    contactDate: str
    countryCode: str
    formattedText: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FCRBoxRecord:
        """Rebuild a record from its stored mapping; unknown keys are ignored."""
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = data.get(f.name)
            if f.name == "index":
                values[f.name] = int(raw) if raw not in (None, "") else 0
            else:
                values[f.name] = "" if raw is None else str(raw)
        return cls(**values)


FCR_RECORD_FIELDS: list[str] = [f.name for f in fields(FCRBoxRecord)]
