from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from fcrgen.models.config_models import PoSettings, TemplateVariant
from fcrgen.models.records import FCRBoxRecord, InvoiceRecord

from .normalizers import normalize_date, normalize_number, normalize_serial

"""Record formatter.

FCR rows become FCRBoxRecord boxes whose formattedText is the fixed
eleven-line template below; PO invoices become flat output mappings.

    <first line>
    ORDER NO. : <PO Numbers>
    DESCRIPTION OF GOODS. : <Goods>
    INVOICE NO. : <Invoice No>
    DATE: <Invoice Date>
    EXP NO. : <AD Code>/<EXP Serial>/<EXP Year>
    DATE: <Entry Date>
    CONTRACT NO. : <Lc Contact>
    DATE: <Date of Contact>
    H. S. CODE: 6911.10.00
    COUNTRY: <Country short code>
"""

__all__ = [
    "HS_CODE",
    "PORCELAIN_LINE",
    "join_values",
    "render_fcr_text",
    "format_fcr_row",
    "format_invoice_record",
]

HS_CODE = "6911.10.00"
PORCELAIN_LINE = "100% PORCELAIN TABLEWARE"


def _cell(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    return "" if value is None else str(value)


def join_values(values: Iterable[str]) -> str:
    """Bare-comma join of the non-empty values, order preserved."""
    return ",".join(v for v in values if v)


def render_fcr_text(box: Mapping[str, Any], first_line: str) -> str:
    lines = [
        first_line,
        f"ORDER NO. : {box['poNumbers']}",
        f"DESCRIPTION OF GOODS. : {box['goods']}",
        f"INVOICE NO. : {box['invoiceNo']}",
        f"DATE: {box['invoiceDate']}",
        f"EXP NO. : {box['adCode']}/{box['expSerial']}/{box['expYear']}",
        f"DATE: {box['entryDate']}",
        f"CONTRACT NO. : {box['lcContact']}",
        f"DATE: {box['contactDate']}",
        f"H. S. CODE: {HS_CODE}",
        f"COUNTRY: {box['countryCode']}",
    ]
    return "\n".join(lines)


def format_fcr_row(
    row: Mapping[str, Any],
    position: int,
    variant: TemplateVariant = TemplateVariant.PORCELAIN,
) -> FCRBoxRecord:
    """Build the box for the row at 0-based position in the input file."""
    box: dict[str, Any] = {
        "id": f"box_{position}",
        "index": position + 1,
        "description": _cell(row, "Description"),
        "poNumbers": _cell(row, "PO Numbers"),
        "goods": _cell(row, "Goods"),
        "invoiceNo": normalize_number(row.get("Invoice No")),
        "invoiceDate": normalize_date(row.get("Invoice Date")),
        "adCode": normalize_number(row.get("AD Code")),
        "expSerial": normalize_serial(row.get("EXP Serial")),
        "expYear": normalize_number(row.get("EXP Year")),
        "entryDate": normalize_date(row.get("Entry Date")),
        "lcContact": _cell(row, "Lc Contact"),
        "contactDate": normalize_date(row.get("Date of Contact")),
        "countryCode": _cell(row, "Country short code"),
    }
    first_line = box["description"] if variant is TemplateVariant.DESCRIPTION else PORCELAIN_LINE
    box["formattedText"] = render_fcr_text(box, first_line)
    return FCRBoxRecord(**box)


def format_invoice_record(record: InvoiceRecord, settings: PoSettings) -> dict[str, str]:
    return {
        "Invoice Number": record.invoice_number,
        "PO Numbers": join_values(record.po_numbers),
        "Description": settings.description_for(record.material_type),
        "Goods": join_values(record.goods_descriptions),
    }
