from __future__ import annotations

import pytest

from fcrgen.csvio.headers import (
    FCR_REQUIRED_COLUMNS,
    PO_HEADERS,
    RECYCLED_HEADERS,
    HeaderMismatchError,
    ValidationMode,
    validate_headers,
)


def test_po_header_exact_match_passes():
    validate_headers(["Invoice", "PO", "Goods"], PO_HEADERS, ValidationMode.EXACT)


def test_po_header_reordered_fails():
    with pytest.raises(HeaderMismatchError) as ei:
        validate_headers(["PO", "Invoice", "Goods"], PO_HEADERS, ValidationMode.EXACT, "po.csv")
    err = ei.value
    assert err.expected == ["Invoice", "PO", "Goods"]
    assert err.got == ["PO", "Invoice", "Goods"]
    msg = str(err)
    assert msg.startswith("Header mismatch in po.csv.")
    assert "Expected: [Invoice, PO, Goods]" in msg
    assert "Got: [PO, Invoice, Goods]" in msg


@pytest.mark.parametrize(
    "header",
    [
        ["Invoice", "PO"],
        ["Invoice", "PO", "Goods", "Extra"],
        ["invoice", "PO", "Goods"],
    ],
)
def test_po_header_any_deviation_fails(header):
    with pytest.raises(HeaderMismatchError):
        validate_headers(header, PO_HEADERS, ValidationMode.EXACT)


def test_exact_match_compares_trimmed_names():
    validate_headers([" Invoice", "PO ", "Goods"], PO_HEADERS, ValidationMode.EXACT)


def test_recycled_header_single_column():
    validate_headers(["PO"], RECYCLED_HEADERS, ValidationMode.EXACT)
    with pytest.raises(HeaderMismatchError):
        validate_headers(["PO", "Note"], RECYCLED_HEADERS, ValidationMode.EXACT)


def test_fcr_superset_ignores_order_and_extra_columns():
    header = list(reversed(FCR_REQUIRED_COLUMNS)) + ["Remarks", "Weight"]
    validate_headers(header, FCR_REQUIRED_COLUMNS, ValidationMode.SUPERSET)


def test_fcr_superset_names_missing_columns():
    header = [c for c in FCR_REQUIRED_COLUMNS if c not in ("AD Code", "Goods")]
    with pytest.raises(HeaderMismatchError) as ei:
        validate_headers(header, FCR_REQUIRED_COLUMNS, ValidationMode.SUPERSET, "fcr.csv")
    err = ei.value
    assert err.missing == ["AD Code", "Goods"]
    msg = str(err)
    assert "Missing required columns in fcr.csv: AD Code, Goods" in msg
    assert "Expected: [" in msg and "Got: [" in msg
