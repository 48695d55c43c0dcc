from __future__ import annotations

from pathlib import Path

import pytest

from fcrgen.csvio.reader import ParseError, detect_delimiter, parse_csv
from fcrgen.logging.event_log import DiagnosticsLog


@pytest.mark.parametrize("delim", [",", ";", "\t", "|"])
def test_detects_each_candidate_delimiter(delim):
    text = delim.join(["Invoice", "PO", "Goods"]) + "\n" + delim.join(["A", "P1", "G1"]) + "\n"
    ds = parse_csv(text)
    assert ds.detected_delimiter == delim
    assert ds.header_fields == ["Invoice", "PO", "Goods"]
    assert ds.rows == [{"Invoice": "A", "PO": "P1", "Goods": "G1"}]
    assert ds.warnings == []


def test_detect_delimiter_prefers_consistent_field_counts():
    text = "a;b;c\n1,5;2;3\n4;5,5;6\n"
    assert detect_delimiter(text) == (";", True)


def test_detect_delimiter_falls_back_to_comma_for_single_column():
    assert detect_delimiter("PO\nP1\nP2\n") == (",", False)


def test_single_column_file_parses_with_warning():
    ds = parse_csv("PO\nP1\nP2\n")
    assert ds.header_fields == ["PO"]
    assert [r["PO"] for r in ds.rows] == ["P1", "P2"]
    assert any("auto-detect" in w for w in ds.warnings)


def test_values_stay_strings():
    ds = parse_csv("Invoice,PO,Goods\n007,NA,1.50\n")
    assert ds.rows == [{"Invoice": "007", "PO": "NA", "Goods": "1.50"}]


def test_header_names_are_stripped():
    ds = parse_csv(" Invoice , PO,Goods \nA,P1,G1\n")
    assert ds.header_fields == ["Invoice", "PO", "Goods"]


def test_blank_lines_and_blank_rows_are_skipped():
    ds = parse_csv("Invoice,PO,Goods\n\nA,P1,G1\n,,\n\nB,P2,G2\n")
    assert [r["Invoice"] for r in ds.rows] == ["A", "B"]


def test_quoted_field_with_delimiter():
    ds = parse_csv('Invoice,PO,Goods\nA,P1,"Cups, saucers"\n')
    assert ds.rows[0]["Goods"] == "Cups, saucers"


def test_extra_fields_are_truncated_with_warning():
    ds = parse_csv("Invoice,PO,Goods\nA,P1,G1\nB,P2,G2,surplus\n")
    assert ds.rows[1] == {"Invoice": "B", "PO": "P2", "Goods": "G2"}
    assert any("Too many fields" in w for w in ds.warnings)


def test_short_rows_are_padded_with_warning():
    ds = parse_csv("Invoice,PO,Goods\nA,P1\nB,P2,G2\n")
    assert ds.rows[0] == {"Invoice": "A", "PO": "P1", "Goods": ""}
    assert ds.rows[1] == {"Invoice": "B", "PO": "P2", "Goods": "G2"}
    assert ds.warnings == ["Too few fields: expected 3 but parsed 2; missing values left empty"]


def test_unterminated_quote_keeps_following_rows():
    ds = parse_csv('Invoice,PO,Goods\nA,"P1,G1\nB,P2,G2\n')
    assert [r["Invoice"] for r in ds.rows] == ["A", "B"]
    assert ds.rows[0]["PO"] == '"P1'
    assert ds.rows[1] == {"Invoice": "B", "PO": "P2", "Goods": "G2"}
    assert len(ds.warnings) == 1
    assert ds.warnings[0].startswith("Quoting problem")


def test_unterminated_quote_on_last_row_is_not_dropped():
    ds = parse_csv('Invoice,PO,Goods\nA,P1,G1\nB,P2,G2\nC,"P3,G3\n')
    assert [r["Invoice"] for r in ds.rows] == ["A", "B", "C"]
    assert ds.rows[2]["Goods"] == "G3"
    assert any(w.startswith("Quoting problem") for w in ds.warnings)


def test_quoting_problem_reaches_diagnostics_log():
    log = DiagnosticsLog(mirror=False)
    parse_csv('Invoice,PO,Goods\nA,"P1,G1\n', source_name="po.csv", log=log)
    assert "Quoting problem" in log.messages("warning")[0]


def test_bytes_with_bom_are_decoded():
    ds = parse_csv(b"\xef\xbb\xbfInvoice,PO,Goods\nA,P1,G1\n")
    assert ds.header_fields[0] == "Invoice"


def test_path_source_uses_file_name(tmp_path: Path):
    f = tmp_path / "orders.csv"
    f.write_text("Invoice;PO;Goods\nA;P1;G1\n", encoding="utf-8")
    ds = parse_csv(f)
    assert ds.source_name == "orders.csv"
    assert len(ds) == 1


@pytest.mark.parametrize("text", ["", "   \n\n", "Invoice,PO,Goods\n", "Invoice,PO,Goods\n\n,,\n"])
def test_no_data_rows_is_empty_file_error(text):
    with pytest.raises(ParseError) as ei:
        parse_csv(text)
    assert ei.value.reason == "empty-file"


def test_blank_header_row_is_no_headers_error():
    with pytest.raises(ParseError) as ei:
        parse_csv(",,\n1,2,3\n")
    assert ei.value.reason == "no-headers"


def test_undecodable_bytes_are_unreadable():
    with pytest.raises(ParseError) as ei:
        parse_csv(b"Invoice,PO\n\xff\xfe,x\n", source_name="bad.csv")
    assert ei.value.reason == "unreadable"
    assert ei.value.source_name == "bad.csv"


def test_missing_path_is_unreadable(tmp_path: Path):
    with pytest.raises(ParseError) as ei:
        parse_csv(tmp_path / "missing.csv")
    assert ei.value.reason == "unreadable"


def test_events_are_sent_to_diagnostics_log():
    log = DiagnosticsLog(mirror=False)
    parse_csv("Invoice;PO;Goods\nA;P1;G1\n", source_name="po.csv", log=log)
    assert log.messages() == ["Detected delimiter: ';' in po.csv"]

    log.clear()
    parse_csv("PO\nP1\n", source_name="rec.csv", log=log)
    assert log.messages("warning")[0].startswith("Warning: Some parsing issues in rec.csv:")
