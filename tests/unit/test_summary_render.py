from __future__ import annotations

from datetime import UTC, datetime

from fcrgen.models.processing_result import ProcessingMode, ProcessingResult, TypeCounts
from fcrgen.services.summary import format_seconds, render_summary_line


def _result(**overrides):
    start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)
    values = dict(
        mode=ProcessingMode.FCR,
        success=True,
        records=[{"id": "box_0"}, {"id": "box_1"}],
        input_rows=2,
        start_time=start,
        end_time=start,
        elapsed_seconds=1.5,
    )
    values.update(overrides)
    return ProcessingResult(**values)


def test_fcr_summary_line():
    line = render_summary_line(_result())
    assert line == "SUMMARY mode=fcr status=ok rows=2 records=2 warnings=0 elapsed_sec=1.5"


def test_po_summary_line_has_type_counts():
    res = _result(
        mode=ProcessingMode.PO,
        records=[{}],
        input_rows=5,
        type_counts=TypeCounts(mixed=1, recycled=0, normal=2),
        warnings=["w"],
    )
    line = render_summary_line(res)
    assert line.startswith("SUMMARY mode=po status=ok rows=5 records=1 warnings=1 ")
    assert line.endswith("mixed=1 recycled=0 normal=2")


def test_failed_run():
    line = render_summary_line(_result(success=False, records=[], input_rows=0, error="boom"))
    assert "status=failed rows=0 records=0" in line


def test_format_seconds():
    assert format_seconds(0) == "0"
    assert format_seconds(2.0) == "2"
    assert format_seconds(0.000123) == "0.000123"
    assert format_seconds(0.25) == "0.25"
    assert "e" not in format_seconds(0.0000005)
