from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format:
    SUMMARY mode=<fcr|po> status=<ok|failed> rows=<n> records=<n> warnings=<n> elapsed_sec=<s>

PO runs append mixed=<n> recycled=<n> normal=<n>.
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(value: float) -> str:
    """Integers without a fraction, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line of one processing run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> from fcrgen.models.processing_result import ProcessingMode
        >>> r = ProcessingResult(mode=ProcessingMode.FCR, success=True, records=[{}],
        ...     input_rows=1, start_time=t, end_time=t, elapsed_seconds=2.0)
        >>> render_summary_line(r)
        'SUMMARY mode=fcr status=ok rows=1 records=1 warnings=0 elapsed_sec=2'
    """
    parts = [
        f"mode={result.mode.value}",
        f"status={'ok' if result.success else 'failed'}",
        f"rows={result.input_rows}",
        f"records={result.record_count}",
        f"warnings={len(result.warnings)}",
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}",
    ]
    if result.type_counts is not None:
        counts = result.type_counts
        parts.append(f"mixed={counts.mixed} recycled={counts.recycled} normal={counts.normal}")
    return "SUMMARY " + " ".join(parts)
