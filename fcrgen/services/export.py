from __future__ import annotations

import html
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..models.copy_state import CopyTracker

"""HTML report export (saved with a .doc extension so word processors open it).

One box per FCR record in record order, with copy status badges and the
Total / Completed / Remaining counts of the whole collection.
"""

__all__ = [
    "render_report",
    "report_filename",
    "write_report",
]

_STYLE = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: 'Arial', sans-serif; line-height: 1.6; color: #333; background: #f8f9fa; padding: 20px; }
        .container { max-width: 1200px; margin: 0 auto; }
        .header { text-align: center; margin-bottom: 30px; padding: 20px; background: #fff; border-radius: 8px; }
        .stats { display: flex; justify-content: center; gap: 40px; margin: 20px 0; }
        .stat-number { font-size: 2em; font-weight: bold; color: #2563eb; }
        .stat-label { font-size: 0.9em; color: #666; }
        .progress-bar { width: 100%; height: 12px; background: #e5e7eb; border-radius: 6px; overflow: hidden; margin: 10px 0; }
        .progress-fill { height: 100%; background: #10b981; }
        .boxes-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(350px, 1fr)); gap: 20px; }
        .fcr-box { position: relative; background: #fff; border: 2px solid #e5e7eb; border-radius: 8px; padding: 20px; }
        .fcr-box.copied { border-color: #10b981; background: #f0fdf4; }
        .box-number { position: absolute; top: 10px; left: 10px; font-weight: bold; color: #2563eb; }
        .copied-badge { position: absolute; top: 10px; right: 10px; color: #10b981; font-weight: bold; font-size: 0.8em; }
        .box-header { margin: 20px 0 10px; }
        .box-content { font-family: 'Courier New', monospace; white-space: pre-wrap; font-size: 0.9em; }
        .footer { text-align: center; margin-top: 30px; color: #666; font-size: 0.9em; }
"""


def _box(record: Mapping[str, Any], copied: bool) -> str:
    badge = '<div class="copied-badge">&#10003; COMPLETED</div>' if copied else ""
    return (
        f'        <div class="fcr-box{" copied" if copied else ""}">\n'
        f'            <div class="box-number">{html.escape(str(record.get("index", "")))}</div>\n'
        f"            {badge}\n"
        f'            <div class="box-header"><h3>Invoice No.: {html.escape(str(record.get("invoiceNo", "")))}</h3></div>\n'
        f'            <div class="box-content">{html.escape(str(record.get("formattedText", "")))}</div>\n'
        f"        </div>\n"
    )


def render_report(
    records: Sequence[Mapping[str, Any]],
    copied: Mapping[str, bool] | CopyTracker,
    project_name: str,
    year: int | str,
    generated_at: datetime | None = None,
) -> str:
    """Render the export document for a record collection."""
    tracker = copied if isinstance(copied, CopyTracker) else CopyTracker(copied)
    progress = tracker.progress(str(r.get("id", "")) for r in records)
    percent = progress.percent_label
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    title = html.escape(f"{project_name} {year}")
    boxes = "".join(_box(r, tracker.is_copied(str(r.get("id", "")))) for r in records)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>FCR Export - {title}</title>
    <style>{_STYLE}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>FCR Export Report</h1>
            <p><strong>{html.escape(project_name)} - {html.escape(str(year))}</strong></p>
            <p>Generated on: {stamp}</p>
            <div class="stats">
                <div class="stat-item"><div class="stat-number">{progress.total}</div><div class="stat-label">Total Boxes</div></div>
                <div class="stat-item"><div class="stat-number">{progress.completed}</div><div class="stat-label">Completed</div></div>
                <div class="stat-item"><div class="stat-number">{progress.remaining}</div><div class="stat-label">Remaining</div></div>
            </div>
            <div class="progress-bar"><div class="progress-fill" style="width: {percent}%"></div></div>
            <p><strong>Progress: {percent}% Complete</strong></p>
        </div>
        <div class="boxes-grid">
{boxes}        </div>
        <div class="footer">
            <p>Export completed at {stamp}</p>
            <p>Total Records: {progress.total} | Completed: {progress.completed} | Progress: {percent}%</p>
        </div>
    </div>
</body>
</html>
"""


def report_filename(project_name: str, year: int | str, day: date | None = None) -> str:
    safe = re.sub(r"[^a-z0-9]", "_", project_name, flags=re.IGNORECASE)
    return f"FCR_{safe}_{year}_{(day or date.today()).isoformat()}.doc"


def write_report(
    path: Path,
    records: Sequence[Mapping[str, Any]],
    copied: Mapping[str, bool] | CopyTracker,
    project_name: str,
    year: int | str,
) -> Path:
    """Write the report; a directory path gets report_filename()."""
    if path.is_dir():
        path = path / report_filename(project_name, year)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(records, copied, project_name, year), encoding="utf-8")
    return path
