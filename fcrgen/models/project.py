from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

"""Project model: a named, year-scoped snapshot of processed records.

Mirrors one row of the fcr_projects table. processed_data holds the
OutputRecord mappings exactly as produced (field names preserved) and
copied_boxes the CopyTracker mapping.
"""

__all__ = [
    "Project",
    "ProjectSummary",
]


@dataclass(frozen=True)
class ProjectSummary:
    """List view of a project (no record payload)."""
    id: int
    name: str
    year: int
    is_archived: bool
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class Project:
    id: int
    name: str
    year: int
    processed_data: list[dict[str, Any]] = field(default_factory=list)
    copied_boxes: dict[str, bool] = field(default_factory=dict)
    is_archived: bool = False
    export_count: int = 0
    last_export_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_boxes(self) -> int:
        return len(self.processed_data)

    @property
    def copied_count(self) -> int:
        return sum(1 for v in self.copied_boxes.values() if v)

    @property
    def completion_percentage(self) -> int:
        """Percentage rounded half up; 0 for an empty project."""
        if self.total_boxes == 0:
            return 0
        return math.floor((self.copied_count / self.total_boxes) * 100 + 0.5)
