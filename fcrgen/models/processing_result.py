from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

"""Processing result models.

ProcessingResult is what one processing run hands back: the ordered output
records on success, or an error message and no records on failure (partial
results are never returned).
"""

__all__ = [
    "ProcessingMode",
    "TypeCounts",
    "ProcessingResult",
]


class ProcessingMode(str, Enum):
    FCR = "fcr"
    PO = "po"


@dataclass(frozen=True)
class TypeCounts:
    """Invoice classification counts (PO mode)."""
    mixed: int = 0
    recycled: int = 0
    normal: int = 0

    @property
    def total(self) -> int:
        return self.mixed + self.recycled + self.normal


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one processing run."""
    mode: ProcessingMode
    success: bool
    records: list[dict[str, Any]]  # OutputRecord mappings in output order
    input_rows: int  # data rows read from the primary file
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    error: str | None = None
    type_counts: TypeCounts | None = None  # PO mode only
    warnings: list[str] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.records)
