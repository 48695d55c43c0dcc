from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

"""Copy tracking state (which FCR boxes the user already copied).

The mapping form (record id -> True) is what the project store keeps in its
copied_boxes column, so CopyTracker round-trips through to_dict/from_dict.
"""

__all__ = [
    "CopyProgress",
    "CopyTracker",
]


@dataclass(frozen=True)
class CopyProgress:
    """Aggregate counts for a record collection."""
    total: int
    completed: int
    remaining: int
    percent: float  # 0.0 - 100.0

    @property
    def percent_label(self) -> str:
        return f"{self.percent:.1f}"


class CopyTracker:
    """Record-id -> copied map with undo of the most recent copy."""

    def __init__(self, copied: Mapping[str, Any] | None = None) -> None:
        self._copied: dict[str, bool] = {}
        self.last_copied: str | None = None
        if copied:
            for box_id, flag in copied.items():
                if flag:
                    self._copied[str(box_id)] = True

    def mark_copied(self, box_id: str) -> None:
        self._copied[box_id] = True
        self.last_copied = box_id

    def undo(self, box_id: str) -> bool:
        """Remove the copied flag. Returns False when the box was not copied."""
        removed = self._copied.pop(box_id, None) is not None
        if self.last_copied == box_id:
            self.last_copied = None
        return removed

    def undo_last(self) -> bool:
        """Undo the most recent copy. Returns False when there is nothing to undo."""
        if self.last_copied is None or self.last_copied not in self._copied:
            return False
        return self.undo(self.last_copied)

    def reset(self) -> None:
        self._copied.clear()
        self.last_copied = None

    def is_copied(self, box_id: str) -> bool:
        return self._copied.get(box_id, False)

    def __len__(self) -> int:
        return len(self._copied)

    def to_dict(self) -> dict[str, bool]:
        return dict(self._copied)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> CopyTracker:
        return cls(data)

    def progress(self, record_ids: Iterable[str]) -> CopyProgress:
        ids = list(record_ids)
        total = len(ids)
        completed = sum(1 for i in ids if self.is_copied(i))
        percent = (completed / total) * 100 if total > 0 else 0.0
        return CopyProgress(
            total=total,
            completed=completed,
            remaining=total - completed,
            percent=percent,
        )
