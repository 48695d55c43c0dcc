from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum

"""LogEvent model for the diagnostics sink.

A LogEvent is one entry of the ordered, append-only processing log shown to
the user after a run (the "Processing Log" panel of the original screens) and
asserted on directly by tests.
"""

__all__ = [
    "Severity",
    "LogEvent",
]


class Severity(str, Enum):
    """Severity of a diagnostics event.

    - INFO: progress messages (file read, delimiter detected, counts)
    - SUCCESS: a run or an action completed
    - WARNING: non-fatal parse anomalies (ragged rows, quoting, delimiter guess)
    - ERROR: fatal run failures and rejected actions
    """
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class LogEvent:
    """Single diagnostics entry.

    Attributes:
        message: Human readable message
        severity: Severity value string (info/success/warning/error)
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
    """
    message: str
    severity: str
    timestamp: str  # ISO8601 UTC

    @staticmethod
    def create(message: str, severity: Severity | str = Severity.INFO) -> LogEvent:
        """Create a new LogEvent stamped with the current UTC time.

        Unknown severity strings are recorded as INFO.
        """
        try:
            sev = Severity(severity)
        except ValueError:
            sev = Severity.INFO
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return LogEvent(message=str(message), severity=sev.value, timestamp=ts)

    def to_json_line(self) -> str:
        """Serialize to a single JSON Lines entry (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
