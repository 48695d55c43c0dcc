from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

from fcrgen.logging.init import SUCCESS_LEVEL, get_logger
from fcrgen.models.log_event import LogEvent, Severity

"""Diagnostics sink: ordered, append-only log of processing events.

- log(message, severity) appends a timestamped LogEvent and mirrors it to the
  application logger at the matching level
- clear() empties the sink (a new run starts with a clean log)
- flush(directory) writes the buffered events as JSON Lines to
  `logs/run-YYYYMMDD-HHMMSS.log` (UTC); the file path is fixed on first flush
- log() never raises; a failing logger handler does not abort processing
"""

__all__ = [
    "LogEvent",
    "Severity",
    "DiagnosticsLog",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

_LEVELS = {
    Severity.INFO.value: logging.INFO,
    Severity.SUCCESS.value: SUCCESS_LEVEL,
    Severity.WARNING.value: logging.WARNING,
    Severity.ERROR.value: logging.ERROR,
}


class DiagnosticsLog:
    """In-memory event list consumed by the CLI and by tests."""

    def __init__(self, logger: logging.Logger | None = None, *, mirror: bool = True) -> None:
        self._events: list[LogEvent] = []
        self._logger = logger
        self._mirror = mirror
        self._file_path: Path | None = None
        self._flushed = 0

    def log(self, message: str, severity: Severity | str = Severity.INFO) -> LogEvent | None:
        try:
            event = LogEvent.create(message, severity)
            self._events.append(event)
        except Exception:  # pragma: no cover - sink must never fail the caller
            return None
        if self._mirror:
            try:
                logger = self._logger or get_logger()
                logger.log(_LEVELS.get(event.severity, logging.INFO), event.message)
            except Exception:  # pragma: no cover
                pass
        return event

    def info(self, message: str) -> LogEvent | None:
        return self.log(message, Severity.INFO)

    def success(self, message: str) -> LogEvent | None:
        return self.log(message, Severity.SUCCESS)

    def warning(self, message: str) -> LogEvent | None:
        return self.log(message, Severity.WARNING)

    def error(self, message: str) -> LogEvent | None:
        return self.log(message, Severity.ERROR)

    def clear(self) -> None:
        self._events.clear()
        self._flushed = 0

    @property
    def events(self) -> list[LogEvent]:
        return list(self._events)

    def messages(self, severity: Severity | str | None = None) -> list[str]:
        """Messages in order, optionally restricted to one severity."""
        if severity is None:
            return [e.message for e in self._events]
        sev = Severity(severity).value
        return [e.message for e in self._events if e.severity == sev]

    def has_errors(self) -> bool:
        return any(e.severity == Severity.ERROR.value for e in self._events)

    def __iter__(self) -> Iterator[LogEvent]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def to_json_lines(self, start: int = 0) -> str:
        return "".join(e.to_json_line() + "\n" for e in self._events[start:])

    def file_path(self, directory: Path | None = None) -> Path:
        if self._file_path is None:
            base = directory if directory is not None else LOGS_DIR
            base.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = base / f"run-{stamp}.log"
        return self._file_path

    def flush(self, directory: Path | None = None) -> Path:
        """Append buffered events to the run log file and return its path.

        Events stay in memory after flushing; clear() is the only way to drop
        them. Only events added since the previous flush are written.
        """
        fp = self.file_path(directory)
        pending = self.to_json_lines(self._flushed)
        if not pending:
            return fp
        with fp.open("a", encoding="utf-8") as f:
            f.write(pending)
        self._flushed = len(self._events)
        return fp
