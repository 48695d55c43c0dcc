from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from fcrgen.models.config_models import DEFAULT_DELIMITERS
from fcrgen.models.dataset import ParsedDataset, Row

if TYPE_CHECKING:
    from fcrgen.logging.event_log import DiagnosticsLog

"""Delimiter-aware CSV reader.

- The delimiter is guessed from a sample of the first non-empty lines among a
  fixed candidate set (comma, semicolon, tab, pipe); the caller never passes it.
- The first non-empty line is the header; blank lines and lines whose cells
  are all blank are skipped. Header names are stripped.
- All values stay strings (no NA conversion, no dtype inference).
- Ragged rows and quoting problems are warnings, not failures. Only an empty
  file, a header without data rows, a header of blank names or undecodable
  input abort the read (ParseError).
"""

__all__ = [
    "ParseError",
    "DELIMITER_CANDIDATES",
    "SAMPLE_LINES",
    "Source",
    "delimiter_label",
    "decode_source",
    "detect_delimiter",
    "parse_csv",
]

DELIMITER_CANDIDATES: tuple[str, ...] = DEFAULT_DELIMITERS
SAMPLE_LINES = 10

Source = bytes | str | Path


class ParseError(Exception):
    """Raised when a file cannot produce a non-empty dataset.

    reason is one of: "empty-file", "no-headers", "unreadable", "malformed".
    """

    def __init__(self, reason: str, message: str, source_name: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.source_name = source_name


def delimiter_label(delimiter: str) -> str:
    return "\\t" if delimiter == "\t" else delimiter


def decode_source(source: Source, source_name: str = "input.csv") -> str:
    """Return the text of a source.

    Path -> file contents, bytes -> UTF-8 decoded (BOM tolerated), str -> the
    text itself.
    """
    if isinstance(source, str):
        return source.lstrip("\ufeff")
    if isinstance(source, Path):
        try:
            data = source.read_bytes()
        except OSError as e:
            raise ParseError("unreadable", f"Failed to read {source_name}: {e}", source_name) from e
    else:
        data = source
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(
            "unreadable", f"Failed to decode {source_name} as UTF-8: {e}", source_name
        ) from e


def _field_counts(lines: list[str], delimiter: str) -> list[int]:
    try:
        return [len(fields) for fields in csv.reader(lines, delimiter=delimiter)]
    except csv.Error:
        return []


def detect_delimiter(
    text: str, candidates: Sequence[str] = DELIMITER_CANDIDATES
) -> tuple[str, bool]:
    """Guess the delimiter of a CSV text.

    For each candidate the field count of every sampled line is computed.
    Candidates averaging fewer than two fields are rejected; among the rest
    the one whose field count varies least between consecutive lines wins,
    ties going to the larger average field count and then candidate order.

    Returns:
        (delimiter, detected). detected is False when no candidate qualified
        and the comma (or the first candidate) was used as a fallback.
    """
    lines = [ln for ln in text.splitlines() if ln.strip()][:SAMPLE_LINES]
    best: tuple[int, float] | None = None
    chosen: str | None = None
    for delim in candidates:
        counts = _field_counts(lines, delim)
        if not counts:
            continue
        avg = sum(counts) / len(counts)
        if avg < 2:
            continue
        delta = sum(abs(cur - prev) for prev, cur in zip(counts, counts[1:]))
        key = (delta, -avg)
        if best is None or key < best:
            best = key
            chosen = delim
    if chosen is None:
        fallback = "," if "," in candidates else candidates[0]
        return fallback, False
    return chosen, True


def _quoting_problem(text: str, delimiter: str) -> str | None:
    # pandas' python engine drops everything after an unterminated quote
    # without raising, so the text is checked up front
    try:
        for _ in csv.reader(io.StringIO(text), delimiter=delimiter, strict=True):
            pass
    except csv.Error as e:
        return str(e)
    return None


def _short_row_warnings(text: str, delimiter: str, width: int, quoting: int) -> list[str]:
    try:
        parsed = list(csv.reader(io.StringIO(text), delimiter=delimiter, quoting=quoting))
    except csv.Error:
        return []
    rows = [fields for fields in parsed if any(f.strip() for f in fields)]
    return [
        f"Too few fields: expected {width} but parsed {len(fields)}; missing values left empty"
        for fields in rows[1:]
        if len(fields) < width
    ]


def _header_width(text: str, delimiter: str) -> int:
    for line in text.splitlines():
        if line.strip():
            counts = _field_counts([line], delimiter)
            return counts[0] if counts else 1
    return 0


def _read_frame(
    text: str, delimiter: str, width: int, warnings: list[str], quoting: int
) -> pd.DataFrame:
    def _bad_line(fields: list[str]) -> list[str]:
        warnings.append(
            f"Too many fields: expected {width} but parsed {len(fields)}; extra values dropped"
        )
        return fields[:width]

    return pd.read_csv(
        io.StringIO(text),
        sep=delimiter,
        header=None,
        dtype=str,
        keep_default_na=False,
        na_filter=False,
        skip_blank_lines=True,
        engine="python",
        quoting=quoting,
        on_bad_lines=_bad_line,
    )


def parse_csv(
    source: Source,
    delimiters: Sequence[str] = DELIMITER_CANDIDATES,
    *,
    source_name: str | None = None,
    log: DiagnosticsLog | None = None,
) -> ParsedDataset:
    """Parse a CSV source into a ParsedDataset.

    Parameters
    ----------
    source: file path, raw bytes or decoded text
    delimiters: delimiter candidates to guess from
    source_name: name used in messages (defaults to the file name for paths)
    log: diagnostics sink receiving warnings and the detected delimiter

    Raises
    ------
    ParseError: empty file, header-only file, blank header row, undecodable
        or untokenizable input
    """
    if source_name is None:
        source_name = source.name if isinstance(source, Path) else "input.csv"

    text = decode_source(source, source_name)
    if not text.strip():
        raise ParseError(
            "empty-file", f"No valid data found in {source_name}. The file is empty.", source_name
        )

    warnings: list[str] = []
    delimiter, detected = detect_delimiter(text, delimiters)
    if not detected:
        warnings.append(
            f"Unable to auto-detect delimiting character; defaulted to '{delimiter_label(delimiter)}'"
        )
    width = _header_width(text, delimiter)
    quoting = csv.QUOTE_MINIMAL
    problem = _quoting_problem(text, delimiter)
    if problem is not None:
        warnings.append(f"Quoting problem ({problem}); quotes read as literal characters")
        quoting = csv.QUOTE_NONE
    pending = len(warnings)

    try:
        df = _read_frame(text, delimiter, width, warnings, quoting)
    except pd.errors.EmptyDataError as e:
        raise ParseError("empty-file", f"No valid data found in {source_name}: {e}", source_name) from e
    except (pd.errors.ParserError, csv.Error) as e:
        if quoting == csv.QUOTE_NONE:
            raise ParseError("malformed", f"Failed to parse {source_name}: {e}", source_name) from e
        del warnings[pending:]
        warnings.append(f"Quoting problem ({e}); quotes read as literal characters")
        quoting = csv.QUOTE_NONE
        try:
            df = _read_frame(text, delimiter, width, warnings, quoting)
        except (pd.errors.ParserError, csv.Error) as e2:
            raise ParseError("malformed", f"Failed to parse {source_name}: {e2}", source_name) from e2
    warnings.extend(_short_row_warnings(text, delimiter, width, quoting))

    records = df.fillna("").values.tolist()
    if not records:
        raise ParseError("empty-file", f"No valid data found in {source_name}.", source_name)

    header = [str(c).strip() for c in records[0]]
    if not any(header):
        raise ParseError(
            "no-headers",
            f"No headers found in {source_name}. Please ensure the file has a header row.",
            source_name,
        )
    seen: set[str] = set()
    for name in header:
        if name in seen:
            warnings.append(f"Duplicate header '{name}'; the last column of that name is used")
        seen.add(name)

    rows: list[Row] = []
    for raw in records[1:]:
        values = ["" if v is None else str(v) for v in raw]
        if all(not v.strip() for v in values):
            continue
        rows.append(dict(zip(header, values)))

    if not rows:
        raise ParseError(
            "empty-file",
            f"No valid data found in {source_name}. Please check the file format.",
            source_name,
        )

    if log is not None:
        if warnings:
            log.warning(f"Warning: Some parsing issues in {source_name}: {', '.join(warnings)}")
        log.info(f"Detected delimiter: '{delimiter_label(delimiter)}' in {source_name}")

    return ParsedDataset(
        rows=rows,
        detected_delimiter=delimiter,
        header_fields=header,
        warnings=warnings,
        source_name=source_name,
    )
