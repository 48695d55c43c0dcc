from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

"""Header validation for the three fixed input schemas.

PO and recycled-reference files need an exact, ordered header (after trimming);
FCR files only need to contain the twelve required columns, in any order, with
extra columns allowed. The asymmetry is intentional: the PO layout is small and
rigid, FCR exports carry additional metadata columns.
"""

__all__ = [
    "ValidationMode",
    "HeaderMismatchError",
    "PO_HEADERS",
    "RECYCLED_HEADERS",
    "FCR_REQUIRED_COLUMNS",
    "validate_headers",
]

PO_HEADERS: list[str] = ["Invoice", "PO", "Goods"]
RECYCLED_HEADERS: list[str] = ["PO"]
FCR_REQUIRED_COLUMNS: list[str] = [
    "EXP Serial",
    "Invoice Date",
    "Entry Date",
    "Date of Contact",
    "Description",
    "PO Numbers",
    "Invoice No",
    "AD Code",
    "EXP Year",
    "Lc Contact",
    "Country short code",
    "Goods",
]


class ValidationMode(str, Enum):
    EXACT = "exact"  # ordered equality
    SUPERSET = "superset"  # every expected column present


class HeaderMismatchError(Exception):
    """Raised when a file header does not satisfy its schema.

    Attributes:
        expected: expected column list
        got: actual header list
        missing: expected columns absent from the header
    """

    def __init__(
        self,
        expected: Sequence[str],
        got: Sequence[str],
        *,
        missing: Sequence[str] | None = None,
        file_name: str | None = None,
        mode: ValidationMode = ValidationMode.EXACT,
    ) -> None:
        self.expected = list(expected)
        self.got = list(got)
        self.missing = list(missing) if missing is not None else [
            c for c in self.expected if c not in self.got
        ]
        self.file_name = file_name
        self.mode = mode
        super().__init__(self._message())

    def _message(self) -> str:
        where = f" in {self.file_name}" if self.file_name else ""
        lists = f"Expected: [{', '.join(self.expected)}], Got: [{', '.join(self.got)}]"
        if self.mode is ValidationMode.SUPERSET:
            return f"Missing required columns{where}: {', '.join(self.missing)}. {lists}"
        return f"Header mismatch{where}. {lists}"


def validate_headers(
    header_fields: Sequence[str],
    expected_columns: Sequence[str],
    mode: ValidationMode,
    file_name: str | None = None,
) -> None:
    """Check a header against a schema.

    Raises:
        HeaderMismatchError: EXACT mode and the trimmed header differs from the
            trimmed expected list in any way (order, extra, missing); SUPERSET
            mode and at least one expected column is absent.
    """
    got = [h.strip() for h in header_fields]
    expected = [c.strip() for c in expected_columns]

    if mode is ValidationMode.EXACT:
        if got != expected:
            raise HeaderMismatchError(expected, got, file_name=file_name, mode=mode)
        return

    present = set(got)
    missing = [c for c in expected if c not in present]
    if missing:
        raise HeaderMismatchError(expected, got, missing=missing, file_name=file_name, mode=mode)
