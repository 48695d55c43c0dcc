from __future__ import annotations

from dataclasses import dataclass, field

"""ParsedDataset model: the result of reading one uploaded CSV file."""

__all__ = [
    "Row",
    "ParsedDataset",
]

# Column name -> raw string value, one per CSV data line
Row = dict[str, str]


@dataclass(frozen=True)
class ParsedDataset:
    """Rows of one CSV file in original order plus parse metadata.

    header_fields and rows are never empty; the reader raises ParseError instead.
    """
    rows: list[Row]
    detected_delimiter: str
    header_fields: list[str]
    warnings: list[str] = field(default_factory=list)
    source_name: str = "input.csv"

    def __len__(self) -> int:
        return len(self.rows)
