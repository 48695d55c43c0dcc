# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any

import pytest

FCR_HEADER = (
    "EXP Serial,Invoice Date,Entry Date,Date of Contact,Description,PO Numbers,"
    "Invoice No,AD Code,EXP Year,Lc Contact,Country short code,Goods"
)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("PGDSN", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """fcr:
  template_variant: porcelain
po:
  material_descriptions:
    normal: "100% PORCELAIN TABLEWARE"
delimiters: [",", ";", "\\t", "|"]
output_directory: ./output
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "fcr.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def fcr_row() -> dict[str, str]:
    return {
        "EXP Serial": "7",
        "Invoice Date": "2024-01-05",
        "AD Code": "123",
        "EXP Year": "2024",
        "Entry Date": "2024-01-06",
        "Lc Contact": "LC1",
        "Date of Contact": "2024-01-07",
        "Country short code": "US",
        "PO Numbers": "PO1",
        "Goods": "Tableware",
        "Description": "Desc",
        "Invoice No": "5",
    }


@pytest.fixture()
def fcr_csv(temp_workdir: Path) -> Path:
    f = temp_workdir / "data" / "fcr.csv"
    f.write_text(
        FCR_HEADER + "\n"
        "7,2024-01-05,2024-01-06,2024-01-07,Desc,PO1,5,123,2024,LC1,US,Tableware\n"
        "12,2024-02-01,2024-02-02,2024-02-03,Cups,PO2,6,123,2024,LC2,DE,Cups\n",
        encoding="utf-8",
    )
    return f


@pytest.fixture()
def po_csvs(temp_workdir: Path) -> tuple[Path, Path]:
    po = temp_workdir / "data" / "po.csv"
    po.write_text(
        "Invoice,PO,Goods\n"
        "A,P1,G1\n"
        "A,P2,G2\n"
        "B,P3,G3\n"
        "C,P4,\n",
        encoding="utf-8",
    )
    recycled = temp_workdir / "data" / "recycled.csv"
    recycled.write_text("PO\nP1\nP3\n", encoding="utf-8")
    return po, recycled


class FakeCursor:
    """DB-API cursor stand-in: records statements, replays queued results."""

    def __init__(self) -> None:
        self.executed: list[tuple[str, Any]] = []
        self.results: list[Any] = []
        self._current: Any = None

    def queue(self, *results: Any) -> None:
        self.results.extend(results)

    def execute(self, sql: str, params: Any = None) -> None:
        self.executed.append((sql, params))
        self._current = self.results.pop(0) if self.results else None

    def fetchone(self) -> Any:
        if isinstance(self._current, list):
            return self._current[0] if self._current else None
        return self._current

    def fetchall(self) -> list[Any]:
        if self._current is None:
            return []
        return self._current if isinstance(self._current, list) else [self._current]


@pytest.fixture()
def fake_cursor() -> FakeCursor:
    return FakeCursor()
