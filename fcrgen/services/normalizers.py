from __future__ import annotations

import logging
import math
import re
import warnings
from typing import Any

import pandas as pd

"""Field normalizers.

Pure, total functions over one cell value. Empty or missing input gives "".
Anything that cannot be interpreted is returned unchanged: a malformed cell
degrades to pass-through so one bad row never aborts a whole batch.
"""

__all__ = [
    "SERIAL_WIDTH",
    "DATE_FORMAT",
    "normalize_serial",
    "normalize_date",
    "normalize_number",
]

logger = logging.getLogger(__name__)

SERIAL_WIDTH = 6
DATE_FORMAT = "%d-%m-%Y"

_DMY = re.compile(r"^\s*(\d{1,2})-(\d{1,2})-(\d{4})\s*$")
_DIGITS = re.compile(r"^\s*\d+\s*$")
_YYYYMMDD = re.compile(r"^\s*\d{8}\s*$")
_YEAR = re.compile(r"\d{4}")
MIN_YEAR = 1000


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


def _parse_float(text: str) -> float | None:
    # float() accepts "1_000" and "nan"; neither is a number in a CSV cell
    if "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def normalize_serial(value: Any) -> str:
    """Zero-pad a serial number to six digits.

    The value is read as a number and truncated toward zero ("7" -> "000007",
    "12.9" -> "000012"). A minus sign is kept in front of six padded digits
    ("-7" -> "-000007"). Non-numeric input is returned unchanged.
    """
    text = _as_text(value)
    if not text.strip():
        return ""
    number = _parse_float(text)
    if number is None:
        logger.debug("serial fallback value=%r", text)
        return text
    serial = int(number)
    sign = "-" if serial < 0 else ""
    return sign + str(abs(serial)).zfill(SERIAL_WIDTH)


def normalize_date(value: Any) -> str:
    """Reformat a date to DD-MM-YYYY.

    - DD-MM-YYYY input is read day first, so the function is idempotent
    - ISO dates, timestamps and month-first slash dates go through pandas
    - bare digit strings are not dates, except 8-digit YYYYMMDD
    - text without a four-digit year ("May", "today") is not a date
    - anything unparseable is returned unchanged
    """
    text = _as_text(value)
    if not text.strip():
        return ""

    m = _DMY.match(text)
    if m:
        day, month, year = (int(g) for g in m.groups())
        try:
            return pd.Timestamp(year=year, month=month, day=day).strftime(DATE_FORMAT)
        except ValueError:
            logger.debug("date fallback value=%r", text)
            return text

    if _DIGITS.match(text) and not _YYYYMMDD.match(text):
        return text
    # pandas fills a missing year with 1 and reads "today"/"now" as the clock
    if not _YEAR.search(text):
        logger.debug("date fallback value=%r", text)
        return text

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            ts = pd.to_datetime(text.strip())
    except (ValueError, TypeError, OverflowError):
        logger.debug("date fallback value=%r", text)
        return text
    if pd.isna(ts) or ts.year < MIN_YEAR:
        logger.debug("date fallback value=%r", text)
        return text
    return ts.strftime(DATE_FORMAT)


def normalize_number(value: Any) -> str:
    """Canonical decimal string of a numeric cell.

    Integers lose their fractional zero ("5.0" -> "5"), other values use the
    shortest round-trip form ("5.50" -> "5.5"). Non-numeric input is returned
    unchanged.
    """
    text = _as_text(value)
    if not text.strip():
        return ""
    number = _parse_float(text)
    if number is None:
        logger.debug("number fallback value=%r", text)
        return text
    if number.is_integer():
        return str(int(number))
    return repr(number)
