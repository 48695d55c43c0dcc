from __future__ import annotations

import warnings

import pytest

from fcrgen.services.normalizers import normalize_date, normalize_number, normalize_serial


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("7", "000007"),
        ("123456", "123456"),
        ("1234567", "1234567"),
        ("12.9", "000012"),
        ("42.0", "000042"),
        (" 15 ", "000015"),
        ("-7", "-000007"),
        ("-12.9", "-000012"),
        ("-0.5", "000000"),
    ],
)
def test_normalize_serial_pads_to_six_digits(raw, expected):
    assert normalize_serial(raw) == expected


@pytest.mark.parametrize("raw", ["ABC", "EXP-12", "1_000", "nan", "inf", "12a"])
def test_normalize_serial_non_numeric_passes_through(raw):
    assert normalize_serial(raw) == raw


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_normalizers_empty_input_gives_empty_string(raw):
    assert normalize_serial(raw) == ""
    assert normalize_date(raw) == ""
    assert normalize_number(raw) == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-01-05", "05-01-2024"),
        ("2024-01-05 10:30:00", "05-01-2024"),
        ("01/05/2024", "05-01-2024"),
        ("20240105", "05-01-2024"),
        ("05-01-2024", "05-01-2024"),
        ("5-1-2024", "05-01-2024"),
    ],
)
def test_normalize_date_formats_day_month_year(raw, expected):
    assert normalize_date(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["not a date", "12345", "31-02-2024", "N/A", "May", "Jan", "1st", "today", "now", "Tuesday"],
)
def test_normalize_date_unparseable_passes_through(raw):
    assert normalize_date(raw) == raw


@pytest.mark.parametrize(
    "raw",
    ["2024-01-05", "2023-12-31", "02/28/2024", "20231115", "15-11-2023", "May 2024", "May", "today"],
)
def test_normalize_date_is_idempotent(raw):
    once = normalize_date(raw)
    assert normalize_date(once) == once


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("5", "5"),
        ("5.0", "5"),
        ("5.50", "5.5"),
        ("0.25", "0.25"),
        ("1e3", "1000"),
        ("2024", "2024"),
        (" 7 ", "7"),
    ],
)
def test_normalize_number_canonical_form(raw, expected):
    assert normalize_number(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "12abc", "1_000", "nan"])
def test_normalize_number_non_numeric_passes_through(raw):
    assert normalize_number(raw) == raw


def test_normalize_date_day_first_slash_date_is_quiet():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert normalize_date("13/01/2024") == "13-01-2024"
