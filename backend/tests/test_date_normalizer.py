import pytest

from consolidator.schemas import DateFormat
from consolidator.services.date_normalizer import expand_two_digit_year, normalize_date


def test_two_digit_year_pivot():
    assert normalize_date("01/01/50", "MM/DD/YY") == "1950-01-01"
    assert normalize_date("01/01/49", "MM/DD/YY") == "2049-01-01"
    assert expand_two_digit_year(0) == 2000
    assert expand_two_digit_year(99) == 1999


def test_auto_reads_iso_prefix_without_timezone_shift():
    assert normalize_date("2024-01-15T00:00:00Z") == "2024-01-15"
    assert normalize_date("2024-01-15T23:30:00-08:00", DateFormat.AUTO) == "2024-01-15"


def test_auto_reads_day_month_abbreviation():
    assert normalize_date("16-Feb-26", "auto") == "2026-02-16"
    assert normalize_date("16-feb-2026", "auto") == "2026-02-16"


@pytest.mark.parametrize("raw, expected", [
    ("2024/03/05", "2024-03-05"),
    ("Mar 5, 2024", "2024-03-05"),
    ("5 March 2024", "2024-03-05"),
    ("Tue, 05 Mar 2024 10:00:00 +0000", "2024-03-05"),
])
def test_auto_reads_unambiguous_text_layouts(raw, expected):
    assert normalize_date(raw) == expected


def test_auto_does_not_guess_numeric_day_month_order():
    assert normalize_date("03/05/2024") is None


def test_explicit_formats():
    assert normalize_date("15/01/2024", "DD/MM/YYYY") == "2024-01-15"
    assert normalize_date("01/15/2024", "MM/DD/YYYY") == "2024-01-15"
    assert normalize_date("15-01-2024", "DD-MM-YYYY") == "2024-01-15"
    assert normalize_date("1-5-2024", "MM-DD-YYYY") == "2024-01-05"
    assert normalize_date("2024-01-15", "YYYY-MM-DD") == "2024-01-15"
    assert normalize_date("15-Jan-24", "DD-Mon-YY") == "2024-01-15"


def test_invalid_input_returns_none():
    assert normalize_date("not-a-date", "YYYY-MM-DD") is None
    assert normalize_date("31/02/2024", "DD/MM/YYYY") is None
    assert normalize_date("2024-02-30") is None
    assert normalize_date("15/01/2024", "MM/DD/YYYY") is None
    assert normalize_date("15/01/24", "DD/MM/YYYY") is None
    assert normalize_date("", "auto") is None
    assert normalize_date("   ") is None
    assert normalize_date(None) is None
    assert normalize_date("2024-01-15", "YYYY.MM.DD") is None


@pytest.mark.parametrize("raw, fmt", [
    ("15/01/2024", "DD/MM/YYYY"),
    ("01/15/24", "MM/DD/YY"),
    ("16-Feb-2026", "DD-Mon-YYYY"),
    ("2024-01-15T08:00:00", "auto"),
])
def test_canonical_output_is_stable(raw, fmt):
    first = normalize_date(raw, fmt)
    assert first is not None
    assert normalize_date(first, "YYYY-MM-DD") == first
    assert normalize_date(raw, fmt) == first


def test_out_of_range_years_are_rejected_not_raised():
    assert normalize_date("Tue, 16 Jan 99999999999999999999 10:00:00 +0000") is None
    assert normalize_date("16 Jan 99999", "auto") is None


def test_rfc_2822_two_digit_years_use_the_same_pivot():
    assert normalize_date("Sat, 16 Jan 60 10:00:00 +0000") == "1960-01-16"
    assert normalize_date("16-Jan-60") == "1960-01-16"
    assert normalize_date("Tue, 16 Jan 24 10:00:00 +0000") == "2024-01-16"
    assert normalize_date("Sat, 16 Jan 2060 10:00:00 +0000") == "2060-01-16"
