"""
Column mapping: pulls the raw date, description and signed amount out of a
CSV row using a bank profile.

Lookups never raise. A reference that does not resolve (unknown header,
non-numeric or out-of-range index) reads as a missing value.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from ..schemas.bank_profile import BankProfile
from .csv_reader import HeaderedRow, HeaderlessRow, RawRow, as_raw_row

# Leading decimal number, the way a lenient float parser reads "12.50 CR"
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

ZERO = Decimal("0")

# Rows at or above this size are rejected (cents must fit a 64-bit integer)
MAX_AMOUNT = Decimal("1E15")


@dataclass(frozen=True)
class MappedRow:
    """Fields extracted from one row, before date normalization."""
    date: str | None
    description: str
    amount: Decimal


def parse_amount(value: str | None) -> Decimal:
    """
    Parse an amount cell.

    Thousands-separator commas are stripped ("3,142.50" -> 3142.50). Cells
    that do not start with a number read as zero so one bad cell cannot
    abort an import.
    """
    if value is None:
        return ZERO
    cleaned = str(value).replace(",", "")
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return ZERO
    try:
        amount = Decimal(match.group(0).strip())
    except InvalidOperation:
        return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def _header_lookup(values) -> Callable[[str], str | None]:
    def lookup(ref: str) -> str | None:
        return values.get(ref.strip())
    return lookup


def _index_lookup(values) -> Callable[[str], str | None]:
    def lookup(ref: str) -> str | None:
        ref = ref.strip()
        if not ref.isdecimal():
            return None
        idx = int(ref)
        if idx >= len(values):
            return None
        return values[idx]
    return lookup


def resolver_for(row: RawRow) -> Callable[[str], str | None]:
    """Return the column lookup for a row's shape."""
    if isinstance(row, HeaderedRow):
        return _header_lookup(row.values)
    if isinstance(row, HeaderlessRow):
        return _index_lookup(row.values)
    raise TypeError(f"Unsupported row type: {type(row).__name__}")


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def map_row(row, profile: BankProfile) -> MappedRow | None:
    """
    Extract date, description and amount from a row.

    Returns None when the row has to be rejected because no amount can be
    read or the amount is out of range. A missing date is passed through as
    None; the caller rejects it.
    """
    lookup = resolver_for(as_raw_row(row))

    raw_date = lookup(profile.date_column) if profile.date_column else None
    if _is_blank(raw_date):
        raw_date = None

    fragments = (lookup(ref) for ref in profile.description_columns if ref)
    description = " ".join(f.strip() for f in fragments if not _is_blank(f))

    if profile.uses_split_amount:
        credit = parse_amount(lookup(profile.credit_column))
        debit = parse_amount(lookup(profile.debit_column))
        amount = abs(credit) - abs(debit)
    elif profile.amount_column.strip():
        raw_amount = lookup(profile.amount_column)
        # A blank cell is not a zero amount (e.g. trailing ",," lines)
        if _is_blank(raw_amount):
            return None
        amount = parse_amount(raw_amount)
    else:
        return None

    if abs(amount) >= MAX_AMOUNT:
        return None

    return MappedRow(date=raw_date, description=description, amount=amount)
