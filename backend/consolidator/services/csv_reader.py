"""
CSV reading for bank exports.

Turns UTF-8 file content into raw rows for the column mapper:
- skip_rows leading lines (bank letterhead etc.) are dropped before parsing
- completely empty lines are skipped
- with a header, each row maps header name -> cell value
- without one, each row is the plain list of cell values
"""

import csv
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from io import StringIO

from ..schemas.bank_profile import BankProfile


@dataclass(frozen=True)
class HeaderedRow:
    """A data row from a file with a header line; columns are referenced by name."""
    values: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HeaderlessRow:
    """A data row from a file without a header; columns are referenced by index."""
    values: Sequence[str] = field(default_factory=tuple)


RawRow = HeaderedRow | HeaderlessRow


def as_raw_row(row: Mapping[str, str] | Sequence[str] | RawRow) -> RawRow:
    """Wrap a plain dict or list as a tagged row."""
    if isinstance(row, (HeaderedRow, HeaderlessRow)):
        return row
    if isinstance(row, Mapping):
        return HeaderedRow(dict(row))
    return HeaderlessRow(tuple(row))


def strip_leading_lines(content: str, skip_rows: int) -> str:
    """Drop the first skip_rows physical lines of the file."""
    if skip_rows <= 0:
        return content
    lines = content.split("\n")
    return "\n".join(lines[skip_rows:])


def read_rows(content: str, profile: BankProfile, delimiter: str = ",") -> list[RawRow]:
    """
    Parse CSV content into raw rows according to the profile.

    Short rows in header mode simply lack the missing keys; extra cells past
    the header are dropped.
    """
    content = content.lstrip("\ufeff")
    content = strip_leading_lines(content, profile.skip_rows)

    reader = csv.reader(StringIO(content, newline=""), delimiter=delimiter)
    records = [record for record in reader if record]

    if not records:
        return []

    if not profile.has_header:
        return [HeaderlessRow(tuple(record)) for record in records]

    headers = [h.strip() for h in records[0]]
    rows: list[RawRow] = []
    for record in records[1:]:
        rows.append(HeaderedRow(dict(zip(headers, record))))
    return rows


def read_headers(content: str, profile: BankProfile, delimiter: str = ",") -> list[str]:
    """Return the header names (or generated column labels) of a file."""
    content = strip_leading_lines(content.lstrip("\ufeff"), profile.skip_rows)
    reader = csv.reader(StringIO(content, newline=""), delimiter=delimiter)
    for record in reader:
        if not record:
            continue
        if profile.has_header:
            return [h.strip() for h in record]
        return [str(i) for i in range(len(record))]
    return []
