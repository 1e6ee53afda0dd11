"""
Date normalization for imported CSV rows.

Every date that enters storage is a canonical ``YYYY-MM-DD`` calendar date.
Explicit formats are strict: a row that does not fit the configured layout
yields None instead of a guess. Auto-detection only accepts layouts that
cannot be read two ways (ISO prefixes, ``DD-Mon-YY`` and spelled-out months);
numeric day/month orderings are never guessed.
"""

import re
from datetime import date, datetime
from email.utils import parsedate

from ..schemas.bank_profile import DateFormat


MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# Two-digit years below this map to 20xx, the rest to 19xx
YEAR_PIVOT = 50

_ISO_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_DAY_MON_YEAR = re.compile(r"^(\d{1,2})-([A-Za-z]{3})-(\d{2}|\d{4})$")

# Token -> allowed digit count for explicit templates
_TOKEN_DIGITS = {
    "DD": re.compile(r"^\d{1,2}$"),
    "MM": re.compile(r"^\d{1,2}$"),
    "YYYY": re.compile(r"^\d{4}$"),
    "YY": re.compile(r"^\d{2}$"),
}

# Unambiguous textual layouts tried after the ISO and DD-Mon checks
AUTO_FALLBACK_FORMATS = [
    "%Y/%m/%d",      # 2024/01/15
    "%b %d, %Y",     # Jan 15, 2024
    "%B %d, %Y",     # January 15, 2024
    "%b %d %Y",      # Jan 15 2024
    "%B %d %Y",      # January 15 2024
    "%d %b %Y",      # 15 Jan 2024
    "%d %B %Y",      # 15 January 2024
]


def expand_two_digit_year(year: int) -> int:
    """Apply the 50-year pivot to a two-digit year."""
    if year >= 100:
        return year
    return 2000 + year if year < YEAR_PIVOT else 1900 + year


def format_canonical(year: int, month: int, day: int) -> str | None:
    """Return ``YYYY-MM-DD`` for a real calendar date, else None."""
    try:
        return date(year, month, day).isoformat()
    except (ValueError, OverflowError):
        return None


def is_known_format(value: str | None) -> bool:
    return value in {f.value for f in DateFormat}


def normalize_date(raw_date: str | None, date_format: "str | DateFormat" = DateFormat.AUTO) -> str | None:
    """
    Convert a raw CSV date into a canonical ``YYYY-MM-DD`` string.

    Returns None for empty input, input that does not fit an explicit format,
    or input auto-detection cannot read unambiguously. Never raises for
    string input; unknown format names also yield None (profiles are
    validated before import, so this only guards direct callers).
    """
    if raw_date is None:
        return None
    s = str(raw_date).strip()
    if not s:
        return None

    fmt = date_format.value if isinstance(date_format, DateFormat) else (date_format or "auto")

    if fmt == DateFormat.AUTO.value:
        return _auto_detect(s)
    if fmt in (DateFormat.DAY_MON_SHORT.value, DateFormat.DAY_MON_LONG.value):
        return _parse_day_mon_year(s)
    if not is_known_format(fmt):
        return None
    return _parse_template(s, fmt)


def _parse_template(s: str, fmt: str) -> str | None:
    """Parse against a numeric ``DD``/``MM``/``YYYY``/``YY`` template."""
    sep = "/" if "/" in fmt else "-"
    tokens = fmt.split(sep)
    parts = s.split(sep)
    if len(parts) != len(tokens):
        return None

    day = month = year = None
    for token, part in zip(tokens, parts):
        part = part.strip()
        if not _TOKEN_DIGITS[token].match(part):
            return None
        value = int(part)
        if token == "DD":
            day = value
        elif token == "MM":
            month = value
        elif token == "YYYY":
            year = value
        else:
            year = expand_two_digit_year(value)

    if not day or not month or not year:
        return None
    return format_canonical(year, month, day)


def _parse_day_mon_year(s: str) -> str | None:
    """Parse ``16-Feb-26`` / ``16-Feb-2026`` (month abbreviation case-insensitive)."""
    m = _DAY_MON_YEAR.match(s)
    if not m:
        return None
    month = MONTHS.get(m.group(2).lower())
    if not month:
        return None
    year = expand_two_digit_year(int(m.group(3)))
    return format_canonical(year, month, int(m.group(1)))


def _auto_detect(s: str) -> str | None:
    # ISO prefix first: read the fields as written, never through a
    # timezone-aware parser.
    iso = _ISO_PREFIX.match(s)
    if iso:
        return format_canonical(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))

    if _DAY_MON_YEAR.match(s):
        parsed = _parse_day_mon_year(s)
        if parsed:
            return parsed

    for fmt in AUTO_FALLBACK_FORMATS:
        try:
            return datetime.strptime(s, fmt).date().isoformat()
        except ValueError:
            continue

    # RFC 2822 ("Tue, 16 Jan 2024 10:00:00 +0000"): keep the calendar
    # fields as written, the offset is ignored.
    try:
        fields = parsedate(s)
    except (ValueError, IndexError, TypeError):
        fields = None
    if fields:
        year = fields[0]
        # email.utils widens two-digit years with its own pivot (69)
        if not re.search(rf"\b{year}\b", s):
            year = expand_two_digit_year(year % 100)
        return format_canonical(year, fields[1], fields[2])

    return None
