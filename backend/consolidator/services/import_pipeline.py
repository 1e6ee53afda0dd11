"""
Import pipeline: raw CSV rows in, categorized transactions out.

For each row, in file order: map columns, normalize the date, run the rules.
Rows without an amount or without a usable date are rejected and counted;
they never stop the rest of the file. Profile problems that would reject
every row are raised before the first row is touched.

Nothing here does I/O or keeps state between calls. Profiles and rules are
passed in as immutable snapshots.
"""

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field, replace
from decimal import Decimal

from ..logging_setup import get_logger
from ..schemas.bank_profile import BankProfile, DateFormat
from ..schemas.rule import Rule
from .column_mapper import map_row, resolver_for
from .csv_reader import RawRow, as_raw_row, read_headers, read_rows
from .date_normalizer import normalize_date
from .errors import ProfileConfigurationError
from .rule_engine import CompiledRuleSet, compile_rules, resolve_rules

logger = get_logger(__name__)

PREVIEW_ROWS = 5


@dataclass(frozen=True)
class ResolvedTransaction:
    """A transaction ready for storage."""
    date: str
    description: str
    amount: Decimal
    category: str
    ignored: bool = False
    # Only ever set by a user edit; rule re-application leaves these alone
    manual_override: bool = False
    id: int | None = None
    row_index: int | None = None


@dataclass
class ImportOutcome:
    """Result of importing one file."""
    accepted: list[ResolvedTransaction] = field(default_factory=list)
    rejected_count: int = 0
    # Zero-based positions (among data rows) of the rejected rows
    rejected_rows: list[int] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)


@dataclass
class ReapplyOutcome:
    """Result of re-running the rules over stored transactions."""
    transactions: list[ResolvedTransaction]
    changed: list[ResolvedTransaction]
    ignored_count: int = 0
    recategorized_count: int = 0
    skipped_manual_count: int = 0


@dataclass(frozen=True)
class PreviewRow:
    raw_date: str
    parsed_date: str | None
    description: str
    amount: Decimal | None


@dataclass
class ImportPreview:
    """First rows of a file as they would import, for checking the date format."""
    headers: list[str]
    rows: list[PreviewRow]
    bad_date_count: int = 0


def validate_profile(profile: BankProfile) -> None:
    """Raise ProfileConfigurationError if the profile cannot import anything."""
    if not profile.has_amount_source:
        raise ProfileConfigurationError(
            f"Bank profile '{profile.name}' has no amount column and no "
            "complete credit/debit column pair"
        )
    if not profile.date_column or not profile.date_column.strip():
        raise ProfileConfigurationError(
            f"Bank profile '{profile.name}' has no date column"
        )
    if profile.skip_rows < 0:
        raise ProfileConfigurationError(
            f"Bank profile '{profile.name}' has a negative skip_rows"
        )
    resolve_date_format(profile)


def resolve_date_format(
    profile: BankProfile,
    override: "str | DateFormat | None" = None
) -> DateFormat:
    """Pick the override if given, else the profile's format; reject unknown names."""
    chosen = override if override else profile.date_format
    if isinstance(chosen, DateFormat):
        return chosen
    try:
        return DateFormat(chosen)
    except ValueError:
        raise ProfileConfigurationError(f"Unknown date format: {chosen!r}") from None


def import_rows(
    rows: Iterable[RawRow],
    profile: BankProfile,
    date_format_override: "str | DateFormat | None" = None,
    rules: Iterable[Rule] | CompiledRuleSet = (),
) -> ImportOutcome:
    """
    Turn raw rows into categorized transactions.

    Fresh imports never inherit a category: rules run with no default, so
    unmatched rows come out "Uncategorized".
    """
    validate_profile(profile)
    date_format = resolve_date_format(profile, date_format_override)
    compiled = compile_rules(rules)

    outcome = ImportOutcome()

    for idx, row in enumerate(rows):
        mapped = map_row(row, profile)
        if mapped is None:
            logger.debug("Row %d rejected: no usable amount", idx)
            outcome.rejected_count += 1
            outcome.rejected_rows.append(idx)
            continue

        if mapped.date is None:
            logger.debug("Row %d rejected: no date", idx)
            outcome.rejected_count += 1
            outcome.rejected_rows.append(idx)
            continue

        posted = normalize_date(mapped.date, date_format)
        if posted is None:
            logger.debug("Row %d rejected: cannot read date %r as %s",
                         idx, mapped.date, date_format.value)
            outcome.rejected_count += 1
            outcome.rejected_rows.append(idx)
            continue

        resolution = resolve_rules(mapped.description, None, compiled)

        outcome.accepted.append(ResolvedTransaction(
            date=posted,
            description=mapped.description,
            amount=mapped.amount,
            category=resolution.category,
            ignored=resolution.ignore,
            manual_override=False,
            row_index=idx,
        ))

    return outcome


def import_csv(
    content: str,
    profile: BankProfile,
    date_format_override: "str | DateFormat | None" = None,
    rules: Iterable[Rule] | CompiledRuleSet = (),
) -> ImportOutcome:
    """Read CSV text with the profile and import its rows."""
    validate_profile(profile)
    resolve_date_format(profile, date_format_override)
    return import_rows(read_rows(content, profile), profile, date_format_override, rules)


def preview_csv(
    content: str,
    profile: BankProfile,
    date_format_override: "str | DateFormat | None" = None,
    limit: int = PREVIEW_ROWS,
) -> ImportPreview:
    """
    Map the first rows of a file without categorizing or storing them.

    bad_date_count tells the caller how many of those rows would be rejected
    for their date under the chosen format.
    """
    validate_profile(profile)
    date_format = resolve_date_format(profile, date_format_override)

    preview = ImportPreview(headers=read_headers(content, profile), rows=[])
    for row in read_rows(content, profile)[:limit]:
        mapped = map_row(row, profile)
        raw_date = mapped.date if mapped else None
        if raw_date is None:
            # Rows rejected for their amount still show their date
            raw_date = resolver_for(as_raw_row(row))(profile.date_column)

        parsed = normalize_date(raw_date, date_format)
        if parsed is None:
            preview.bad_date_count += 1

        preview.rows.append(PreviewRow(
            raw_date=raw_date or "",
            parsed_date=parsed,
            description=mapped.description if mapped else "",
            amount=mapped.amount if mapped else None,
        ))
    return preview


def reapply_rules(
    transactions: Sequence[ResolvedTransaction],
    rules: Iterable[Rule] | CompiledRuleSet,
    known_categories: Collection[str] | None = None,
) -> ReapplyOutcome:
    """
    Re-run the rules over already stored transactions.

    Transactions with manual_override are skipped without consulting the
    rules. For the rest, each transaction's current category is the default,
    a matching ignore rule hides it (nothing is ever un-hidden), and a
    category not in known_categories (when given) is left unapplied.
    Returns new transaction values; the inputs are not modified.
    """
    compiled = compile_rules(rules)
    outcome = ReapplyOutcome(transactions=[], changed=[])

    for tx in transactions:
        if tx.manual_override:
            outcome.skipped_manual_count += 1
            outcome.transactions.append(tx)
            continue

        resolution = resolve_rules(tx.description, tx.category, compiled)
        updated = tx

        if resolution.ignore and not tx.ignored:
            updated = replace(updated, ignored=True)
            outcome.ignored_count += 1

        if resolution.category != tx.category and (
            known_categories is None or resolution.category in known_categories
        ):
            updated = replace(updated, category=resolution.category)
            outcome.recategorized_count += 1

        outcome.transactions.append(updated)
        if updated is not tx:
            outcome.changed.append(updated)

    return outcome
