"""
Import service: hands pipeline output to storage.

Handles:
- Snapshotting rules and categories once per import batch
- Storing each file as an ImportBatch with its transactions
- Import history and undo
- Bank profile management
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import ValidationError

from ..logging_setup import get_logger
from ..models import ImportBatch, ImportProfile, Transaction, to_cents
from ..schemas.bank_profile import BankProfile, BankProfileCreate, DateFormat
from .errors import ImportStorageError, ProfileConfigurationError
from .import_pipeline import ImportOutcome, import_csv, resolve_date_format, validate_profile
from .rule_engine import UNCATEGORIZED, CompiledRuleSet
from .rule_service import category_catalog, load_rules

logger = get_logger(__name__)


@dataclass
class UploadedFile:
    """A file's name and decoded text."""
    filename: str
    content: str


@dataclass
class ImportSnapshot:
    """Configuration frozen for the duration of one import batch."""
    profile: BankProfile
    date_format: DateFormat
    rules: CompiledRuleSet
    categories: dict[str, int]


@dataclass
class FileImportResult:
    """Result of importing one file."""
    filename: str
    batch_id: int
    imported_count: int
    rejected_count: int


@dataclass
class ImportResult:
    """Result of importing a batch of files."""
    files: list[FileImportResult] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return sum(f.imported_count for f in self.files)

    @property
    def rejected_count(self) -> int:
        return sum(f.rejected_count for f in self.files)


def decode_content(raw: bytes) -> str:
    """Decode uploaded bytes as UTF-8, dropping a byte-order mark."""
    return raw.decode("utf-8-sig")


class ImportService:
    """Service for importing transactions."""

    def __init__(self, db: Session):
        self.db = db

    def load_profile(self, profile_id: int) -> BankProfile | None:
        """
        Load a stored profile as an immutable value.

        Raises ProfileConfigurationError if the stored values are invalid
        (e.g. an unknown date format written by an older version).
        """
        model = self.db.query(ImportProfile).filter(ImportProfile.id == profile_id).first()
        if model is None:
            return None
        try:
            return BankProfile.model_validate(model)
        except ValidationError as e:
            raise ProfileConfigurationError(
                f"Bank profile '{model.name}' is invalid: {e.errors()[0]['msg']}"
            ) from e

    def snapshot(
        self,
        profile: BankProfile,
        date_format: "str | DateFormat | None" = None
    ) -> ImportSnapshot:
        """
        Validate the profile and freeze rules and categories for a batch.

        Rule or category edits made after this point are not seen by the batch.
        """
        validate_profile(profile)
        return ImportSnapshot(
            profile=profile,
            date_format=resolve_date_format(profile, date_format),
            rules=load_rules(self.db),
            categories=category_catalog(self.db),
        )

    def import_files(
        self,
        files: Iterable[UploadedFile],
        profile: BankProfile,
        date_format: "str | DateFormat | None" = None
    ) -> ImportResult:
        """
        Import files one after another.

        Each file is fully stored before the next one is parsed.
        """
        snapshot = self.snapshot(profile, date_format)
        result = ImportResult()
        for uploaded in files:
            result.files.append(self.import_file(uploaded, snapshot))
        return result

    def import_file(self, uploaded: UploadedFile, snapshot: ImportSnapshot) -> FileImportResult:
        """Run one file through the pipeline and store the accepted rows."""
        outcome = import_csv(
            uploaded.content, snapshot.profile, snapshot.date_format, snapshot.rules
        )
        batch = self._store(uploaded.filename, outcome, snapshot)

        logger.info(
            "Imported %s: %d imported, %d rejected",
            uploaded.filename, outcome.accepted_count, outcome.rejected_count,
        )
        return FileImportResult(
            filename=uploaded.filename,
            batch_id=batch.id,
            imported_count=outcome.accepted_count,
            rejected_count=outcome.rejected_count,
        )

    def _store(self, filename: str, outcome: ImportOutcome, snapshot: ImportSnapshot) -> ImportBatch:
        uncategorized_id = snapshot.categories.get(UNCATEGORIZED)
        try:
            batch = ImportBatch(
                filename=filename,
                imported_at=datetime.now(),
                profile_id=snapshot.profile.id,
                date_format=snapshot.date_format.value,
                transaction_count=outcome.accepted_count,
                rejected_count=outcome.rejected_count,
            )
            self.db.add(batch)
            self.db.flush()

            for tx in outcome.accepted:
                self.db.add(Transaction(
                    import_batch_id=batch.id,
                    posted_date=date.fromisoformat(tx.date),
                    description=tx.description,
                    amount_cents=to_cents(tx.amount),
                    category_id=snapshot.categories.get(tx.category, uncategorized_id),
                    ignored=tx.ignored,
                    manual_override=tx.manual_override,
                ))
            self.db.flush()
        except (SQLAlchemyError, ArithmeticError) as e:
            raise ImportStorageError(f"Could not store {filename}: {e}", filename=filename) from e
        return batch

    def get_imports(self) -> list[ImportBatch]:
        """Import history, newest first."""
        return self.db.query(ImportBatch).order_by(
            ImportBatch.imported_at.desc(), ImportBatch.id.desc()
        ).all()

    def delete_import(self, batch_id: int) -> bool:
        """Remove an import batch and its transactions. Returns False if not found."""
        batch = self.db.query(ImportBatch).filter(ImportBatch.id == batch_id).first()
        if batch is None:
            return False
        self.db.delete(batch)
        self.db.flush()
        logger.info("Deleted import %d (%s)", batch_id, batch.filename)
        return True

    def get_profiles(self) -> list[ImportProfile]:
        """All stored bank profiles, by name."""
        return self.db.query(ImportProfile).order_by(ImportProfile.name).all()

    def upsert_profile(self, data: BankProfileCreate, profile_id: int | None = None) -> ImportProfile | None:
        """
        Create a profile, or replace the one with profile_id.

        Returns None if profile_id does not exist.
        """
        values = data.model_dump()
        values["date_format"] = data.date_format.value

        if profile_id is None:
            profile = ImportProfile(**values)
            self.db.add(profile)
        else:
            profile = self.db.query(ImportProfile).filter(ImportProfile.id == profile_id).first()
            if profile is None:
                return None
            for key, value in values.items():
                setattr(profile, key, value)

        self.db.flush()
        self.db.refresh(profile)
        return profile
