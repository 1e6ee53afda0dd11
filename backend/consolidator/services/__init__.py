from .csv_reader import HeaderedRow, HeaderlessRow, read_rows
from .column_mapper import MappedRow, map_row, parse_amount
from .date_normalizer import normalize_date
from .rule_engine import RuleResolution, compile_rules, resolve_rules, UNCATEGORIZED
from .import_pipeline import (
    ResolvedTransaction,
    ImportOutcome,
    ReapplyOutcome,
    import_rows,
    import_csv,
    preview_csv,
    reapply_rules,
    validate_profile,
)
from .import_service import ImportService, UploadedFile
from .rule_service import reapply_stored_rules
from .errors import ProfileConfigurationError, ImportStorageError

__all__ = [
    "HeaderedRow",
    "HeaderlessRow",
    "read_rows",
    "MappedRow",
    "map_row",
    "parse_amount",
    "normalize_date",
    "RuleResolution",
    "compile_rules",
    "resolve_rules",
    "UNCATEGORIZED",
    "ResolvedTransaction",
    "ImportOutcome",
    "ReapplyOutcome",
    "import_rows",
    "import_csv",
    "preview_csv",
    "reapply_rules",
    "validate_profile",
    "ImportService",
    "UploadedFile",
    "reapply_stored_rules",
    "ProfileConfigurationError",
    "ImportStorageError",
]
