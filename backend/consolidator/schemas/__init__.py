from .bank_profile import DateFormat, BankProfile, BankProfileCreate, BankProfileResponse
from .rule import Rule, RuleAction, RuleCreate, RuleResponse, ApplyRulesResponse
from .category import CategoryCreate, CategoryResponse
from .transaction import TransactionUpdate, TransactionResponse
from .import_schemas import (
    PreviewRowResponse,
    ImportPreviewResponse,
    FileImportResponse,
    ImportResponse,
    ImportBatchResponse,
)

__all__ = [
    "DateFormat",
    "BankProfile",
    "BankProfileCreate",
    "BankProfileResponse",
    "Rule",
    "RuleAction",
    "RuleCreate",
    "RuleResponse",
    "ApplyRulesResponse",
    "CategoryCreate",
    "CategoryResponse",
    "TransactionUpdate",
    "TransactionResponse",
    "PreviewRowResponse",
    "ImportPreviewResponse",
    "FileImportResponse",
    "ImportResponse",
    "ImportBatchResponse",
]
