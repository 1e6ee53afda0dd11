from .base import Base
from .category import Category
from .categorization_rule import CategorizationRule, RuleActionType
from .import_profile import ImportProfile
from .import_batch import ImportBatch
from .transaction import Transaction, to_cents

__all__ = [
    "Base",
    "Category",
    "CategorizationRule",
    "RuleActionType",
    "ImportProfile",
    "ImportBatch",
    "Transaction",
    "to_cents",
]
