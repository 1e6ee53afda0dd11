"""
Rule storage helpers.

Loads the stored rules and category catalog as immutable snapshots for the
pipeline, and re-applies the current rules to stored transactions.
"""

from sqlalchemy.orm import Session, selectinload

from ..logging_setup import get_logger
from ..models import CategorizationRule, Category, Transaction
from ..schemas.rule import Rule, RuleAction
from .import_pipeline import ReapplyOutcome, ResolvedTransaction, reapply_rules
from .rule_engine import UNCATEGORIZED, CompiledRuleSet, compile_rules

logger = get_logger(__name__)


def to_rule(model: CategorizationRule) -> Rule:
    """Convert a stored rule into the engine's value object."""
    return Rule(
        id=model.id,
        name=model.name,
        keyword=model.keyword,
        action=RuleAction(model.action.value),
        category=model.category.name if model.category else None,
        case_sensitive=bool(model.case_sensitive),
        priority=model.priority or 0,
        enabled=bool(model.enabled),
    )


def load_rules(db: Session) -> CompiledRuleSet:
    """Snapshot the enabled rules, ready for matching."""
    models = db.query(CategorizationRule).options(
        selectinload(CategorizationRule.category)
    ).filter(CategorizationRule.enabled == True).all()
    return compile_rules([to_rule(m) for m in models])


def category_catalog(db: Session) -> dict[str, int]:
    """Map category name -> id for every category in the catalog."""
    return {name: id_ for id_, name in db.query(Category.id, Category.name).all()}


def to_resolved(tx: Transaction) -> ResolvedTransaction:
    """Convert a stored transaction into the pipeline's value object."""
    return ResolvedTransaction(
        id=tx.id,
        date=tx.posted_date.isoformat(),
        description=tx.description or "",
        amount=tx.amount,
        category=tx.category.name if tx.category else UNCATEGORIZED,
        ignored=bool(tx.ignored),
        manual_override=bool(tx.manual_override),
    )


def reapply_stored_rules(db: Session) -> ReapplyOutcome:
    """
    Re-run the enabled rules over every stored transaction.

    Transactions marked manual_override are left untouched. Categories that
    are not in the catalog are not written.
    """
    rules = load_rules(db)
    categories = {c.name: c for c in db.query(Category).all()}

    stored = db.query(Transaction).options(
        selectinload(Transaction.category)
    ).order_by(Transaction.id).all()
    by_id = {tx.id: tx for tx in stored}

    outcome = reapply_rules([to_resolved(tx) for tx in stored], rules, categories.keys())

    for tx in outcome.changed:
        model = by_id[tx.id]
        model.ignored = tx.ignored
        model.category = categories[tx.category]

    db.flush()
    logger.info(
        "Re-applied %d rules: %d ignored, %d re-categorized, %d skipped (manual override)",
        len(rules), outcome.ignored_count, outcome.recategorized_count,
        outcome.skipped_manual_count,
    )
    return outcome
