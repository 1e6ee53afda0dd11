from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from ..database import get_db
from ..models import CategorizationRule, Category, RuleActionType
from ..schemas import RuleAction, RuleCreate, RuleResponse, ApplyRulesResponse
from ..services.rule_service import reapply_stored_rules

router = APIRouter()


@router.get("/", response_model=list[RuleResponse])
def list_rules(db: Session = Depends(get_db)):
    """Get all rules in the order they are evaluated."""
    return db.query(CategorizationRule).options(
        selectinload(CategorizationRule.category)
    ).order_by(
        CategorizationRule.priority.desc(), CategorizationRule.id
    ).all()


@router.post("/", response_model=RuleResponse, status_code=201)
def create_rule(rule: RuleCreate, db: Session = Depends(get_db)):
    """Create a new rule."""
    if rule.category_id is not None:
        category = db.query(Category).filter(Category.id == rule.category_id).first()
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")

    db_rule = CategorizationRule(
        name=rule.name,
        keyword=rule.keyword,
        action=RuleActionType(rule.action.value),
        # Ignore rules never assign a category
        category_id=rule.category_id if rule.action == RuleAction.CATEGORIZE else None,
        case_sensitive=rule.case_sensitive,
        priority=rule.priority,
        enabled=rule.enabled,
    )
    db.add(db_rule)
    db.flush()
    db.refresh(db_rule)
    return db_rule


@router.delete("/{rule_id}", status_code=204)
def delete_rule(rule_id: int, db: Session = Depends(get_db)):
    """Delete a rule."""
    db_rule = db.query(CategorizationRule).filter(CategorizationRule.id == rule_id).first()
    if not db_rule:
        raise HTTPException(status_code=404, detail="Rule not found")

    db.delete(db_rule)
    return None


@router.post("/apply", response_model=ApplyRulesResponse)
def apply_rules(db: Session = Depends(get_db)):
    """
    Re-apply the enabled rules to every stored transaction.

    Transactions the user has categorized by hand are left alone.
    """
    outcome = reapply_stored_rules(db)
    return ApplyRulesResponse(
        ignored_count=outcome.ignored_count,
        recategorized_count=outcome.recategorized_count,
        skipped_manual_count=outcome.skipped_manual_count,
    )
