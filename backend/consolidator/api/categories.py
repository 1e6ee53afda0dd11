from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import CategorizationRule, Category, Transaction
from ..schemas import CategoryCreate, CategoryResponse
from ..services.rule_engine import UNCATEGORIZED

router = APIRouter()


@router.get("/", response_model=list[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    """Get the category catalog."""
    return db.query(Category).order_by(Category.display_order, Category.name).all()


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    """Get a single category by ID."""
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("/", response_model=CategoryResponse, status_code=201)
def create_category(category: CategoryCreate, db: Session = Depends(get_db)):
    """Add a category; without a display_order it goes to the end of the list."""
    existing = db.query(Category).filter(Category.name == category.name).first()
    if existing:
        raise HTTPException(status_code=400, detail="A category with this name already exists")

    data = category.model_dump()
    if data["display_order"] is None:
        data["display_order"] = (db.query(func.max(Category.display_order)).scalar() or 0) + 1

    db_category = Category(**data)
    db.add(db_category)
    db.flush()
    db.refresh(db_category)
    return db_category


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    """
    Delete a category.

    Its transactions move to Uncategorized. Categories still used by a rule
    cannot be deleted.
    """
    db_category = db.query(Category).filter(Category.id == category_id).first()
    if not db_category:
        raise HTTPException(status_code=404, detail="Category not found")
    if db_category.name == UNCATEGORIZED:
        raise HTTPException(status_code=400, detail="Cannot delete the Uncategorized category")

    rules = db.query(CategorizationRule).filter(
        CategorizationRule.category_id == category_id
    ).count()
    if rules > 0:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete a category used by rules"
        )

    uncategorized = db.query(Category).filter(Category.name == UNCATEGORIZED).first()
    db.query(Transaction).filter(Transaction.category_id == category_id).update(
        {Transaction.category_id: uncategorized.id if uncategorized else None},
        synchronize_session=False
    )

    db.delete(db_category)
    return None
