from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from ..database import get_db
from ..models import Category, Transaction
from ..schemas import TransactionUpdate, TransactionResponse

router = APIRouter()


@router.get("/", response_model=list[TransactionResponse])
def list_transactions(
    import_batch_id: int | None = None,
    category_id: list[int] | None = Query(None),
    ignored: bool | None = None,
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    search: str | None = Query(None),
    db: Session = Depends(get_db)
):
    """
    Get stored transactions with optional filters.

    search matches anywhere in the description, case-insensitively.
    """
    query = db.query(Transaction).options(selectinload(Transaction.category))

    if import_batch_id:
        query = query.filter(Transaction.import_batch_id == import_batch_id)
    if category_id:
        query = query.filter(Transaction.category_id.in_(category_id))
    if ignored is not None:
        query = query.filter(Transaction.ignored == ignored)
    if start_date:
        query = query.filter(Transaction.posted_date >= start_date)
    if end_date:
        query = query.filter(Transaction.posted_date <= end_date)
    if search:
        query = query.filter(Transaction.description.ilike(f"%{search}%"))

    return query.order_by(Transaction.posted_date, Transaction.id).all()


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    transaction: TransactionUpdate,
    db: Session = Depends(get_db)
):
    """
    Re-categorize or hide/unhide a transaction.

    A category chosen here is a manual override: re-applying rules leaves
    the transaction alone until manual_override is cleared.
    """
    db_transaction = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not db_transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    update_data = transaction.model_dump(exclude_unset=True)

    if "category_id" in update_data:
        category = db.query(Category).filter(Category.id == update_data["category_id"]).first()
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        db_transaction.category = category
        update_data.setdefault("manual_override", True)
        del update_data["category_id"]

    for field, value in update_data.items():
        if value is not None:
            setattr(db_transaction, field, value)

    db.flush()
    db.refresh(db_transaction)
    return db_transaction
