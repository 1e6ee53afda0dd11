from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class TransactionUpdate(BaseModel):
    """
    User edits to a stored transaction (all optional).

    Setting category_id marks the transaction as a manual override unless
    manual_override is given explicitly.
    """
    category_id: int | None = None
    ignored: bool | None = None
    manual_override: bool | None = None


class TransactionResponse(BaseModel):
    """Stored transaction."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    import_batch_id: int
    posted_date: date
    description: str
    amount: Decimal
    category_id: int | None
    category_name: str | None
    ignored: bool
    manual_override: bool
