from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import String, Integer, Date, ForeignKey, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

_CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> int:
    """Convert a decimal amount to integer cents, rounding half up."""
    return int((Decimal(amount) / _CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class Transaction(Base, TimestampMixin):
    """
    An imported bank transaction.

    Amounts are stored as integer cents to avoid floating point issues.
    Negative amounts = debit (expense), positive amounts = credit (income/refund).
    Duplicates are kept: the same date/amount/description may appear twice.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Import tracking
    import_batch_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("import_batches.id"), nullable=False, index=True
    )

    # Core fields
    posted_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    # Category
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=True, index=True
    )

    # Hidden from totals (set by ignore rules or the user)
    ignored: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # Category chosen by hand; rule re-application must not touch it
    manual_override: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    import_batch: Mapped["ImportBatch"] = relationship(
        "ImportBatch", back_populates="transactions"
    )
    category: Mapped["Category | None"] = relationship(
        "Category", back_populates="transactions"
    )

    @property
    def amount(self) -> Decimal:
        """Get amount as decimal currency units."""
        return Decimal(self.amount_cents) / 100

    @amount.setter
    def amount(self, value: Decimal) -> None:
        """Set amount from decimal currency units."""
        self.amount_cents = to_cents(value)

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, date={self.posted_date}, "
            f"amount={self.amount:.2f}, description='{self.description}')>"
        )
