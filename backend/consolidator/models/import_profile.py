from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class ImportProfile(Base, TimestampMixin):
    """
    Saved bank profile describing one bank's CSV export layout.

    Column references are header names when has_header is set, otherwise
    zero-based indices stored as strings. description_column may hold several
    comma-separated references. Either amount_column or the credit/debit pair
    is filled in; empty strings mean "not configured".
    """

    __tablename__ = "bank_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    # CSV parsing options
    has_header: Mapped[bool] = mapped_column(Boolean, default=True)
    skip_rows: Mapped[int] = mapped_column(Integer, default=0)

    # Column references
    date_column: Mapped[str] = mapped_column(String(255), nullable=False, default="Date")
    description_column: Mapped[str] = mapped_column(
        String(500), nullable=False, default="Description"
    )
    amount_column: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    credit_column: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    debit_column: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Date parsing ("auto" or an explicit layout such as "DD/MM/YYYY")
    date_format: Mapped[str] = mapped_column(String(20), nullable=False, default="auto")

    # Relationships
    imports: Mapped[list["ImportBatch"]] = relationship(
        "ImportBatch", back_populates="profile"
    )

    def __repr__(self) -> str:
        return f"<ImportProfile(id={self.id}, name='{self.name}')>"
