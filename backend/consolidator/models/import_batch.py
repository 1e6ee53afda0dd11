from datetime import datetime
from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class ImportBatch(Base, TimestampMixin):
    """
    One imported file.

    Groups the transactions that came from it so the import can be
    listed in history or undone as a unit.
    """

    __tablename__ = "import_batches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    imported_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    profile_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("bank_profiles.id"), nullable=True
    )
    date_format: Mapped[str] = mapped_column(String(20), nullable=False, default="auto")

    transaction_count: Mapped[int] = mapped_column(Integer, default=0)
    rejected_count: Mapped[int] = mapped_column(Integer, default=0)

    # Relationships
    profile: Mapped["ImportProfile | None"] = relationship(
        "ImportProfile", back_populates="imports"
    )
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction", back_populates="import_batch", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<ImportBatch(id={self.id}, filename='{self.filename}', count={self.transaction_count})>"
