import enum
from sqlalchemy import String, Integer, ForeignKey, Enum, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class RuleActionType(enum.Enum):
    """What a matching rule does."""
    IGNORE = "ignore"
    CATEGORIZE = "categorize"


class CategorizationRule(Base, TimestampMixin):
    """
    Keyword rule for hiding or categorizing transactions by description.

    Rules are checked by priority (higher first, ties by id); the first
    matching ignore rule and the first matching categorize rule both apply.
    """

    __tablename__ = "transaction_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Whole-word keyword matched against the description
    keyword: Mapped[str] = mapped_column(String(100), nullable=False)
    case_sensitive: Mapped[bool] = mapped_column(Boolean, default=False)

    action: Mapped[RuleActionType] = mapped_column(
        Enum(RuleActionType), nullable=False, default=RuleActionType.CATEGORIZE
    )

    # What to assign (categorize rules only)
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=True
    )

    priority: Mapped[int] = mapped_column(Integer, default=0)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    category: Mapped["Category | None"] = relationship("Category")

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    def __repr__(self) -> str:
        return (
            f"<CategorizationRule(id={self.id}, keyword='{self.keyword}', "
            f"action={self.action.value})>"
        )
