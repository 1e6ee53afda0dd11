import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_KEYWORD_LENGTH = 100
MAX_RULE_NAME_LENGTH = 100


class RuleAction(str, enum.Enum):
    """What a matching rule does to a transaction."""
    IGNORE = "ignore"
    CATEGORIZE = "categorize"


class Rule(BaseModel):
    """
    A keyword-triggered rule, as handed to the rule engine.

    Higher priority runs first; equal priorities run by id, then by the
    order the rules were supplied in.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int | None = None
    name: str = ""
    keyword: str
    action: RuleAction
    category: str | None = None
    case_sensitive: bool = False
    priority: int = 0
    enabled: bool = True


class RuleCreate(BaseModel):
    """Fields for creating a rule."""
    name: str = Field(min_length=1, max_length=MAX_RULE_NAME_LENGTH)
    keyword: str = Field(max_length=MAX_KEYWORD_LENGTH)
    action: RuleAction
    category_id: int | None = None
    case_sensitive: bool = False
    priority: int = 0
    enabled: bool = True

    @field_validator("name", "keyword")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def check_category(self) -> "RuleCreate":
        if self.action == RuleAction.CATEGORIZE and self.category_id is None:
            raise ValueError("categorize rules need a category_id")
        return self


class RuleResponse(BaseModel):
    """Stored rule with its category name resolved."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    keyword: str
    action: RuleAction
    category_id: int | None
    category_name: str | None
    case_sensitive: bool
    priority: int
    enabled: bool
    created_at: datetime

    @field_validator("action", mode="before")
    @classmethod
    def action_value(cls, value):
        # Stored rules carry the ORM enum
        return getattr(value, "value", value)


class ApplyRulesResponse(BaseModel):
    """Outcome of re-applying the rule set to stored transactions."""
    ignored_count: int
    recategorized_count: int
    skipped_manual_count: int
