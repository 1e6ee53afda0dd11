import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_CATEGORY_NAME_LENGTH = 50

_CATEGORY_NAME = re.compile(r"^[\w\s\-&.']+$")


class CategoryCreate(BaseModel):
    """Fields for adding a category to the catalog."""
    name: str = Field(max_length=MAX_CATEGORY_NAME_LENGTH)
    color: str | None = Field(default=None, max_length=20)
    icon: str | None = Field(default=None, max_length=20)
    display_order: int | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name is required")
        if not _CATEGORY_NAME.match(value):
            raise ValueError("Category name contains invalid characters")
        return value


class CategoryResponse(BaseModel):
    """Catalog entry."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str | None = None
    icon: str | None = None
    display_order: int = 0
