import enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DateFormat(str, enum.Enum):
    """Date layouts a bank profile can declare."""
    AUTO = "auto"
    ISO = "YYYY-MM-DD"
    DMY_SLASH = "DD/MM/YYYY"
    MDY_SLASH = "MM/DD/YYYY"
    DMY_DASH = "DD-MM-YYYY"
    MDY_DASH = "MM-DD-YYYY"
    DMY_SLASH_SHORT = "DD/MM/YY"
    MDY_SLASH_SHORT = "MM/DD/YY"
    DAY_MON_SHORT = "DD-Mon-YY"
    DAY_MON_LONG = "DD-Mon-YYYY"


class BankProfile(BaseModel):
    """
    How one bank's CSV export maps onto transaction fields.

    With has_header the column references are header names; without it they
    are zero-based indices written as decimal strings ("0", "3").
    description_column may list several references separated by commas.

    Amounts come from either amount_column (signed) or the credit_column /
    debit_column pair; the pair wins when both are filled in. Profiles with
    neither are accepted here and refused when an import starts.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int | None = None
    name: str = ""
    has_header: bool = True
    skip_rows: int = Field(default=0, ge=0)
    date_column: str = "Date"
    description_column: str = "Description"
    amount_column: str = ""
    credit_column: str = ""
    debit_column: str = ""
    date_format: DateFormat = DateFormat.AUTO

    @property
    def uses_split_amount(self) -> bool:
        """True when the credit/debit pair decides the amount."""
        return bool(self.credit_column.strip() and self.debit_column.strip())

    @property
    def has_amount_source(self) -> bool:
        return self.uses_split_amount or bool(self.amount_column.strip())

    @property
    def description_columns(self) -> list[str]:
        return [c.strip() for c in self.description_column.split(",")]


class BankProfileCreate(BaseModel):
    """Fields for creating or replacing a bank profile."""
    name: str = Field(min_length=1, max_length=100)
    has_header: bool = True
    skip_rows: int = Field(default=0, ge=0)
    date_column: str = Field(default="Date", min_length=1)
    description_column: str = Field(default="Description", min_length=1)
    amount_column: str = ""
    credit_column: str = ""
    debit_column: str = ""
    date_format: DateFormat = DateFormat.AUTO

    @model_validator(mode="after")
    def check_amount_source(self) -> "BankProfileCreate":
        split = self.credit_column.strip() and self.debit_column.strip()
        if not split and not self.amount_column.strip():
            raise ValueError(
                "Profile needs an amount column or both credit and debit columns"
            )
        return self


class BankProfileResponse(BaseModel):
    """Stored bank profile."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    has_header: bool
    skip_rows: int
    date_column: str
    description_column: str
    amount_column: str
    credit_column: str
    debit_column: str
    date_format: DateFormat
