from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict


class PreviewRowResponse(BaseModel):
    """One previewed row."""
    raw_date: str
    parsed_date: str | None
    description: str
    amount: Decimal | None


class ImportPreviewResponse(BaseModel):
    """First rows of a file as they would import."""
    filename: str
    headers: list[str]
    date_format: str
    rows: list[PreviewRowResponse]
    bad_date_count: int


class FileImportResponse(BaseModel):
    """Outcome for one imported file."""
    filename: str
    batch_id: int
    imported_count: int
    rejected_count: int


class ImportResponse(BaseModel):
    """Outcome of an import request ("N imported, M rejected")."""
    files: list[FileImportResponse]
    imported_count: int
    rejected_count: int


class ImportBatchResponse(BaseModel):
    """Import history entry."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    imported_at: datetime
    profile_id: int | None
    date_format: str
    transaction_count: int
    rejected_count: int
