from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from ..config import Settings
from ..database import get_db
from ..schemas import (
    BankProfile,
    ImportPreviewResponse,
    PreviewRowResponse,
    ImportResponse,
    FileImportResponse,
    ImportBatchResponse,
)
from ..services.errors import ImportStorageError, ProfileConfigurationError
from ..services.import_pipeline import preview_csv, resolve_date_format
from ..services.import_service import ImportService, UploadedFile, decode_content
from .deps import get_settings

router = APIRouter()


def _require_profile(service: ImportService, profile_id: int) -> BankProfile:
    try:
        profile = service.load_profile(profile_id)
    except ProfileConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if profile is None:
        raise HTTPException(status_code=404, detail="Bank profile not found")
    return profile


def _check_size(upload: UploadFile, size: int | None, max_size: int) -> None:
    if size is not None and size > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: {upload.filename} (max {max_size // (1024 * 1024)}MB)"
        )


async def _read_upload(upload: UploadFile, max_size: int) -> str:
    """Read and decode one uploaded file."""
    raw = await upload.read()
    _check_size(upload, len(raw), max_size)
    try:
        return decode_content(raw)
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail=f"{upload.filename} is not UTF-8 text")


@router.post("/preview", response_model=ImportPreviewResponse)
async def preview_import(
    file: UploadFile = File(...),
    profile_id: int = Form(...),
    date_format: str | None = Form(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Show the first rows of a file as they would import.

    bad_date_count is the number of previewed rows whose date cannot be read
    with the chosen format; those rows would be rejected.
    """
    service = ImportService(db)
    profile = _require_profile(service, profile_id)
    _check_size(file, file.size, settings.max_file_size)
    content = await _read_upload(file, settings.max_file_size)

    try:
        chosen = resolve_date_format(profile, date_format or None)
        preview = preview_csv(content, profile, chosen)
    except ProfileConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ImportPreviewResponse(
        filename=file.filename or "",
        headers=preview.headers,
        date_format=chosen.value,
        rows=[
            PreviewRowResponse(
                raw_date=row.raw_date,
                parsed_date=row.parsed_date,
                description=row.description,
                amount=row.amount,
            )
            for row in preview.rows
        ],
        bad_date_count=preview.bad_date_count,
    )


@router.post("", response_model=ImportResponse)
async def import_files(
    files: list[UploadFile] = File(...),
    profile_id: int = Form(...),
    date_format: str | None = Form(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Import one or more CSV files with a bank profile.

    Files are processed one at a time in upload order; each file is stored
    and committed before the next one is read.
    """
    service = ImportService(db)
    profile = _require_profile(service, profile_id)

    for upload in files:
        _check_size(upload, upload.size, settings.max_file_size)

    try:
        snapshot = service.snapshot(profile, date_format or None)
    except ProfileConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    results: list[FileImportResponse] = []
    for upload in files:
        content = await _read_upload(upload, settings.max_file_size)
        try:
            result = service.import_file(
                UploadedFile(filename=upload.filename or "upload.csv", content=content),
                snapshot,
            )
        except ImportStorageError as e:
            raise HTTPException(status_code=500, detail=str(e))
        db.commit()
        results.append(FileImportResponse(
            filename=result.filename,
            batch_id=result.batch_id,
            imported_count=result.imported_count,
            rejected_count=result.rejected_count,
        ))

    return ImportResponse(
        files=results,
        imported_count=sum(r.imported_count for r in results),
        rejected_count=sum(r.rejected_count for r in results),
    )


@router.get("/history", response_model=list[ImportBatchResponse])
def get_import_history(db: Session = Depends(get_db)):
    """Get all import batches, newest first."""
    return ImportService(db).get_imports()


@router.delete("/{batch_id}")
def delete_import(batch_id: int, db: Session = Depends(get_db)):
    """Undo an import: remove the batch and all its transactions."""
    if not ImportService(db).delete_import(batch_id):
        raise HTTPException(status_code=404, detail="Import not found")
    return {"deleted": batch_id}
