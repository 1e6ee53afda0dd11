from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import BankProfileCreate, BankProfileResponse
from ..services.import_service import ImportService

router = APIRouter()


@router.get("/", response_model=list[BankProfileResponse])
def list_profiles(db: Session = Depends(get_db)):
    """Get all bank profiles."""
    return ImportService(db).get_profiles()


@router.post("/", response_model=BankProfileResponse, status_code=201)
def create_profile(request: BankProfileCreate, db: Session = Depends(get_db)):
    """Create a bank profile."""
    try:
        return ImportService(db).upsert_profile(request)
    except IntegrityError:
        raise HTTPException(status_code=400, detail="A profile with this name already exists")


@router.put("/{profile_id}", response_model=BankProfileResponse)
def update_profile(profile_id: int, request: BankProfileCreate, db: Session = Depends(get_db)):
    """Replace a bank profile's settings."""
    try:
        profile = ImportService(db).upsert_profile(request, profile_id)
    except IntegrityError:
        raise HTTPException(status_code=400, detail="A profile with this name already exists")
    if profile is None:
        raise HTTPException(status_code=404, detail="Bank profile not found")
    return profile
