from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud import catalog as catalog_crud
from app.database import get_db
from app.schemas.catalog import GolfCourse, Hotel, TravelPackage

router = APIRouter()


@router.get("/golf-courses", response_model=List[GolfCourse])
def read_golf_courses(
    location: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return catalog_crud.get_golf_courses(db, skip=skip, limit=limit, location=location)


@router.get("/hotels", response_model=List[Hotel])
def read_hotels(
    location: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return catalog_crud.get_hotels(db, skip=skip, limit=limit, location=location)


@router.get("/travel-packages", response_model=List[TravelPackage])
def read_travel_packages(
    package_type: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return catalog_crud.get_travel_packages(
        db, skip=skip, limit=limit, package_type=package_type
    )
