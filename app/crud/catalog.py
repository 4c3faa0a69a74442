from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.catalog import GolfCourse, TeeTime, Hotel, HotelRoom, TravelPackage


def get_golf_course(db: Session, course_id: str) -> Optional[GolfCourse]:
    return db.query(GolfCourse).filter(GolfCourse.id == course_id).first()


def get_tee_time(db: Session, tee_time_id: str) -> Optional[TeeTime]:
    return db.query(TeeTime).filter(TeeTime.id == tee_time_id).first()


def get_hotel(db: Session, hotel_id: str) -> Optional[Hotel]:
    return db.query(Hotel).filter(Hotel.id == hotel_id).first()


def get_hotel_room(db: Session, room_id: str) -> Optional[HotelRoom]:
    return db.query(HotelRoom).filter(HotelRoom.id == room_id).first()


def get_travel_package(db: Session, package_id: str) -> Optional[TravelPackage]:
    return db.query(TravelPackage).filter(TravelPackage.id == package_id).first()


def get_golf_courses(
    db: Session, skip: int = 0, limit: int = 100, location: Optional[str] = None
) -> List[GolfCourse]:
    query = db.query(GolfCourse).filter(GolfCourse.is_active.is_(True))
    if location:
        query = query.filter(GolfCourse.location.ilike(f"%{location}%"))
    return query.order_by(GolfCourse.name).offset(skip).limit(limit).all()


def get_hotels(
    db: Session, skip: int = 0, limit: int = 100, location: Optional[str] = None
) -> List[Hotel]:
    query = db.query(Hotel).filter(Hotel.is_active.is_(True))
    if location:
        query = query.filter(Hotel.location.ilike(f"%{location}%"))
    return query.order_by(Hotel.name).offset(skip).limit(limit).all()


def get_travel_packages(
    db: Session, skip: int = 0, limit: int = 100, package_type: Optional[str] = None
) -> List[TravelPackage]:
    query = db.query(TravelPackage).filter(TravelPackage.is_active.is_(True))
    if package_type:
        query = query.filter(TravelPackage.package_type == package_type)
    return query.order_by(TravelPackage.name).offset(skip).limit(limit).all()
