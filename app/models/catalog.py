"""
Vendor-owned sellable items. Read-only from the booking pipeline's point of view.
"""
from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Numeric,
    Float,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class GolfCourse(Base):
    __tablename__ = "golf_courses"

    id = Column(String(36), primary_key=True, default=_uuid)
    vendor_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    location = Column(String(255))
    rating = Column(Float)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=func.now())

    tee_times = relationship("TeeTime", back_populates="course")


class TeeTime(Base):
    __tablename__ = "tee_times"

    id = Column(String(36), primary_key=True, default=_uuid)
    course_id = Column(String(36), ForeignKey("golf_courses.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)  # "HH:MM"
    available_slots = Column(Integer, default=4)
    price = Column(Numeric(14, 2), nullable=False)
    is_available = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=func.now())

    course = relationship("GolfCourse", back_populates="tee_times")


class Hotel(Base):
    __tablename__ = "hotels"

    id = Column(String(36), primary_key=True, default=_uuid)
    vendor_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    location = Column(String(255))
    star_rating = Column(Integer)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=func.now())

    rooms = relationship("HotelRoom", back_populates="hotel")


class HotelRoom(Base):
    __tablename__ = "hotel_rooms"

    id = Column(String(36), primary_key=True, default=_uuid)
    hotel_id = Column(String(36), ForeignKey("hotels.id"), nullable=False, index=True)
    room_type = Column(String(100), nullable=False)
    price_per_night = Column(Numeric(14, 2), nullable=False)
    capacity = Column(Integer, default=2)
    available_count = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=func.now())

    hotel = relationship("Hotel", back_populates="rooms")


class TravelPackage(Base):
    __tablename__ = "travel_packages"

    id = Column(String(36), primary_key=True, default=_uuid)
    vendor_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    package_type = Column(String(32), default="custom")  # airport_transfer, day_tour, multi_day, custom
    price = Column(Numeric(14, 2), nullable=False)
    duration_hours = Column(Integer)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=func.now())
