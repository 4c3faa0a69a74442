from pydantic import BaseModel
from decimal import Decimal
from typing import List, Optional


class GolfCourse(BaseModel):
    id: str
    vendor_id: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    rating: Optional[float] = None

    class Config:
        from_attributes = True


class HotelRoom(BaseModel):
    id: str
    room_type: str
    price_per_night: Decimal
    capacity: Optional[int] = None
    available_count: Optional[int] = None

    class Config:
        from_attributes = True


class Hotel(BaseModel):
    id: str
    vendor_id: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    star_rating: Optional[int] = None
    rooms: List[HotelRoom] = []

    class Config:
        from_attributes = True


class TravelPackage(BaseModel):
    id: str
    vendor_id: str
    name: str
    description: Optional[str] = None
    package_type: Optional[str] = None
    price: Decimal
    duration_hours: Optional[int] = None

    class Config:
        from_attributes = True
