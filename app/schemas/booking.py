from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from app.models.booking import ApprovalStatus, BookingStatus, BookingType


class GolfItem(BaseModel):
    course_id: str
    tee_time_id: Optional[str] = None
    caddie_id: Optional[str] = None
    players: int = Field(default=1, ge=1)
    date: Optional[str] = None
    time: Optional[str] = None  # "HH:MM"


class HotelItem(BaseModel):
    hotel_id: str
    room_id: Optional[str] = None
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    guests: int = Field(default=1, ge=1)


class TravelItem(BaseModel):
    package_id: str
    departure_date: Optional[str] = None
    passengers: int = Field(default=1, ge=1)
    pickup_location: Optional[str] = None


class BookingDetails(BaseModel):
    golf: Optional[GolfItem] = None
    hotel: Optional[HotelItem] = None
    travel: Optional[TravelItem] = None

    @model_validator(mode="after")
    def at_least_one_item(self):
        if not (self.golf or self.hotel or self.travel):
            raise ValueError("booking_details must contain at least one item")
        return self

    def item_types(self) -> List[str]:
        return [name for name in ("golf", "hotel", "travel") if getattr(self, name)]


class BookingCreate(BaseModel):
    booking_type: BookingType
    booking_details: BookingDetails
    total_amount: Decimal
    notes: Optional[str] = None


class VendorApproval(BaseModel):
    status: ApprovalStatus = ApprovalStatus.PENDING
    approved_at: Optional[str] = None
    notes: Optional[str] = None


class VendorDecision(BaseModel):
    booking_id: str
    action: Literal["approve", "reject"]
    notes: Optional[str] = None


class BookingInDB(BaseModel):
    id: str
    user_id: str
    booking_type: BookingType
    booking_details: Dict
    vendor_approvals: Dict[str, VendorApproval]
    status: BookingStatus
    total_amount: Decimal
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Booking(BookingInDB):
    pass


class BookingResponse(BaseModel):
    success: bool = True
    data: Booking


class BookingListResponse(BaseModel):
    success: bool = True
    data: List[Booking]
