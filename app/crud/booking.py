from sqlalchemy.orm import Session
from decimal import Decimal
from typing import Dict, List, Optional

from app.models.booking import Booking, BookingStatus, BookingType


def get_booking(
    db: Session, booking_id: str, for_update: bool = False
) -> Optional[Booking]:
    query = db.query(Booking).filter(Booking.id == booking_id)
    if for_update:
        # Row lock on databases that support it; always reload from the DB
        query = query.with_for_update().populate_existing()
    return query.first()


def get_bookings(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    user_id: Optional[str] = None,
    vendor_id: Optional[str] = None,
    status: Optional[BookingStatus] = None,
    booking_type: Optional[BookingType] = None,
) -> List[Booking]:
    query = db.query(Booking)

    if user_id:
        query = query.filter(Booking.user_id == user_id)
    if vendor_id:
        query = query.filter(Booking.vendor_approvals[vendor_id].as_string().isnot(None))
    if status:
        query = query.filter(Booking.status == status)
    if booking_type:
        query = query.filter(Booking.booking_type == booking_type)

    return (
        query.order_by(Booking.created_at.desc()).offset(skip).limit(limit).all()
    )


def create_booking(
    db: Session,
    user_id: str,
    booking_type: BookingType,
    booking_details: Dict,
    vendor_approvals: Dict,
    status: BookingStatus,
    total_amount: Decimal,
    notes: Optional[str] = None,
) -> Booking:
    db_booking = Booking(
        user_id=user_id,
        booking_type=booking_type,
        booking_details=booking_details,
        vendor_approvals=vendor_approvals,
        status=status,
        total_amount=total_amount,
        notes=notes,
    )
    db.add(db_booking)
    db.commit()
    db.refresh(db_booking)
    return db_booking
