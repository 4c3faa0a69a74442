from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.models.booking import BookingStatus, BookingType
from app.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    VendorDecision,
)
from app.services import booking_service
from app.services.auth import Principal, get_current_principal
from app.services.notification_service import (
    NotificationService,
    get_notification_service,
)

router = APIRouter()


@router.get("/", response_model=BookingListResponse)
def read_bookings(
    status: Optional[BookingStatus] = None,
    booking_type: Optional[BookingType] = Query(None, alias="type"),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Admins see every booking, vendors the ones they must approve, users their own."""
    bookings = booking_service.list_bookings(
        db,
        principal,
        status=status,
        booking_type=booking_type,
        skip=skip,
        limit=limit,
    )
    return {"success": True, "data": bookings}


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    notifier: NotificationService = Depends(get_notification_service),
):
    db_booking = booking_service.create_booking(db, principal, booking, notifier=notifier)
    return {"success": True, "data": db_booking}


@router.get("/{booking_id}", response_model=BookingResponse)
def read_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return {"success": True, "data": booking_service.get_booking(db, principal, booking_id)}


@router.patch("/", response_model=BookingResponse)
def decide_booking(
    decision: VendorDecision,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Vendor approves or rejects their part of a booking."""
    booking = booking_service.record_vendor_decision(
        db,
        principal,
        decision.booking_id,
        decision.action,
        decision.notes,
        notifier=notifier,
    )
    return {"success": True, "data": booking}
