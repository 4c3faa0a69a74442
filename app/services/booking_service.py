"""
Booking aggregate: creation, vendor decisions and role-scoped reads.
"""
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
import logging

from app.core.config import settings
from app.crud import booking as booking_crud
from app.crud import catalog as catalog_crud
from app.exceptions import (
    AuthorizationError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from app.models.booking import Booking, BookingStatus, BookingType
from app.schemas.booking import BookingCreate, BookingDetails
from app.services import approval_engine
from app.services.auth import Principal
from app.services.notification_service import NotificationService, notification_service

logger = logging.getLogger(__name__)


def resolve_vendor_ids(db: Session, details: BookingDetails) -> List[str]:
    """
    Owning vendor of each item, looked up in the catalog.

    Called once at creation; the result is frozen into ``vendor_approvals``.
    """
    vendor_ids = []

    if details.golf:
        course = catalog_crud.get_golf_course(db, details.golf.course_id)
        if not course or not course.is_active:
            raise ValidationError(f"Golf course {details.golf.course_id} not found")
        if details.golf.tee_time_id:
            tee_time = catalog_crud.get_tee_time(db, details.golf.tee_time_id)
            if not tee_time or tee_time.course_id != course.id:
                raise ValidationError(f"Tee time {details.golf.tee_time_id} not found for this course")
            if not tee_time.is_available:
                raise ValidationError("Selected tee time is no longer available")
        vendor_ids.append(course.vendor_id)

    if details.hotel:
        hotel = catalog_crud.get_hotel(db, details.hotel.hotel_id)
        if not hotel or not hotel.is_active:
            raise ValidationError(f"Hotel {details.hotel.hotel_id} not found")
        if details.hotel.room_id:
            room = catalog_crud.get_hotel_room(db, details.hotel.room_id)
            if not room or room.hotel_id != hotel.id:
                raise ValidationError(f"Room {details.hotel.room_id} not found for this hotel")
        vendor_ids.append(hotel.vendor_id)

    if details.travel:
        package = catalog_crud.get_travel_package(db, details.travel.package_id)
        if not package or not package.is_active:
            raise ValidationError(f"Travel package {details.travel.package_id} not found")
        vendor_ids.append(package.vendor_id)

    return vendor_ids


def _validate_amount(total_amount) -> Decimal:
    try:
        amount = Decimal(str(total_amount))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("total_amount must be a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("total_amount must be positive")
    return amount


def create_booking(
    db: Session,
    principal: Principal,
    booking: BookingCreate,
    notifier: NotificationService = notification_service,
) -> Booking:
    amount = _validate_amount(booking.total_amount)
    details = booking.booking_details

    # A single-type booking carries exactly its own item; only "package" combines types
    if booking.booking_type != BookingType.PACKAGE:
        item_types = details.item_types()
        if booking.booking_type.value not in item_types:
            raise ValidationError(
                f"booking_details must include a '{booking.booking_type.value}' item"
            )
        if len(item_types) > 1:
            raise ValidationError(
                f"A '{booking.booking_type.value}' booking cannot include other items; use 'package'"
            )

    vendor_approvals = approval_engine.build_approvals(resolve_vendor_ids(db, details))
    initial_status = approval_engine.evaluate(vendor_approvals)

    db_booking = booking_crud.create_booking(
        db,
        user_id=principal.id,
        booking_type=booking.booking_type,
        booking_details=details.model_dump(exclude_none=True),
        vendor_approvals=vendor_approvals,
        status=initial_status,
        total_amount=amount,
        notes=booking.notes,
    )
    logger.info(
        f"Booking {db_booking.id} created by {principal.id}: "
        f"{len(vendor_approvals)} vendor(s), status={initial_status.value}"
    )

    notifier.notify_approval_needed(db, db_booking)
    return db_booking


def record_vendor_decision(
    db: Session,
    principal: Principal,
    booking_id: str,
    action: str,
    notes: Optional[str] = None,
    notifier: NotificationService = notification_service,
) -> Booking:
    """
    Apply one vendor's approve/reject decision.

    The approvals map is re-read under a row lock and written back with a
    version check; on a concurrent write the whole read-modify-write is retried.
    """
    if action not in approval_engine.DECISIONS:
        raise ValidationError("action must be 'approve' or 'reject'")

    for attempt in range(1, settings.APPROVAL_MAX_RETRIES + 1):
        booking = booking_crud.get_booking(db, booking_id, for_update=True)
        if not booking:
            raise NotFoundError("Booking not found")

        approvals = booking.vendor_approvals or {}
        if principal.id not in approvals or not principal.can_act_for_vendor(principal.id):
            raise AuthorizationError("Not authorized to approve this booking")

        if booking.status != BookingStatus.PENDING_APPROVAL:
            logger.warning(
                f"Ignoring late '{action}' from vendor {principal.id} on booking "
                f"{booking.id} in status {booking.status.value}"
            )
            db.rollback()
            return booking

        new_approvals = approval_engine.apply_decision(
            approvals, principal.id, action, notes
        )
        new_status = approval_engine.evaluate(new_approvals)

        booking.vendor_approvals = new_approvals
        booking.status = new_status
        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning(
                f"Concurrent update on booking {booking_id} (attempt {attempt}), retrying"
            )
            continue

        db.refresh(booking)
        logger.info(
            f"Vendor {principal.id} {action}d booking {booking.id}: status={new_status.value}"
        )
        notifier.notify_vendor_decision(
            db,
            booking,
            action,
            all_approved=new_status == BookingStatus.APPROVED,
        )
        return booking

    logger.error(f"Gave up recording decision on booking {booking_id} after {attempt} attempts")
    raise InternalError("Booking is being updated concurrently, please retry")


def list_bookings(
    db: Session,
    principal: Principal,
    status: Optional[BookingStatus] = None,
    booking_type: Optional[BookingType] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Booking]:
    filters = {"status": status, "booking_type": booking_type, "skip": skip, "limit": limit}
    if principal.is_admin:
        return booking_crud.get_bookings(db, **filters)
    if principal.is_vendor:
        return booking_crud.get_bookings(db, vendor_id=principal.id, **filters)
    return booking_crud.get_bookings(db, user_id=principal.id, **filters)


def can_view(principal: Principal, booking: Booking) -> bool:
    if principal.is_admin or booking.user_id == principal.id:
        return True
    return principal.is_vendor and principal.id in (booking.vendor_approvals or {})


def get_booking(db: Session, principal: Principal, booking_id: str) -> Booking:
    booking = booking_crud.get_booking(db, booking_id)
    if not booking or not can_view(principal, booking):
        raise NotFoundError("Booking not found")
    return booking
