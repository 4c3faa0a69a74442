"""
Invoice issuance for approved bookings.

At most one live (``pending``) payment exists per booking. A repeated request
returns the existing invoice; a gateway failure leaves the booking and its
payments exactly as they were.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
import logging
import time

from app.core.config import settings
from app.crud import booking as booking_crud
from app.crud import payment as payment_crud
from app.exceptions import (
    ExternalServiceError,
    InternalError,
    InvalidStateError,
    NotFoundError,
)
from app.models.booking import Booking, BookingStatus
from app.models.payment import Payment, PaymentStatus
from app.schemas.payment import InvoiceItem, InvoiceRequest
from app.services.auth import Principal
from app.services.xendit_client import XenditClient

logger = logging.getLogger(__name__)

PAYABLE_STATUSES = {BookingStatus.APPROVED, BookingStatus.PENDING_PAYMENT}

# Display-only split of the total across item types. Settlement math never
# reads these numbers.
ITEM_DISPLAY_SHARES = {
    "golf": ("Golf Tee Time", Decimal("0.6"), "Golf", "players"),
    "hotel": ("Hotel Accommodation", Decimal("0.3"), "Accommodation", None),
    "travel": ("Travel Package", Decimal("0.1"), "Travel", "passengers"),
}


def generate_external_id(booking_id: str) -> str:
    """Correlation key for the gateway: prefix, booking id head, epoch millis."""
    return f"GOLF-{booking_id[:8].upper()}-{int(time.time() * 1000)}"


def build_invoice_items(booking: Booking) -> List[InvoiceItem]:
    details = booking.booking_details or {}
    total = Decimal(booking.total_amount)
    items = []

    for key, (name, share, category, quantity_field) in ITEM_DISPLAY_SHARES.items():
        section = details.get(key)
        if not section:
            continue
        quantity = section.get(quantity_field) if quantity_field else None
        items.append(
            InvoiceItem(
                name=name,
                quantity=quantity or 1,
                price=(total * share).quantize(Decimal("1"), rounding=ROUND_HALF_UP),
                category=category,
            )
        )

    if not items:
        items.append(
            InvoiceItem(
                name="Golf Tourism Package",
                quantity=1,
                price=total,
                category="Package",
            )
        )
    return items


def _build_invoice_request(booking: Booking, principal: Principal, external_id: str) -> InvoiceRequest:
    booking_type = getattr(booking.booking_type, "value", booking.booking_type)
    return InvoiceRequest(
        external_id=external_id,
        amount=booking.total_amount,
        payer_email=principal.email,
        description=f"Golf Tourism Booking - {booking_type}",
        customer_name=principal.full_name,
        customer_phone=principal.phone,
        items=build_invoice_items(booking),
        success_redirect_url=f"{settings.PUBLIC_APP_URL}/booking/success?id={booking.id}",
        failure_redirect_url=f"{settings.PUBLIC_APP_URL}/booking/failed?id={booking.id}",
        currency=settings.INVOICE_CURRENCY,
        invoice_duration=settings.INVOICE_DURATION_SECONDS,
    )


def create_payment_for_booking(
    db: Session,
    principal: Principal,
    booking_id: str,
    gateway: XenditClient,
) -> Payment:
    booking = booking_crud.get_booking(db, booking_id)
    if not booking or booking.user_id != principal.id:
        raise NotFoundError("Booking not found")

    if booking.status not in PAYABLE_STATUSES:
        raise InvalidStateError("Booking must be approved before payment")

    existing = payment_crud.get_pending_payment(db, booking.id)
    if existing and existing.xendit_invoice_id:
        logger.info(f"Reusing pending invoice {existing.xendit_invoice_id} for booking {booking.id}")
        return existing

    external_id = generate_external_id(booking.id)
    # Nothing is written before the gateway answers
    invoice = gateway.create_invoice(_build_invoice_request(booking, principal, external_id))

    payment = existing or Payment(booking_id=booking.id)
    payment.xendit_invoice_id = invoice.id
    payment.xendit_external_id = external_id
    payment.invoice_url = invoice.invoice_url
    payment.expiry_date = invoice.expiry_date
    payment.amount = booking.total_amount
    payment.status = PaymentStatus.PENDING
    db.add(payment)
    booking.status = BookingStatus.PENDING_PAYMENT

    try:
        db.commit()
    except (IntegrityError, StaleDataError) as e:
        # Another request for the same booking committed first
        db.rollback()
        logger.warning(f"Concurrent invoice creation for booking {booking_id}: {e}")
        _discard_invoice(gateway, invoice.id)
        winner = payment_crud.get_pending_payment(db, booking_id)
        if winner and winner.xendit_invoice_id:
            return winner
        raise InternalError("Failed to create payment")

    db.refresh(payment)
    logger.info(
        f"Payment {payment.id} pending for booking {booking.id} "
        f"(invoice {invoice.id}, external_id {external_id})"
    )
    return payment


def _discard_invoice(gateway: XenditClient, invoice_id: str) -> None:
    try:
        gateway.expire_invoice(invoice_id)
    except ExternalServiceError as e:
        logger.error(f"Could not expire orphaned invoice {invoice_id}: {e}")
