"""
Inbound payment gateway callbacks.

The payment row is the durable source of truth: its status change (and the
matching booking status) is committed first. Settlement generation and
notifications run afterwards and are safe to repeat, so a retried delivery of
the same callback converges on the same end state.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
import logging

from app.crud import payment as payment_crud
from app.exceptions import AuthenticationError, NotFoundError, ValidationError
from app.models.booking import BookingStatus, PAID_STATUSES, TERMINAL_STATUSES
from app.models.payment import PaymentStatus
from app.models.settlement import SplitSettlement
from app.schemas.payment import WebhookPayload
from app.services import settlement_service
from app.services.notification_service import NotificationService, notification_service
from app.services.xendit_client import verify_webhook_token

logger = logging.getLogger(__name__)

CALLBACK_STATUSES = {
    "PAID": PaymentStatus.PAID,
    "EXPIRED": PaymentStatus.EXPIRED,
}


@dataclass
class WebhookResult:
    payment_id: str
    booking_id: str
    payment_status: str
    booking_status: str
    changed: bool = False
    settlements: List[SplitSettlement] = field(default_factory=list)


def authenticate_callback(token: Optional[str]) -> None:
    if not verify_webhook_token(token):
        logger.error("Invalid webhook token")
        raise AuthenticationError("Invalid webhook token")


def parse_callback_status(raw_status: str) -> PaymentStatus:
    status = CALLBACK_STATUSES.get((raw_status or "").strip().upper())
    if status is None:
        raise ValidationError(f"Unsupported invoice status '{raw_status}'")
    return status


def handle_invoice_callback(
    db: Session,
    payload: WebhookPayload,
    notifier: NotificationService = notification_service,
    fee_rate=None,
) -> WebhookResult:
    new_status = parse_callback_status(payload.status)

    payment = payment_crud.get_payment_by_external_id(
        db, payload.external_id, for_update=True
    )
    if not payment:
        logger.error(f"Payment not found for external_id: {payload.external_id}")
        raise NotFoundError("Payment not found")

    booking = payment.booking
    previous_status = payment.status

    if previous_status == PaymentStatus.PAID and new_status != PaymentStatus.PAID:
        # A paid invoice cannot expire; late or out-of-order delivery
        logger.warning(
            f"Ignoring {new_status.value} callback for already paid payment {payment.id}"
        )
        db.rollback()
        return WebhookResult(
            payment_id=payment.id,
            booking_id=booking.id,
            payment_status=payment.status.value,
            booking_status=booking.status.value,
        )

    # 1. Payment and booking status, committed together
    payment.status = new_status
    if new_status == PaymentStatus.PAID:
        if previous_status != PaymentStatus.PAID:
            payment.paid_at = payload.paid_at or datetime.now(timezone.utc)
            payment.payment_method = payload.payment_method
            payment.payment_channel = payload.payment_channel
        if booking.status not in PAID_STATUSES:
            if booking.status in TERMINAL_STATUSES:
                logger.warning(
                    f"Payment {payment.id} paid for booking {booking.id} in status "
                    f"{booking.status.value}; marking paid"
                )
            booking.status = BookingStatus.PAID
    elif booking.status not in PAID_STATUSES and booking.status not in TERMINAL_STATUSES:
        # Let the customer request a fresh invoice
        booking.status = BookingStatus.PENDING_PAYMENT

    db.commit()
    db.refresh(payment)
    db.refresh(booking)
    newly_changed = previous_status != new_status
    logger.info(
        f"Payment {payment.id} {previous_status.value} -> {new_status.value}; "
        f"booking {booking.id} now {booking.status.value}"
    )

    result = WebhookResult(
        payment_id=payment.id,
        booking_id=booking.id,
        payment_status=payment.status.value,
        booking_status=booking.status.value,
        changed=newly_changed,
    )

    if new_status != PaymentStatus.PAID:
        return result

    # 2. Settlements, at most once per payment. Failures propagate so the
    # gateway retries the callback; the status above is already durable.
    result.settlements = settlement_service.generate_settlements(
        db, payment, booking, fee_rate=fee_rate
    )

    # 3. Notify only when this delivery moved something forward
    if newly_changed or result.settlements:
        notifier.notify_payment_received(db, booking, payment)
        if result.settlements:
            notifier.notify_settlements_created(db, booking, payment, result.settlements)

    return result
