import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from app.crud import notification as notification_crud
from app.models.booking import Booking
from app.models.payment import Payment
from app.models.settlement import SplitSettlement
from app.schemas.notification import NotificationCreate

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Post-commit notifications for the booking pipeline.

    Every public method is fire-and-forget: errors are logged and the session is
    rolled back, but nothing is raised to the caller, so an already committed
    booking or payment transition is never undone by a failed notification.
    """

    def send(
        self,
        db: Session,
        recipient_id: Optional[str],
        notification_type: str,
        title: str,
        message: str,
        data: dict = None,
    ) -> bool:
        try:
            notification_crud.create_notification(
                db,
                NotificationCreate(
                    recipient_id=recipient_id,
                    type=notification_type,
                    title=title,
                    message=message,
                    data=data,
                ),
            )
            logger.info(
                f"Notification created for {recipient_id or 'operator'}: {notification_type}"
            )
            return True
        except Exception as e:
            logger.error(f"Error creating {notification_type} notification for {recipient_id}: {e}")
            db.rollback()
            return False

    def notify_approval_needed(self, db: Session, booking: Booking) -> int:
        """One approval request per vendor touched by the booking"""
        sent = 0
        for vendor_id in booking.vendor_ids:
            if self.send(
                db,
                recipient_id=vendor_id,
                notification_type="approval_needed",
                title="New Booking Request",
                message=f"A new {_value(booking.booking_type)} booking requires your approval.",
                data={
                    "booking_id": booking.id,
                    "booking_type": _value(booking.booking_type),
                    "total_amount": str(booking.total_amount),
                },
            ):
                sent += 1
        return sent

    def notify_vendor_decision(
        self, db: Session, booking: Booking, action: str, all_approved: bool
    ) -> bool:
        if action == "approve":
            title = "Booking Approved!"
            if all_approved:
                message = "All vendors have approved your booking. You can now proceed to payment."
            else:
                message = "A vendor has approved your booking. Waiting for other approvals."
        else:
            title = "Booking Update"
            message = "A vendor has declined your booking request."

        return self.send(
            db,
            recipient_id=booking.user_id,
            notification_type="booking_request",
            title=title,
            message=message,
            data={
                "booking_id": booking.id,
                "action": action,
                "all_approved": all_approved,
                "status": _value(booking.status),
            },
        )

    def notify_payment_received(
        self, db: Session, booking: Booking, payment: Payment
    ) -> int:
        """Customer receipt plus a heads-up to every vendor of the booking"""
        sent = 0
        data = {"payment_id": payment.id, "booking_id": booking.id}

        if self.send(
            db,
            recipient_id=booking.user_id,
            notification_type="payment_received",
            title="Payment Successful!",
            message=f"Your payment of {payment.amount} has been received. Your booking is now confirmed.",
            data=data,
        ):
            sent += 1

        for vendor_id in booking.vendor_ids:
            if self.send(
                db,
                recipient_id=vendor_id,
                notification_type="payment_received",
                title="Booking Payment Received",
                message="Payment received for a booking at your establishment. Settlement pending admin processing.",
                data=data,
            ):
                sent += 1
        return sent

    def notify_settlements_created(
        self,
        db: Session,
        booking: Booking,
        payment: Payment,
        settlements: List[SplitSettlement],
    ) -> bool:
        return self.send(
            db,
            recipient_id=None,
            notification_type="settlement",
            title="New payment received - settlements pending",
            message=(
                f"Payment of {payment.amount} received for booking {booking.id}. "
                f"{len(settlements)} vendor settlements pending."
            ),
            data={
                "payment_id": payment.id,
                "booking_id": booking.id,
                "vendor_count": len(settlements),
                "total_amount": str(payment.amount),
            },
        )


def _value(enum_or_str) -> str:
    return getattr(enum_or_str, "value", enum_or_str)


notification_service = NotificationService()


def get_notification_service() -> NotificationService:
    return notification_service
