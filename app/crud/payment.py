from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.payment import Payment, PaymentStatus


def get_pending_payment(db: Session, booking_id: str) -> Optional[Payment]:
    return (
        db.query(Payment)
        .filter(
            Payment.booking_id == booking_id,
            Payment.status == PaymentStatus.PENDING,
        )
        .first()
    )


def get_payment_by_external_id(
    db: Session, external_id: str, for_update: bool = False
) -> Optional[Payment]:
    query = db.query(Payment).filter(Payment.xendit_external_id == external_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    return query.first()


def get_payments_for_booking(db: Session, booking_id: str) -> List[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.booking_id == booking_id)
        .order_by(Payment.created_at)
        .all()
    )
