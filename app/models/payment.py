from sqlalchemy import (
    Column,
    String,
    Numeric,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from app.database import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    EXPIRED = "expired"
    FAILED = "failed"


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (
        # At most one live invoice per booking
        Index(
            "uq_payments_one_pending_per_booking",
            "booking_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    xendit_invoice_id = Column(String(100), index=True)
    xendit_external_id = Column(String(100), unique=True, index=True)
    invoice_url = Column(String(500))
    expiry_date = Column(String(64))
    amount = Column(Numeric(14, 2), nullable=False)
    status = Column(
        Enum(
            PaymentStatus,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=16,
        ),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    payment_method = Column(String(64))
    payment_channel = Column(String(64))
    paid_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    booking = relationship("Booking", back_populates="payments")
    settlements = relationship("SplitSettlement", back_populates="payment")
