from sqlalchemy import Column, String, Text, Integer, Numeric, DateTime, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from app.database import Base


class BookingStatus(str, enum.Enum):
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    PENDING_PAYMENT = "pending_payment"
    PAID = "paid"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class BookingType(str, enum.Enum):
    GOLF = "golf"
    HOTEL = "hotel"
    TRAVEL = "travel"
    PACKAGE = "package"  # composite of several item types


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


TERMINAL_STATUSES = {BookingStatus.CANCELLED, BookingStatus.COMPLETED}

# Statuses reached once money has been collected
PAID_STATUSES = {BookingStatus.PAID, BookingStatus.CONFIRMED, BookingStatus.COMPLETED}


def _enum_column(enum_cls, default):
    return Column(
        Enum(
            enum_cls,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=32,
        ),
        nullable=False,
        default=default,
    )


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    booking_type = _enum_column(BookingType, BookingType.PACKAGE)
    booking_details = Column(JSON, nullable=False)
    # {vendor_id: {"status": ..., "approved_at": ..., "notes": ...}}
    # Keys are fixed at creation; only the inner values change.
    vendor_approvals = Column(JSON, nullable=False, default=dict)
    status = _enum_column(BookingStatus, BookingStatus.PENDING_APPROVAL)
    total_amount = Column(Numeric(14, 2), nullable=False)
    notes = Column(Text)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    payments = relationship(
        "Payment", back_populates="booking", order_by="Payment.created_at"
    )

    # Optimistic concurrency: UPDATE ... WHERE version = <read version>
    __mapper_args__ = {"version_id_col": version}

    @property
    def vendor_ids(self):
        return list((self.vendor_approvals or {}).keys())
