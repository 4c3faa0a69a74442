from sqlalchemy import (
    Column,
    String,
    Text,
    Numeric,
    DateTime,
    Enum,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from app.database import Base


class SettlementStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class SplitSettlement(Base):
    """Vendor payout owed for a paid booking, disbursed manually by the operator."""

    __tablename__ = "split_settlements"
    __table_args__ = (
        UniqueConstraint("payment_id", "vendor_id", name="uq_settlement_payment_vendor"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    payment_id = Column(String(36), ForeignKey("payments.id"), nullable=False, index=True)
    vendor_id = Column(String(36), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    status = Column(
        Enum(
            SettlementStatus,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=16,
        ),
        nullable=False,
        default=SettlementStatus.PENDING,
    )
    settled_at = Column(DateTime(timezone=True))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=func.now())

    payment = relationship("Payment", back_populates="settlements")
