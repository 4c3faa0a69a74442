"""
Revenue split for paid bookings.

The platform keeps ``round(amount * fee_rate)``; the rest is divided among the
booking's vendors by an allocation function. All amounts are rounded half-up to
whole currency units.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, List, Optional, Sequence
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from app.core.config import settings
from app.crud import settlement as settlement_crud
from app.models.booking import Booking
from app.models.payment import Payment
from app.models.settlement import SplitSettlement, SettlementStatus

logger = logging.getLogger(__name__)

UNIT = Decimal("1")

# (vendor_pool, vendor_ids, booking) -> {vendor_id: share}
Allocation = Callable[[Decimal, Sequence[str], Optional[Booking]], Dict[str, Decimal]]


def round_amount(value) -> Decimal:
    return Decimal(value).quantize(UNIT, rounding=ROUND_HALF_UP)


def equal_split(
    vendor_pool: Decimal, vendor_ids: Sequence[str], booking: Optional[Booking] = None
) -> Dict[str, Decimal]:
    """Same share for every vendor regardless of what each one sold."""
    if not vendor_ids:
        return {}
    share = round_amount(Decimal(vendor_pool) / len(vendor_ids))
    return {vendor_id: share for vendor_id in vendor_ids}


@dataclass
class SplitResult:
    amount: Decimal
    platform_fee: Decimal
    vendor_pool: Decimal
    shares: Dict[str, Decimal] = field(default_factory=dict)


def compute_split(
    amount,
    vendor_ids: Sequence[str],
    fee_rate=None,
    allocate: Allocation = equal_split,
    booking: Optional[Booking] = None,
) -> SplitResult:
    amount = Decimal(amount)
    fee_rate = Decimal(str(settings.PLATFORM_FEE_RATE if fee_rate is None else fee_rate))

    platform_fee = round_amount(amount * fee_rate)
    vendor_pool = amount - platform_fee
    shares = {
        vendor_id: round_amount(share)
        for vendor_id, share in allocate(vendor_pool, vendor_ids, booking).items()
    }

    if amount > 0:
        # Rounding must never leave a vendor with nothing
        shares = {vendor_id: max(share, UNIT) for vendor_id, share in shares.items()}

    return SplitResult(
        amount=amount,
        platform_fee=platform_fee,
        vendor_pool=vendor_pool,
        shares=shares,
    )


def generate_settlements(
    db: Session,
    payment: Payment,
    booking: Booking,
    fee_rate=None,
    allocate: Allocation = equal_split,
) -> List[SplitSettlement]:
    """
    Create one pending settlement per vendor of ``booking``.

    Returns the rows created by this call; an empty list means the payment
    already had settlements (webhook replay) or the booking has no vendors.
    """
    vendor_ids = booking.vendor_ids
    if not vendor_ids:
        return []

    if settlement_crud.settlements_exist(db, payment.id):
        logger.info(f"Settlements for payment {payment.id} already exist, skipping")
        return []

    split = compute_split(payment.amount, vendor_ids, fee_rate, allocate, booking)
    settlements = [
        SplitSettlement(
            payment_id=payment.id,
            vendor_id=vendor_id,
            amount=share,
            status=SettlementStatus.PENDING,
            notes=f"Auto-generated from payment {payment.id}",
        )
        for vendor_id, share in split.shares.items()
    ]
    db.add_all(settlements)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent delivery of the same webhook inserted them first
        db.rollback()
        logger.warning(f"Settlements for payment {payment.id} created concurrently, skipping")
        return []

    logger.info(
        f"Created {len(settlements)} settlements for payment {payment.id}: "
        f"platform_fee={split.platform_fee}, per_vendor={sorted(set(split.shares.values()))}"
    )
    return settlements
