from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.settlement import SplitSettlement, SettlementStatus


def settlements_exist(db: Session, payment_id: str) -> bool:
    return (
        db.query(SplitSettlement.id)
        .filter(SplitSettlement.payment_id == payment_id)
        .first()
        is not None
    )


def get_settlements(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    vendor_id: Optional[str] = None,
    status: Optional[SettlementStatus] = None,
) -> List[SplitSettlement]:
    query = db.query(SplitSettlement)

    if vendor_id:
        query = query.filter(SplitSettlement.vendor_id == vendor_id)
    if status:
        query = query.filter(SplitSettlement.status == status)

    return (
        query.order_by(SplitSettlement.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
