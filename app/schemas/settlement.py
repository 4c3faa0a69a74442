from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from app.models.settlement import SettlementStatus


class SplitSettlement(BaseModel):
    id: str
    payment_id: str
    vendor_id: str
    amount: Decimal
    status: SettlementStatus
    settled_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SettlementListResponse(BaseModel):
    success: bool = True
    data: List[SplitSettlement]
