from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from app.crud import settlement as settlement_crud
from app.database import get_db
from app.exceptions import AuthorizationError
from app.models.settlement import SettlementStatus
from app.schemas.settlement import SettlementListResponse
from app.services.auth import Principal, get_current_principal

router = APIRouter()


@router.get("/", response_model=SettlementListResponse)
def read_settlements(
    vendor_id: Optional[str] = None,
    status: Optional[SettlementStatus] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Operator payout queue; vendors only see their own rows."""
    if not principal.is_admin:
        if not principal.is_vendor:
            raise AuthorizationError("Settlements are only visible to admins and vendors")
        vendor_id = principal.id

    settlements = settlement_crud.get_settlements(
        db, skip=skip, limit=limit, vendor_id=vendor_id, status=status
    )
    return {"success": True, "data": settlements}
