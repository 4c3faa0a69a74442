from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from app.crud import notification as notification_crud
from app.database import get_db
from app.exceptions import NotFoundError
from app.schemas.notification import (
    NotificationActionResponse,
    NotificationResponse,
    NotificationsListResponse,
)
from app.services.auth import Principal, get_current_principal, require_admin

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=NotificationsListResponse)
def get_notifications(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Caller's notifications, newest first, plus the unread counter."""
    notifications = notification_crud.get_notifications(
        db, principal.id, skip=skip, limit=limit
    )
    unread_count = notification_crud.get_unread_notifications_count(db, principal.id)
    return NotificationsListResponse(
        success=True, notifications=notifications, unread_count=unread_count
    )


@router.get("/operator", response_model=List[NotificationResponse])
def get_operator_notifications(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    """Platform operator inbox (settlement alerts)."""
    return notification_crud.get_notifications(db, None, skip=skip, limit=limit)


@router.put("/{notification_id}/read", response_model=NotificationActionResponse)
def mark_notification_as_read(
    notification_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    if not notification_crud.mark_notification_as_read(db, notification_id, principal.id):
        raise NotFoundError("Notification not found")
    return NotificationActionResponse(success=True, message="Notification marked as read")


@router.put("/read-all", response_model=NotificationActionResponse)
def mark_all_notifications_as_read(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    updated_count = notification_crud.mark_all_notifications_as_read(db, principal.id)
    logger.info(f"Marked {updated_count} notifications as read for {principal.id}")
    return NotificationActionResponse(
        success=True, message=f"{updated_count} notifications marked as read"
    )
