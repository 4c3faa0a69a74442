from sqlalchemy.orm import Session
from sqlalchemy import and_
from typing import List, Optional
from app.models.notification import Notification
from app.schemas.notification import NotificationCreate


def create_notification(db: Session, notification: NotificationCreate) -> Notification:
    """Create a notification row"""
    db_notification = Notification(
        recipient_id=notification.recipient_id,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        data=notification.data,
    )
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification


def get_notifications(
    db: Session, recipient_id: Optional[str], skip: int = 0, limit: int = 100
) -> List[Notification]:
    """Notifications for a recipient; ``None`` reads the operator inbox"""
    if recipient_id is None:
        query = db.query(Notification).filter(Notification.recipient_id.is_(None))
    else:
        query = db.query(Notification).filter(Notification.recipient_id == recipient_id)
    return (
        query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()
    )


def get_unread_notifications_count(db: Session, recipient_id: str) -> int:
    return (
        db.query(Notification)
        .filter(
            and_(
                Notification.recipient_id == recipient_id,
                Notification.is_read.is_(False),
            )
        )
        .count()
    )


def mark_notification_as_read(db: Session, notification_id: str, recipient_id: str) -> bool:
    notification = (
        db.query(Notification)
        .filter(
            and_(
                Notification.id == notification_id,
                Notification.recipient_id == recipient_id,
            )
        )
        .first()
    )
    if not notification:
        return False

    notification.is_read = True
    db.commit()
    return True


def mark_all_notifications_as_read(db: Session, recipient_id: str) -> int:
    updated_count = (
        db.query(Notification)
        .filter(
            and_(
                Notification.recipient_id == recipient_id,
                Notification.is_read.is_(False),
            )
        )
        .update({"is_read": True})
    )

    db.commit()
    return updated_count
