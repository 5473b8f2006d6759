import logging
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quickdesk.core.config import settings
from quickdesk.models.notification import Notification

logger = logging.getLogger(__name__)

TYPE_BEST_PROVIDERS = "best_providers"
TYPE_TICKET_ASSIGNED = "ticket_assigned"
TYPE_AGENT_RESPONSE = "agent_response"
TYPE_USER_RESPONSE = "user_response"


def create_notification(
    db: Session,
    user_id: int,
    type: str,
    title: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
) -> Optional[Notification]:
    """Fire-and-forget in-app notification.

    A storage failure is logged and rolled back; the caller's request carries on.
    """
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data or {},
        read=False,
    )
    try:
        db.add(notification)
        db.commit()
        db.refresh(notification)
    except SQLAlchemyError:
        logger.exception("Failed to store %s notification for user %s", type, user_id)
        db.rollback()
        return None
    return notification


def list_notifications(db: Session, user_id: int, limit: Optional[int] = None) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit or settings.NOTIFICATIONS_LIMIT)
        .all()
    )


def mark_read(db: Session, notification_id: int, user_id: int) -> Optional[Notification]:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if not notification:
        return None
    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification
