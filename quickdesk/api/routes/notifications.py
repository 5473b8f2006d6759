from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from quickdesk.api.dependencies import get_db
from quickdesk.api.security import get_current_user
from quickdesk.models.user import User
from quickdesk.schemas.notification_schema import NotificationResponse
from quickdesk.services.notification_service import list_notifications, mark_read

router = APIRouter()


@router.get("/", response_model=List[NotificationResponse])
def get_notifications(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Newest first, capped at NOTIFICATIONS_LIMIT. Clients poll this endpoint."""
    return list_notifications(db, user.id)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def read_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    notification = mark_read(db, notification_id, user.id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification
