from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from amc_portal.database import get_db
from amc_portal.exceptions import AuthorizationError, NotFoundError, ValidationError
from amc_portal.models import ActivityType, NotificationType, User, UserRole
from amc_portal.repositories import NotificationRepository, UserRepository
from amc_portal.schemas import NotificationCreate, NotificationOut
from amc_portal.services import ActivityLogger, NotificationService
from amc_portal.services.realtime import RealtimeChannel, get_realtime
from amc_portal.utils.auth import get_current_user
from amc_portal.utils.responses import dump, success

router = APIRouter()


@router.get("")
def get_notifications(
    limit: int = Query(50, ge=1, le=200),
    unread_only: bool = Query(False, alias="unreadOnly"),
    type: Optional[NotificationType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notifications = NotificationRepository(db).find_by_user(
        current_user.id,
        is_read=False if unread_only else None,
        type=type,
        limit=limit,
    )
    return success(dump(NotificationOut, notifications))


@router.get("/unread-count")
def get_unread_count(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    count = NotificationRepository(db).unread_count(current_user.id)
    return success({"count": count})


@router.post("", status_code=201)
async def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    realtime: RealtimeChannel = Depends(get_realtime),
    current_user: User = Depends(get_current_user),
):
    """Admins may notify anyone; users can only create notifications for themselves"""
    user_id = payload.user_id or current_user.id
    if current_user.role != UserRole.ADMIN and user_id != current_user.id:
        raise AuthorizationError("You can only create notifications for yourself")
    if UserRepository(db).find_by_id(user_id) is None:
        raise ValidationError("Target user not found")

    notification = await NotificationService(db, realtime).create_notification(
        user_id=user_id,
        title=payload.title,
        message=payload.message,
        notification_type=payload.type,
        priority=payload.priority,
        metadata=payload.metadata,
    )
    return success(dump(NotificationOut, notification), "Notification created successfully")


@router.patch("/read-all")
def mark_all_as_read(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    count = NotificationRepository(db).mark_all_as_read(current_user.id)
    return success({"count": count}, f"Marked {count} notifications as read")


@router.patch("/{notification_id}/read")
def mark_as_read(
    notification_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notification = NotificationRepository(db).mark_as_read(notification_id, current_user.id)
    if notification is None:
        raise NotFoundError("Notification not found")

    ActivityLogger(db, request).log(
        current_user.id,
        ActivityType.NOTIFICATION_READ,
        f"Read notification: {notification.title}",
        {"notificationId": notification.id},
    )
    return success(dump(NotificationOut, notification), "Notification marked as read")


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not NotificationRepository(db).delete(notification_id, current_user.id):
        raise NotFoundError("Notification not found")
    return success(message="Notification deleted successfully")
