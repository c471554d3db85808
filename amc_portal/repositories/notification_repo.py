# amc_portal/repositories/notification_repo.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from amc_portal.models import Notification, NotificationType, TaskPriority
from amc_portal.repositories.base import BaseRepository


class NotificationRepository(BaseRepository):

    def create(
        self,
        *,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.SYSTEM_ALERT,
        priority: TaskPriority = TaskPriority.MEDIUM,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            priority=priority,
            meta=metadata or {},
            is_read=False,
        )
        return self._save(notification)

    def find_by_user(
        self,
        user_id: str,
        *,
        is_read: Optional[bool] = None,
        type: Optional[NotificationType] = None,
        limit: Optional[int] = None,
    ) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if is_read is not None:
            query = query.filter(Notification.is_read.is_(is_read))
        if type:
            query = query.filter(Notification.type == type)

        query = query.order_by(Notification.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def mark_as_read(self, notification_id: str, user_id: str) -> Optional[Notification]:
        """Returns None when the notification is missing or belongs to someone else"""
        notification = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if not notification:
            return None
        notification.is_read = True
        return self._save(notification)

    def mark_all_as_read(self, user_id: str) -> int:
        count = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return count

    def delete(self, notification_id: str, user_id: str) -> bool:
        count = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count > 0

    def unread_count(self, user_id: str) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .count()
        )

    def exists_for_task_since(
        self, user_id: str, type: NotificationType, task_id: str, since: datetime
    ) -> bool:
        """Whether this user already got a notification of this type about the task"""
        candidates = (
            self.db.query(Notification)
            .filter(
                Notification.user_id == user_id,
                Notification.type == type,
                Notification.created_at >= since,
            )
            .all()
        )
        return any((n.meta or {}).get("taskId") == task_id for n in candidates)
