# amc_portal/services/notification_service.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from amc_portal.models import Notification, NotificationType, Task, TaskPriority
from amc_portal.repositories import NotificationRepository
from amc_portal.schemas import NotificationOut
from amc_portal.services.realtime import RealtimeChannel
from amc_portal.utils.datetime import isoformat_utc
from amc_portal.utils.responses import dump

logger = logging.getLogger(__name__)


def _task_metadata(task: Task) -> Dict[str, Any]:
    return {
        "taskId": task.id,
        "taskTitle": task.title,
        "dueDate": isoformat_utc(task.due_date),
    }


class NotificationService:
    def __init__(self, db: Session, realtime: Optional[RealtimeChannel] = None):
        self.db = db
        self.realtime = realtime
        self.notifications = NotificationRepository(db)

    async def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.SYSTEM_ALERT,
        priority: TaskPriority = TaskPriority.MEDIUM,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        """Persist a notification, then push it to the user's room if they are connected"""
        notification = self.notifications.create(
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            priority=priority,
            metadata=metadata,
        )

        if self.realtime is not None:
            try:
                await self.realtime.emit_notification_created(dump(NotificationOut, notification))
            except Exception as e:
                logger.warning(f"Could not push notification {notification.id} to user {user_id}: {e}")

        logger.info(f"Notification created for user {user_id}: {title}")
        return notification

    async def create_task_assignment_notification(self, task: Task) -> Optional[Notification]:
        if not task.assigned_to:
            return None
        return await self.create_notification(
            user_id=task.assigned_to,
            title="New Task Assigned",
            message=f"You have been assigned a new {task.category.value} task: {task.title}",
            notification_type=NotificationType.TASK_ASSIGNED,
            priority=task.priority,
            metadata=_task_metadata(task),
        )

    async def create_task_reminder_notification(self, task: Task) -> Optional[Notification]:
        if not task.assigned_to:
            return None
        return await self.create_notification(
            user_id=task.assigned_to,
            title="Task Reminder",
            message=f'Reminder: Task "{task.title}" is due soon',
            notification_type=NotificationType.TASK_REMINDER,
            priority=TaskPriority.MEDIUM,
            metadata=_task_metadata(task),
        )

    async def create_task_overdue_notification(self, task: Task) -> Optional[Notification]:
        if not task.assigned_to:
            return None
        return await self.create_notification(
            user_id=task.assigned_to,
            title="Task Overdue",
            message=f'Task "{task.title}" is now overdue',
            notification_type=NotificationType.TASK_OVERDUE,
            priority=TaskPriority.HIGH,
            metadata=_task_metadata(task),
        )
