# amc_portal/services/task_service.py
"""Task lifecycle with its side effects.

Every write is followed by independent best-effort steps: an activity
entry, a notification for the assignee, and a realtime ``task-updated``
push. None of these steps can fail the write that triggered it.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from amc_portal.exceptions import AuthorizationError, NotFoundError, ValidationError
from amc_portal.models import ActivityType, Task, TaskStatus, User, UserRole
from amc_portal.repositories import TaskRepository, UserRepository
from amc_portal.schemas import TaskCreate, TaskOut, TaskStatusUpdate, TaskUpdate
from amc_portal.services.activity_logger import ActivityLogger
from amc_portal.services.notification_service import NotificationService
from amc_portal.services.realtime import RealtimeChannel
from amc_portal.utils.datetime import utc_now
from amc_portal.utils.responses import dump

logger = logging.getLogger(__name__)


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN


class TaskService:
    def __init__(
        self,
        db: Session,
        realtime: Optional[RealtimeChannel] = None,
        request: Optional[Request] = None,
    ):
        self.db = db
        self.realtime = realtime
        self.tasks = TaskRepository(db)
        self.users = UserRepository(db)
        self.activity = ActivityLogger(db, request)
        self.notifications = NotificationService(db, realtime)

    def _require_assignee(self, user_id: Optional[str]) -> None:
        if user_id and self.users.find_by_id(user_id) is None:
            raise ValidationError("Assigned user not found")

    def _get_or_404(self, task_id: str) -> Task:
        task = self.tasks.find_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def _notify_assignee(self, task: Task) -> None:
        try:
            await self.notifications.create_task_assignment_notification(task)
        except Exception as e:
            logger.error(f"Failed to create assignment notification for task {task.id}: {e}")
            self.db.rollback()

    async def _emit(self, task_payload: Dict[str, Any], assignee_id: Optional[str], actor: User, action: str) -> None:
        if self.realtime is None:
            return
        try:
            await self.realtime.emit_task_updated(task_payload, assignee_id, actor.id, action)
        except Exception as e:
            logger.warning(f"Could not emit task-updated ({action}) for task {task_payload.get('id')}: {e}")

    async def create_task(self, data: TaskCreate, creator: User) -> Task:
        self._require_assignee(data.assigned_to)

        due_date = data.due_date or data.category.default_due_date(utc_now())
        task = self.tasks.create(
            title=data.title,
            description=data.description,
            category=data.category,
            priority=data.priority,
            assigned_to=data.assigned_to,
            assigned_by=creator.id,
            due_date=due_date,
            estimated_time=data.estimated_time,
        )

        self.activity.log(
            creator.id,
            ActivityType.TASK_CREATED,
            f"Created task: {task.title}",
            {"taskId": task.id, "category": task.category.value, "priority": task.priority.value},
        )

        if task.assigned_to and task.assigned_to != creator.id:
            self.activity.log(
                creator.id,
                ActivityType.TASK_ASSIGNED,
                f"Assigned task: {task.title}",
                {"taskId": task.id, "assignedTo": task.assigned_to},
            )
            await self._notify_assignee(task)

        task = self._get_or_404(task.id)
        await self._emit(dump(TaskOut, task), task.assigned_to, creator, "created")
        return task

    def list_tasks(self, current_user: User, **filters) -> List[Task]:
        """Regular users only ever see tasks assigned to them"""
        if not is_admin(current_user):
            filters["assigned_to"] = current_user.id
        return self.tasks.find_all(**filters)

    def get_task(self, task_id: str, current_user: User) -> Task:
        task = self._get_or_404(task_id)
        if not is_admin(current_user) and current_user.id not in (task.assigned_to, task.assigned_by):
            raise AuthorizationError("You don't have permission to view this task")
        return task

    async def update_task(self, task_id: str, data: TaskUpdate, current_user: User) -> Task:
        task = self._get_or_404(task_id)
        if not is_admin(current_user) and current_user.id not in (task.assigned_to, task.assigned_by):
            raise AuthorizationError("You don't have permission to update this task")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "assigned_to" in changes:
            self._require_assignee(changes["assigned_to"])

        before = task.snapshot()
        previous_assignee = task.assigned_to
        task = self.tasks.update(task, **changes)
        after = task.snapshot()

        self.activity.log(
            current_user.id,
            ActivityType.TASK_UPDATED,
            f"Updated task: {task.title}",
            {"taskId": task.id, "before": before, "after": after},
        )

        if task.assigned_to and task.assigned_to != previous_assignee and task.assigned_to != current_user.id:
            self.activity.log(
                current_user.id,
                ActivityType.TASK_ASSIGNED,
                f"Assigned task: {task.title}",
                {"taskId": task.id, "assignedTo": task.assigned_to},
            )
            await self._notify_assignee(task)

        task = self._get_or_404(task.id)
        await self._emit(dump(TaskOut, task), task.assigned_to, current_user, "updated")
        return task

    async def update_status(self, task_id: str, data: TaskStatusUpdate, current_user: User) -> Task:
        task = self._get_or_404(task_id)
        if not is_admin(current_user) and task.assigned_to != current_user.id:
            raise AuthorizationError("You can only update status of tasks assigned to you")

        old_status = task.status
        task = self.tasks.update_status(task, data.status, data.actual_time)

        activity_type = ActivityType.TASK_COMPLETED if data.status == TaskStatus.COMPLETED else ActivityType.TASK_UPDATED
        self.activity.log(
            current_user.id,
            activity_type,
            f"Changed task status to {data.status.value}: {task.title}",
            {
                "taskId": task.id,
                "oldStatus": old_status.value,
                "newStatus": data.status.value,
                "actualTime": data.actual_time,
            },
        )

        task = self._get_or_404(task.id)
        await self._emit(dump(TaskOut, task), task.assigned_to, current_user, "status-changed")
        return task

    async def delete_task(self, task_id: str, current_user: User) -> None:
        task = self._get_or_404(task_id)
        if not is_admin(current_user) and task.assigned_by != current_user.id:
            raise AuthorizationError("You don't have permission to delete this task")

        payload = dump(TaskOut, task)
        snapshot = task.snapshot()
        assignee_id = task.assigned_to
        self.tasks.delete(task)

        self.activity.log(
            current_user.id,
            ActivityType.TASK_DELETED,
            f"Deleted task: {payload['title']}",
            {"taskId": task_id, "before": snapshot},
        )
        await self._emit(payload, assignee_id, current_user, "deleted")

    def mark_overdue(self) -> List[str]:
        task_ids = self.tasks.mark_overdue()
        if task_ids:
            logger.info(f"Marked {len(task_ids)} task(s) as overdue")
        return task_ids

    def get_stats(self, current_user: User) -> Dict[str, Any]:
        """Sweep overdue tasks first so the counts reflect the current time"""
        self.mark_overdue()
        stats = self.tasks.get_stats(current_user.id, current_user.role)
        self.activity.log(current_user.id, ActivityType.DASHBOARD_VIEWED, "Viewed dashboard stats")
        return stats
