# amc_portal/client/mock_access.py
"""Offline implementation of DataAccess.

Mirrors the API's rules (role scoping, ownership checks, side effects on
task assignment) against MockDataStore so the UI behaves the same offline.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from amc_portal.client.base import Record
from amc_portal.client.mock_store import MockDataStore
from amc_portal.config import SecurityConfig
from amc_portal.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from amc_portal.models.enums import (
    NotificationType,
    RemarkType,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    UserRole,
)
from amc_portal.utils.datetime import isoformat_utc, parse_iso, utc_now
from amc_portal.utils.stats import compliance_rate

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "post", "department", "avatarUrl")
TASK_FIELDS = ("title", "description", "category", "priority", "assignedTo", "dueDate", "estimatedTime", "remarks")


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> str:
    return isoformat_utc(utc_now())


def _enum_value(enum_cls, value: Any, field: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{field} must be one of: {allowed}")


def _due_date(value: Any) -> str:
    """Normalize an ISO-8601 due date to the stored UTC form"""
    parsed = None
    if isinstance(value, str):
        try:
            parsed = parse_iso(value)
        except ValueError:
            pass
    if parsed is None:
        raise ValidationError("dueDate must be an ISO-8601 date")
    return isoformat_utc(parsed)


class MockDataAccess:
    def __init__(self, store: MockDataStore):
        self.store = store

    # Helpers

    def _current_user(self) -> Record:
        user = self.store.get_current_user()
        if user is None:
            raise AuthenticationError("Access token is required")
        return user

    def _is_admin(self, user: Record) -> bool:
        return user.get("role") == UserRole.ADMIN.value

    def _find_user(self, user_id: Optional[str], include_inactive: bool = False) -> Optional[Record]:
        for user in self.store.get_users():
            if user["id"] == user_id and (include_inactive or user.get("isActive", True)):
                return user
        return None

    def _with_people(self, task: Record, users: List[Record]) -> Record:
        by_id = {user["id"]: user for user in users}
        assignee = by_id.get(task.get("assignedTo")) or {}
        assigner = by_id.get(task.get("assignedBy")) or {}
        return {
            **task,
            "assignedToName": assignee.get("name"),
            "assignedToEmail": assignee.get("email"),
            "assignedByName": assigner.get("name"),
            "assignedByEmail": assigner.get("email"),
        }

    def _get_task_record(self, tasks: List[Record], task_id: str) -> Record:
        for task in tasks:
            if task["id"] == task_id:
                return task
        raise NotFoundError("Task not found")

    def _notify(self, user_id: str, title: str, message: str, type: NotificationType,
                priority: str = TaskPriority.MEDIUM.value, metadata: Optional[Dict] = None) -> Record:
        notification = {
            "id": _new_id(),
            "title": title,
            "message": message,
            "type": type.value,
            "priority": priority,
            "userId": user_id,
            "isRead": False,
            "metadata": metadata or {},
            "createdAt": _now(),
        }
        notifications = self.store.get_notifications()
        notifications.append(notification)
        self.store.save_notifications(notifications)
        return notification

    # Auth

    def login(self, email: str, password: str, role: str) -> Record:
        email = email.lower()
        credentials = self.store.get_credentials()
        user = next(
            (u for u in self.store.get_users() if u["email"] == email and u.get("isActive", True)),
            None,
        )
        if user is None or credentials.get(email) != password:
            raise AuthenticationError("Invalid credentials")
        if user["role"] != role:
            raise AuthenticationError("Invalid role for this user")

        user = dict(user, lastLogin=_now())
        self.store.save_users([user if u["id"] == user["id"] else u for u in self.store.get_users()])
        self.store.set_current_user(user)
        return {"user": user, "accessToken": None, "refreshToken": None}

    def signup(self, name: str, email: str, password: str, role: str = "user",
               post: Optional[str] = None, department: Optional[str] = None) -> Record:
        email = email.lower()
        if len(name.strip()) < SecurityConfig.PASSWORD["name_min_length"]:
            raise ValidationError("Name must be at least 2 characters")
        if len(password) < SecurityConfig.PASSWORD["min_length"]:
            raise ValidationError("Password must be at least 6 characters")

        credentials = self.store.get_credentials()
        users = self.store.get_users()
        if email in credentials or any(u["email"] == email for u in users):
            raise ConflictError("User with this email already exists")

        now = _now()
        user = {
            "id": _new_id(),
            "name": name.strip(),
            "email": email,
            "role": _enum_value(UserRole, role, "role"),
            "post": post or "Staff",
            "department": department or "General",
            "joinDate": now,
            "isActive": True,
            "createdAt": now,
        }
        users.append(user)
        credentials[email] = password
        self.store.save_users(users)
        self.store.save_credentials(credentials)
        self.store.set_current_user(user)
        return {"user": user, "accessToken": None, "refreshToken": None}

    def get_current_user(self) -> Record:
        return self._current_user()

    def update_profile(self, **changes: Any) -> Record:
        current = self._current_user()
        updates = {k: v for k, v in changes.items() if k in PROFILE_FIELDS and v is not None}
        user = {**current, **updates}
        self.store.save_users([user if u["id"] == user["id"] else u for u in self.store.get_users()])
        self.store.set_current_user(user)
        return user

    def change_password(self, current_password: str, new_password: str) -> None:
        user = self._current_user()
        credentials = self.store.get_credentials()
        if credentials.get(user["email"]) != current_password:
            raise AuthenticationError("Current password is incorrect")
        if len(new_password) < SecurityConfig.PASSWORD["min_length"]:
            raise ValidationError("New password must be at least 6 characters")
        credentials[user["email"]] = new_password
        self.store.save_credentials(credentials)

    def logout(self) -> None:
        self.store.clear_current_user()

    def get_users(self, role: Optional[str] = None) -> List[Record]:
        users = self.store.get_users()
        if role:
            users = [u for u in users if u["role"] == role]
        return users

    # Tasks

    def get_tasks(self, status: Optional[str] = None, category: Optional[str] = None,
                  priority: Optional[str] = None, search: Optional[str] = None,
                  assigned_to: Optional[str] = None, limit: Optional[int] = 50) -> List[Record]:
        current = self._current_user()
        if not self._is_admin(current):
            assigned_to = current["id"]

        tasks = self.store.get_tasks()
        if assigned_to:
            tasks = [t for t in tasks if t.get("assignedTo") == assigned_to]
        if status:
            tasks = [t for t in tasks if t["status"] == status]
        if category:
            tasks = [t for t in tasks if t["category"] == category]
        if priority:
            tasks = [t for t in tasks if t["priority"] == priority]
        if search:
            needle = search.lower()
            tasks = [
                t for t in tasks
                if needle in (t.get("title") or "").lower() or needle in (t.get("description") or "").lower()
            ]

        tasks = sorted(tasks, key=lambda t: t.get("createdAt") or "", reverse=True)
        if limit:
            tasks = tasks[:limit]
        users = self.store.get_users()
        return [self._with_people(t, users) for t in tasks]

    def get_task(self, task_id: str) -> Record:
        current = self._current_user()
        task = self._get_task_record(self.store.get_tasks(), task_id)
        if not self._is_admin(current) and current["id"] not in (task.get("assignedTo"), task.get("assignedBy")):
            raise AuthorizationError("You don't have permission to view this task")
        return self._with_people(task, self.store.get_users())

    def create_task(self, task: Record) -> Record:
        current = self._current_user()
        if not (task.get("title") or "").strip():
            raise ValidationError("Title is required")
        category = TaskCategory(_enum_value(TaskCategory, task.get("category"), "category"))
        priority = _enum_value(TaskPriority, task.get("priority") or TaskPriority.MEDIUM.value, "priority")

        assigned_to = task.get("assignedTo")
        if assigned_to and self._find_user(assigned_to) is None:
            raise ValidationError("Assigned user not found")

        now = utc_now()
        due_date = task.get("dueDate")
        record = {
            "id": _new_id(),
            "title": task["title"].strip(),
            "description": task.get("description"),
            "category": category.value,
            "status": TaskStatus.PENDING.value,
            "priority": priority,
            "assignedTo": assigned_to,
            "assignedBy": current["id"],
            "dueDate": _due_date(due_date) if due_date else isoformat_utc(category.default_due_date(now)),
            "estimatedTime": task.get("estimatedTime"),
            "actualTime": None,
            "remarks": None,
            "createdAt": isoformat_utc(now),
            "updatedAt": isoformat_utc(now),
            "completedAt": None,
        }
        tasks = self.store.get_tasks()
        tasks.append(record)
        self.store.save_tasks(tasks)

        if assigned_to and assigned_to != current["id"]:
            self._notify(
                assigned_to,
                "New Task Assigned",
                f"You have been assigned a new {category.value} task: {record['title']}",
                NotificationType.TASK_ASSIGNED,
                priority=priority,
                metadata={"taskId": record["id"], "taskTitle": record["title"], "dueDate": record["dueDate"]},
            )
        return self._with_people(record, self.store.get_users())

    def update_task(self, task_id: str, changes: Record) -> Record:
        current = self._current_user()
        tasks = self.store.get_tasks()
        task = self._get_task_record(tasks, task_id)
        if not self._is_admin(current) and current["id"] not in (task.get("assignedTo"), task.get("assignedBy")):
            raise AuthorizationError("You don't have permission to update this task")

        updates = {k: v for k, v in changes.items() if k in TASK_FIELDS and v is not None}
        if "category" in updates:
            updates["category"] = _enum_value(TaskCategory, updates["category"], "category")
        if "priority" in updates:
            updates["priority"] = _enum_value(TaskPriority, updates["priority"], "priority")
        if "dueDate" in updates:
            updates["dueDate"] = _due_date(updates["dueDate"])
        if "assignedTo" in updates and self._find_user(updates["assignedTo"]) is None:
            raise ValidationError("Assigned user not found")

        previous_assignee = task.get("assignedTo")
        task.update(updates, updatedAt=_now())
        self.store.save_tasks(tasks)

        new_assignee = task.get("assignedTo")
        if new_assignee and new_assignee != previous_assignee and new_assignee != current["id"]:
            self._notify(
                new_assignee,
                "New Task Assigned",
                f"You have been assigned a new {task['category']} task: {task['title']}",
                NotificationType.TASK_ASSIGNED,
                priority=task["priority"],
                metadata={"taskId": task["id"], "taskTitle": task["title"], "dueDate": task.get("dueDate")},
            )
        return self._with_people(task, self.store.get_users())

    def update_task_status(self, task_id: str, status: str, actual_time: Optional[int] = None) -> Record:
        current = self._current_user()
        status = _enum_value(TaskStatus, status, "status")
        tasks = self.store.get_tasks()
        task = self._get_task_record(tasks, task_id)
        if not self._is_admin(current) and task.get("assignedTo") != current["id"]:
            raise AuthorizationError("You can only update status of tasks assigned to you")

        now = _now()
        task.update(status=status, updatedAt=now)
        if status == TaskStatus.COMPLETED.value:
            task["completedAt"] = now
            if actual_time:
                task["actualTime"] = actual_time
        self.store.save_tasks(tasks)
        return self._with_people(task, self.store.get_users())

    def delete_task(self, task_id: str) -> None:
        current = self._current_user()
        tasks = self.store.get_tasks()
        task = self._get_task_record(tasks, task_id)
        if not self._is_admin(current) and task.get("assignedBy") != current["id"]:
            raise AuthorizationError("You don't have permission to delete this task")
        self.store.save_tasks([t for t in tasks if t["id"] != task_id])

    def mark_overdue(self) -> List[str]:
        now = utc_now()
        tasks = self.store.get_tasks()
        flipped = []
        for task in tasks:
            due = parse_iso(task.get("dueDate"))
            if due is None or task["status"] in (TaskStatus.COMPLETED.value, TaskStatus.OVERDUE.value):
                continue
            if due.replace(tzinfo=None) < now:
                task.update(status=TaskStatus.OVERDUE.value, updatedAt=isoformat_utc(now))
                flipped.append(task["id"])
        if flipped:
            self.store.save_tasks(tasks)
        return flipped

    def get_task_stats(self) -> Record:
        current = self._current_user()
        self.mark_overdue()
        tasks = self.store.get_tasks()
        if not self._is_admin(current):
            tasks = [t for t in tasks if t.get("assignedTo") == current["id"]]

        def count(status: TaskStatus) -> int:
            return sum(1 for t in tasks if t["status"] == status.value)

        total = len(tasks)
        completed = count(TaskStatus.COMPLETED)
        return {
            "totalTasks": total,
            "completedTasks": completed,
            "pendingTasks": count(TaskStatus.PENDING),
            "inProgressTasks": count(TaskStatus.IN_PROGRESS),
            "overdueTasks": count(TaskStatus.OVERDUE),
            "complianceRate": compliance_rate(completed, total),
        }

    # Notifications

    def get_notifications(self, limit: int = 50, unread_only: bool = False,
                          type: Optional[str] = None) -> List[Record]:
        current = self._current_user()
        notifications = [n for n in self.store.get_notifications() if n["userId"] == current["id"]]
        if unread_only:
            notifications = [n for n in notifications if not n.get("isRead")]
        if type:
            notifications = [n for n in notifications if n["type"] == type]
        notifications.sort(key=lambda n: n.get("createdAt") or "", reverse=True)
        return notifications[:limit] if limit else notifications

    def get_unread_count(self) -> int:
        current = self._current_user()
        return sum(
            1 for n in self.store.get_notifications() if n["userId"] == current["id"] and not n.get("isRead")
        )

    def create_notification(self, notification: Record) -> Record:
        current = self._current_user()
        user_id = notification.get("userId") or current["id"]
        if not self._is_admin(current) and user_id != current["id"]:
            raise AuthorizationError("You can only create notifications for yourself")
        if not notification.get("title") or not notification.get("message"):
            raise ValidationError("Title and message are required")
        return self._notify(
            user_id,
            notification["title"],
            notification["message"],
            NotificationType(_enum_value(NotificationType, notification.get("type") or "system-alert", "type")),
            priority=_enum_value(TaskPriority, notification.get("priority") or "medium", "priority"),
            metadata=notification.get("metadata"),
        )

    def mark_notification_read(self, notification_id: str) -> Record:
        current = self._current_user()
        notifications = self.store.get_notifications()
        for notification in notifications:
            if notification["id"] == notification_id and notification["userId"] == current["id"]:
                notification["isRead"] = True
                self.store.save_notifications(notifications)
                return notification
        raise NotFoundError("Notification not found")

    def mark_all_notifications_read(self) -> int:
        current = self._current_user()
        notifications = self.store.get_notifications()
        count = 0
        for notification in notifications:
            if notification["userId"] == current["id"] and not notification.get("isRead"):
                notification["isRead"] = True
                count += 1
        self.store.save_notifications(notifications)
        return count

    def delete_notification(self, notification_id: str) -> None:
        current = self._current_user()
        notifications = self.store.get_notifications()
        remaining = [
            n for n in notifications if not (n["id"] == notification_id and n["userId"] == current["id"])
        ]
        if len(remaining) == len(notifications):
            raise NotFoundError("Notification not found")
        self.store.save_notifications(remaining)

    # Remarks

    def get_remarks(self, user_id: Optional[str] = None, task_id: Optional[str] = None,
                    type: Optional[str] = None) -> List[Record]:
        current = self._current_user()
        if not self._is_admin(current):
            user_id = current["id"]
        remarks = self.store.get_remarks()
        if user_id:
            remarks = [r for r in remarks if r["userId"] == user_id]
        if task_id:
            remarks = [r for r in remarks if r.get("taskId") == task_id]
        if type:
            remarks = [r for r in remarks if r["type"] == type]
        return sorted(remarks, key=lambda r: r.get("createdAt") or "", reverse=True)

    def add_remark(self, message: str, type: str = "feedback", task_id: Optional[str] = None) -> Record:
        current = self._current_user()
        if not message or not message.strip():
            raise ValidationError("Message is required")
        remark = {
            "id": _new_id(),
            "userId": current["id"],
            "taskId": task_id,
            "message": message.strip(),
            "type": _enum_value(RemarkType, type, "type"),
            "createdAt": _now(),
            "adminResponse": None,
            "respondedAt": None,
        }
        remarks = self.store.get_remarks()
        remarks.append(remark)
        self.store.save_remarks(remarks)
        return remark

    def respond_to_remark(self, remark_id: str, response: str) -> Record:
        current = self._current_user()
        if not self._is_admin(current):
            raise AuthorizationError("Insufficient permissions")
        remarks = self.store.get_remarks()
        for remark in remarks:
            if remark["id"] == remark_id:
                remark.update(adminResponse=response, respondedAt=_now())
                self.store.save_remarks(remarks)
                return remark
        raise NotFoundError("Remark not found")

    def delete_remark(self, remark_id: str) -> None:
        current = self._current_user()
        remarks = self.store.get_remarks()
        remark = next((r for r in remarks if r["id"] == remark_id), None)
        if remark is None:
            raise NotFoundError("Remark not found")
        if not self._is_admin(current) and remark["userId"] != current["id"]:
            raise AuthorizationError("You can only delete your own remarks")
        self.store.save_remarks([r for r in remarks if r["id"] != remark_id])
