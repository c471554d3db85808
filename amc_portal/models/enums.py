# amc_portal/models/enums.py
from datetime import datetime, timedelta
import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


class TaskCategory(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def due_offset(self) -> timedelta:
        if self is TaskCategory.DAILY:
            return timedelta(days=1)
        if self is TaskCategory.WEEKLY:
            return timedelta(days=7)
        return timedelta(days=30)

    def default_due_date(self, now: datetime) -> datetime:
        return now + self.due_offset


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationType(str, enum.Enum):
    TASK_ASSIGNED = "task-assigned"
    TASK_REMINDER = "task-reminder"
    TASK_OVERDUE = "task-overdue"
    SYSTEM_ALERT = "system-alert"


class ActivityType(str, enum.Enum):
    LOGIN = "login"
    LOGOUT = "logout"
    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_COMPLETED = "task_completed"
    TASK_ASSIGNED = "task_assigned"
    TASK_DELETED = "task_deleted"
    PROFILE_UPDATED = "profile_updated"
    PASSWORD_CHANGED = "password_changed"
    REMARK_ADDED = "remark_added"
    NOTIFICATION_READ = "notification_read"
    DASHBOARD_VIEWED = "dashboard_viewed"
    USER_REGISTERED = "user_registered"
    USER_DEACTIVATED = "user_deactivated"


class RemarkType(str, enum.Enum):
    FEEDBACK = "feedback"
    ISSUE = "issue"
    SUGGESTION = "suggestion"
