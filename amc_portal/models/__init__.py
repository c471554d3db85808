from .enums import (
    ActivityType,
    NotificationType,
    RemarkType,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    UserRole,
)
from .user import User
from .task import Task
from .notification import Notification
from .activity import Activity
from .remark import Remark
