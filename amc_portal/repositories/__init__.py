from .user_repo import UserRepository
from .task_repo import TaskRepository
from .notification_repo import NotificationRepository
from .activity_repo import ActivityRepository
from .remark_repo import RemarkRepository
