from .realtime import RealtimeChannel
from .activity_logger import ActivityLogger
from .notification_service import NotificationService
from .task_service import TaskService
from .auth_service import AuthService
