from .common import CamelModel
from .user import UserCreate, UserLogin, UserUpdate, UserOut, PasswordChange
from .tokens import TokenPair, AuthResult, RefreshRequest
from .task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskOut, TaskStats
from .notification import NotificationCreate, NotificationOut
from .activity import ActivityOut, ActivityStat
from .remark import RemarkCreate, RemarkResponse, RemarkOut
