# amc_portal/schemas/notification.py
from typing import Any, Dict, Optional

from pydantic import Field

from amc_portal.models.enums import NotificationType, TaskPriority
from amc_portal.schemas.common import CamelModel, UTCDateTime


class NotificationCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.SYSTEM_ALERT
    priority: TaskPriority = TaskPriority.MEDIUM
    user_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class NotificationOut(CamelModel):
    id: str
    title: str
    message: str
    type: NotificationType
    priority: TaskPriority
    user_id: str
    is_read: bool
    # read from the ORM attribute "meta", written as "metadata"
    meta: Dict[str, Any] = Field(default_factory=dict, validation_alias="meta", serialization_alias="metadata")
    created_at: UTCDateTime
