# amc_portal/models/notification.py
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from amc_portal.database import Base
from amc_portal.models._columns import enum_column, new_id
from amc_portal.utils.datetime import utc_now
from amc_portal.models.enums import NotificationType, TaskPriority


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(enum_column(NotificationType, "notification_type"), default=NotificationType.SYSTEM_ALERT, nullable=False)
    priority = Column(enum_column(TaskPriority, "notification_priority"), default=TaskPriority.MEDIUM, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    is_read = Column(Boolean, default=False, nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, default=dict, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, title='{self.title}', type='{self.type}')>"
