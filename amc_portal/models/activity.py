# amc_portal/models/activity.py
from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from amc_portal.database import Base
from amc_portal.models._columns import enum_column, new_id
from amc_portal.utils.datetime import utc_now
from amc_portal.models.enums import ActivityType


class Activity(Base):
    """Append-only audit entry"""

    __tablename__ = "user_activities"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    activity_type = Column(enum_column(ActivityType, "activity_type"), nullable=False, index=True)
    description = Column(Text, nullable=True)
    meta = Column("metadata", JSON, default=dict, nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)

    user = relationship("User")

    @property
    def user_name(self):
        return self.user.name if self.user else None

    @property
    def user_email(self):
        return self.user.email if self.user else None
