# amc_portal/models/remark.py
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from amc_portal.database import Base
from amc_portal.models._columns import enum_column, new_id
from amc_portal.utils.datetime import utc_now
from amc_portal.models.enums import RemarkType


class Remark(Base):
    __tablename__ = "remarks"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    message = Column(Text, nullable=False)
    type = Column(enum_column(RemarkType, "remark_type"), default=RemarkType.FEEDBACK, nullable=False)
    admin_response = Column(Text, nullable=True)
    responded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    user = relationship("User")

    @property
    def user_name(self):
        return self.user.name if self.user else None
