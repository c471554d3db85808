# amc_portal/models/user.py
from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from amc_portal.database import Base
from amc_portal.models._columns import enum_column, new_id
from amc_portal.utils.datetime import utc_now
from amc_portal.models.enums import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(enum_column(UserRole, "user_role"), nullable=False, index=True)
    post = Column(String(100), nullable=True)
    department = Column(String(100), nullable=True)
    avatar_url = Column(String(255), nullable=True)
    join_date = Column(DateTime, default=utc_now, nullable=False)
    last_login = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    assigned_tasks = relationship("Task", back_populates="assignee", foreign_keys="Task.assigned_to")
    created_tasks = relationship("Task", back_populates="assigner", foreign_keys="Task.assigned_by")
    notifications = relationship("Notification", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
