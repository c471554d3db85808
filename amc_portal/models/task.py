# amc_portal/models/task.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from amc_portal.database import Base
from amc_portal.models._columns import enum_column, new_id
from amc_portal.utils.datetime import utc_now
from amc_portal.models.enums import TaskCategory, TaskPriority, TaskStatus


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(enum_column(TaskCategory, "task_category"), nullable=False)
    status = Column(enum_column(TaskStatus, "task_status"), default=TaskStatus.PENDING, nullable=False, index=True)
    priority = Column(enum_column(TaskPriority, "task_priority"), default=TaskPriority.MEDIUM, nullable=False)
    assigned_to = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    assigned_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    due_date = Column(DateTime, nullable=True, index=True)
    estimated_time = Column(Integer, nullable=True)  # minutes
    actual_time = Column(Integer, nullable=True)  # minutes
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    assignee = relationship("User", foreign_keys=[assigned_to], back_populates="assigned_tasks")
    assigner = relationship("User", foreign_keys=[assigned_by], back_populates="created_tasks")

    # joined names exposed the way the task list renders them
    @property
    def assigned_to_name(self):
        return self.assignee.name if self.assignee else None

    @property
    def assigned_to_email(self):
        return self.assignee.email if self.assignee else None

    @property
    def assigned_by_name(self):
        return self.assigner.name if self.assigner else None

    @property
    def assigned_by_email(self):
        return self.assigner.email if self.assigner else None

    def snapshot(self) -> dict:
        """Plain copy of the fields activity entries record before/after a change"""
        return {
            "title": self.title,
            "status": self.status.value if self.status else None,
            "priority": self.priority.value if self.priority else None,
            "category": self.category.value if self.category else None,
            "assignedTo": self.assigned_to,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
        }

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status='{self.status}')>"
