# amc_portal/schemas/task.py
from typing import Optional

from pydantic import Field, field_validator

from amc_portal.models.enums import TaskCategory, TaskPriority, TaskStatus
from amc_portal.schemas.common import CamelModel, InputDateTime, UTCDateTime


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: TaskCategory
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[str] = None
    due_date: Optional[InputDateTime] = None
    estimated_time: Optional[int] = Field(None, ge=1)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class TaskUpdate(CamelModel):
    """Partial update: omitted or null fields keep their stored value"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[TaskCategory] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[str] = None
    due_date: Optional[InputDateTime] = None
    estimated_time: Optional[int] = Field(None, ge=1)
    remarks: Optional[str] = None


class TaskStatusUpdate(CamelModel):
    status: TaskStatus
    actual_time: Optional[int] = Field(None, ge=0)


class TaskOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    category: TaskCategory
    status: TaskStatus
    priority: TaskPriority
    assigned_to: Optional[str] = None
    assigned_by: Optional[str] = None
    assigned_to_name: Optional[str] = None
    assigned_to_email: Optional[str] = None
    assigned_by_name: Optional[str] = None
    assigned_by_email: Optional[str] = None
    due_date: Optional[UTCDateTime] = None
    estimated_time: Optional[int] = None
    actual_time: Optional[int] = None
    remarks: Optional[str] = None
    created_at: UTCDateTime
    updated_at: Optional[UTCDateTime] = None
    completed_at: Optional[UTCDateTime] = None


class TaskStats(CamelModel):
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    in_progress_tasks: int
    overdue_tasks: int
    compliance_rate: int
