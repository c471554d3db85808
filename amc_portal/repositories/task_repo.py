# amc_portal/repositories/task_repo.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, func, or_
from sqlalchemy.orm import joinedload

from amc_portal.models import Task, TaskCategory, TaskPriority, TaskStatus, UserRole
from amc_portal.repositories.base import BaseRepository
from amc_portal.utils.datetime import utc_now
from amc_portal.utils.stats import compliance_rate

OPEN_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)
UPDATABLE_FIELDS = (
    "title",
    "description",
    "category",
    "priority",
    "assigned_to",
    "due_date",
    "estimated_time",
    "remarks",
)


class TaskRepository(BaseRepository):

    def _with_people(self):
        return self.db.query(Task).options(joinedload(Task.assignee), joinedload(Task.assigner))

    def create(
        self,
        *,
        title: str,
        category: TaskCategory,
        assigned_by: str,
        description: Optional[str] = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        assigned_to: Optional[str] = None,
        due_date: Optional[datetime] = None,
        estimated_time: Optional[int] = None,
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            category=category,
            priority=priority,
            assigned_to=assigned_to,
            assigned_by=assigned_by,
            due_date=due_date,
            estimated_time=estimated_time,
        )
        return self._save(task)

    def find_by_id(self, task_id: str) -> Optional[Task]:
        return self._with_people().filter(Task.id == task_id).first()

    def find_all(
        self,
        *,
        assigned_to: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        category: Optional[TaskCategory] = None,
        priority: Optional[TaskPriority] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Task]:
        """Newest first; every supplied filter must match"""
        query = self._with_people()

        if assigned_to:
            query = query.filter(Task.assigned_to == assigned_to)
        if status:
            query = query.filter(Task.status == status)
        if category:
            query = query.filter(Task.category == category)
        if priority:
            query = query.filter(Task.priority == priority)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Task.title.ilike(pattern), Task.description.ilike(pattern)))

        query = query.order_by(Task.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def find_due_between(self, start: datetime, end: datetime) -> List[Task]:
        return (
            self.db.query(Task)
            .filter(
                Task.due_date >= start,
                Task.due_date <= end,
                Task.status.in_(OPEN_STATUSES),
                Task.assigned_to.isnot(None),
            )
            .all()
        )

    def find_by_ids(self, task_ids: List[str]) -> List[Task]:
        if not task_ids:
            return []
        return self.db.query(Task).filter(Task.id.in_(task_ids)).all()

    def update(self, task: Task, **changes) -> Task:
        for field in UPDATABLE_FIELDS:
            value = changes.get(field)
            if value is not None:
                setattr(task, field, value)
        return self._save(task)

    def update_status(self, task: Task, status: TaskStatus, actual_time: Optional[int] = None) -> Task:
        task.status = status
        if status == TaskStatus.COMPLETED:
            task.completed_at = utc_now()
            if actual_time:
                task.actual_time = actual_time
        return self._save(task)

    def delete(self, task: Task) -> None:
        self.db.delete(task)
        self.db.commit()

    def mark_overdue(self, now: Optional[datetime] = None) -> List[str]:
        """Flip past-due open tasks to overdue; returns the ids that changed.

        Completed and already-overdue tasks are never touched, so running it
        again right away changes nothing.
        """
        now = now or utc_now()
        past_due = (
            Task.due_date.isnot(None),
            Task.due_date < now,
            Task.status.notin_((TaskStatus.COMPLETED, TaskStatus.OVERDUE)),
        )
        task_ids = [row[0] for row in self.db.query(Task.id).filter(*past_due).all()]
        if not task_ids:
            return []

        self.db.query(Task).filter(Task.id.in_(task_ids), *past_due).update(
            {Task.status: TaskStatus.OVERDUE, Task.updated_at: now},
            synchronize_session=False,
        )
        self.db.commit()
        self.db.expire_all()
        return task_ids

    def get_stats(self, user_id: Optional[str] = None, role: Optional[UserRole] = None) -> dict:
        now = utc_now()
        query = self.db.query(
            func.count(Task.id),
            func.count(case((Task.status == TaskStatus.COMPLETED, 1))),
            func.count(case((Task.status == TaskStatus.PENDING, 1))),
            func.count(case((Task.status == TaskStatus.IN_PROGRESS, 1))),
            func.count(
                case(
                    (
                        or_(
                            Task.status == TaskStatus.OVERDUE,
                            (Task.due_date < now) & (Task.status != TaskStatus.COMPLETED),
                        ),
                        1,
                    )
                )
            ),
        )
        if role == UserRole.USER and user_id:
            query = query.filter(Task.assigned_to == user_id)

        total, completed, pending, in_progress, overdue = query.one()
        return {
            "total_tasks": total,
            "completed_tasks": completed,
            "pending_tasks": pending,
            "in_progress_tasks": in_progress,
            "overdue_tasks": overdue,
            "compliance_rate": compliance_rate(completed, total),
        }
