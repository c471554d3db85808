from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from amc_portal.database import get_db
from amc_portal.models import TaskCategory, TaskPriority, TaskStatus, User
from amc_portal.schemas import TaskCreate, TaskOut, TaskStats, TaskStatusUpdate, TaskUpdate
from amc_portal.services import TaskService
from amc_portal.services.realtime import RealtimeChannel, get_realtime
from amc_portal.utils.auth import get_current_user
from amc_portal.utils.responses import dump, success

router = APIRouter()


# registered before "/{task_id}" so "stats" is not read as an id
@router.get("/stats")
def get_task_stats(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stats = TaskService(db, request=request).get_stats(current_user)
    return success(dump(TaskStats, stats))


@router.get("")
def get_tasks(
    status: Optional[TaskStatus] = None,
    category: Optional[TaskCategory] = None,
    priority: Optional[TaskPriority] = None,
    search: Optional[str] = None,
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    limit: int = Query(50, ge=1, le=500),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Filtered task list; users only get their own tasks. Limit-only: ``page`` is echoed back."""
    tasks = TaskService(db).list_tasks(
        current_user,
        status=status,
        category=category,
        priority=priority,
        search=search,
        assigned_to=assigned_to,
        limit=limit,
    )
    return success(
        dump(TaskOut, tasks),
        pagination={"page": page, "limit": limit, "total": len(tasks)},
    )


@router.post("", status_code=201)
async def create_task(
    payload: TaskCreate,
    request: Request,
    db: Session = Depends(get_db),
    realtime: RealtimeChannel = Depends(get_realtime),
    current_user: User = Depends(get_current_user),
):
    task = await TaskService(db, realtime, request).create_task(payload, current_user)
    return success(dump(TaskOut, task), "Task created successfully")


@router.get("/{task_id}")
def get_task(task_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    task = TaskService(db).get_task(task_id, current_user)
    return success(dump(TaskOut, task))


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    request: Request,
    db: Session = Depends(get_db),
    realtime: RealtimeChannel = Depends(get_realtime),
    current_user: User = Depends(get_current_user),
):
    task = await TaskService(db, realtime, request).update_task(task_id, payload, current_user)
    return success(dump(TaskOut, task), "Task updated successfully")


@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: str,
    payload: TaskStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    realtime: RealtimeChannel = Depends(get_realtime),
    current_user: User = Depends(get_current_user),
):
    task = await TaskService(db, realtime, request).update_status(task_id, payload, current_user)
    return success(dump(TaskOut, task), "Task status updated successfully")


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    request: Request,
    db: Session = Depends(get_db),
    realtime: RealtimeChannel = Depends(get_realtime),
    current_user: User = Depends(get_current_user),
):
    await TaskService(db, realtime, request).delete_task(task_id, current_user)
    return success(message="Task deleted successfully")
