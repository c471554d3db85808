from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from amc_portal.database import get_db
from amc_portal.exceptions import AuthorizationError, NotFoundError, ValidationError
from amc_portal.models import ActivityType, RemarkType, User, UserRole
from amc_portal.repositories import RemarkRepository, TaskRepository
from amc_portal.schemas import RemarkCreate, RemarkOut, RemarkResponse
from amc_portal.services import ActivityLogger
from amc_portal.utils.auth import get_current_user, require_admin
from amc_portal.utils.responses import dump, success

router = APIRouter()


def _get_remark_or_404(repo: RemarkRepository, remark_id: str):
    remark = repo.find_by_id(remark_id)
    if remark is None:
        raise NotFoundError("Remark not found")
    return remark


@router.get("")
def get_remarks(
    user_id: Optional[str] = Query(None, alias="userId"),
    task_id: Optional[str] = Query(None, alias="taskId"),
    type: Optional[RemarkType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if current_user.role != UserRole.ADMIN:
        user_id = current_user.id
    remarks = RemarkRepository(db).find_all(user_id=user_id, task_id=task_id, type=type)
    return success(dump(RemarkOut, remarks))


@router.post("", status_code=201)
def add_remark(
    payload: RemarkCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.task_id and TaskRepository(db).find_by_id(payload.task_id) is None:
        raise ValidationError("Task not found")

    remark = RemarkRepository(db).create(
        user_id=current_user.id,
        message=payload.message,
        type=payload.type,
        task_id=payload.task_id,
    )
    ActivityLogger(db, request).log(
        current_user.id,
        ActivityType.REMARK_ADDED,
        f"Added {remark.type.value} remark",
        {"remarkId": remark.id, "taskId": remark.task_id},
    )
    return success(dump(RemarkOut, remark), "Remark added successfully")


@router.patch("/{remark_id}/respond")
def respond_to_remark(
    remark_id: str,
    payload: RemarkResponse,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    repo = RemarkRepository(db)
    remark = repo.respond(_get_remark_or_404(repo, remark_id), payload.response)
    return success(dump(RemarkOut, remark), "Response saved successfully")


@router.delete("/{remark_id}")
def delete_remark(remark_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    repo = RemarkRepository(db)
    remark = _get_remark_or_404(repo, remark_id)
    if current_user.role != UserRole.ADMIN and remark.user_id != current_user.id:
        raise AuthorizationError("You can only delete your own remarks")

    repo.delete(remark)
    return success(message="Remark deleted successfully")
