from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from amc_portal.database import get_db
from amc_portal.models import ActivityType, User, UserRole
from amc_portal.repositories import ActivityRepository
from amc_portal.schemas import ActivityOut, ActivityStat
from amc_portal.utils.auth import get_current_user
from amc_portal.utils.datetime import to_naive_utc
from amc_portal.utils.responses import dump, success

router = APIRouter()


def _scope(current_user: User, user_id: Optional[str]) -> Optional[str]:
    """Admins may look at anyone (or everyone); users only at themselves"""
    if current_user.role == UserRole.ADMIN:
        return user_id
    return current_user.id


@router.get("")
def get_activities(
    limit: int = Query(50, ge=1, le=500),
    activity_type: Optional[ActivityType] = Query(None, alias="activityType"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    activities = ActivityRepository(db).find_all(
        user_id=_scope(current_user, user_id),
        activity_type=activity_type,
        start_date=to_naive_utc(start_date),
        end_date=to_naive_utc(end_date),
        limit=limit,
    )
    return success(dump(ActivityOut, activities))


@router.get("/stats")
def get_activity_stats(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stats = ActivityRepository(db).stats(_scope(current_user, user_id))
    return success(dump(ActivityStat, stats))
