# amc_portal/repositories/activity_repo.py
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from amc_portal.models import Activity, ActivityType
from amc_portal.repositories.base import BaseRepository


class ActivityRepository(BaseRepository):
    """Activities are append-only: there is no update or delete here"""

    def create(
        self,
        *,
        user_id: Optional[str],
        activity_type: ActivityType,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Activity:
        activity = Activity(
            user_id=user_id,
            activity_type=activity_type,
            description=description,
            meta=metadata or {},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return self._save(activity)

    def find_all(
        self,
        *,
        user_id: Optional[str] = None,
        activity_type: Optional[ActivityType] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Activity]:
        query = self.db.query(Activity).options(joinedload(Activity.user))

        if user_id:
            query = query.filter(Activity.user_id == user_id)
        if activity_type:
            query = query.filter(Activity.activity_type == activity_type)
        if start_date:
            query = query.filter(Activity.created_at >= start_date)
        if end_date:
            query = query.filter(Activity.created_at <= end_date)

        query = query.order_by(Activity.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def stats(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Counts grouped by activity type and calendar day, newest day first"""
        day = func.date(Activity.created_at)
        query = self.db.query(Activity.activity_type, day, func.count(Activity.id))
        if user_id:
            query = query.filter(Activity.user_id == user_id)

        rows = query.group_by(Activity.activity_type, day).order_by(day.desc()).all()
        return [
            {
                "activity_type": activity_type,
                "date": date.fromisoformat(str(activity_day)) if activity_day else None,
                "count": count,
            }
            for activity_type, activity_day, count in rows
        ]
