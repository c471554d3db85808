# amc_portal/services/activity_logger.py
import logging
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from amc_portal.models import Activity, ActivityType
from amc_portal.repositories import ActivityRepository
from amc_portal.utils.responses import client_info

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Writes audit entries. A failed write is logged and never reaches the caller."""

    def __init__(self, db: Session, request: Optional[Request] = None):
        self.db = db
        self.request = request

    def log(
        self,
        user_id: Optional[str],
        activity_type: ActivityType,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Activity]:
        try:
            return ActivityRepository(self.db).create(
                user_id=user_id,
                activity_type=activity_type,
                description=description,
                metadata=metadata,
                **client_info(self.request),
            )
        except Exception as e:
            logger.error(f"Failed to log {activity_type.value} activity for user {user_id}: {e}")
            self.db.rollback()
            return None
