# amc_portal/schemas/activity.py
from datetime import date
from typing import Any, Dict, Optional

from pydantic import Field

from amc_portal.models.enums import ActivityType
from amc_portal.schemas.common import CamelModel, UTCDateTime


class ActivityOut(CamelModel):
    id: str
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    activity_type: ActivityType
    description: Optional[str] = None
    meta: Dict[str, Any] = Field(default_factory=dict, validation_alias="meta", serialization_alias="metadata")
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: UTCDateTime


class ActivityStat(CamelModel):
    activity_type: ActivityType
    count: int
    activity_date: date = Field(..., alias="date")
