# amc_portal/schemas/remark.py
from typing import Optional

from pydantic import Field

from amc_portal.models.enums import RemarkType
from amc_portal.schemas.common import CamelModel, UTCDateTime


class RemarkCreate(CamelModel):
    message: str = Field(..., min_length=1)
    type: RemarkType = RemarkType.FEEDBACK
    task_id: Optional[str] = None


class RemarkResponse(CamelModel):
    response: str = Field(..., min_length=1)


class RemarkOut(CamelModel):
    id: str
    user_id: str
    user_name: Optional[str] = None
    task_id: Optional[str] = None
    message: str
    type: RemarkType
    admin_response: Optional[str] = None
    responded_at: Optional[UTCDateTime] = None
    created_at: UTCDateTime
