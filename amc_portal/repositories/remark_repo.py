# amc_portal/repositories/remark_repo.py
from typing import List, Optional

from sqlalchemy.orm import joinedload

from amc_portal.models import Remark, RemarkType
from amc_portal.repositories.base import BaseRepository
from amc_portal.utils.datetime import utc_now


class RemarkRepository(BaseRepository):

    def create(
        self,
        *,
        user_id: str,
        message: str,
        type: RemarkType = RemarkType.FEEDBACK,
        task_id: Optional[str] = None,
    ) -> Remark:
        remark = Remark(user_id=user_id, message=message, type=type, task_id=task_id)
        return self._save(remark)

    def find_by_id(self, remark_id: str) -> Optional[Remark]:
        return self.db.query(Remark).filter(Remark.id == remark_id).first()

    def find_all(
        self,
        *,
        user_id: Optional[str] = None,
        task_id: Optional[str] = None,
        type: Optional[RemarkType] = None,
    ) -> List[Remark]:
        query = self.db.query(Remark).options(joinedload(Remark.user))
        if user_id:
            query = query.filter(Remark.user_id == user_id)
        if task_id:
            query = query.filter(Remark.task_id == task_id)
        if type:
            query = query.filter(Remark.type == type)
        return query.order_by(Remark.created_at.desc()).all()

    def respond(self, remark: Remark, response: str) -> Remark:
        remark.admin_response = response
        remark.responded_at = utc_now()
        return self._save(remark)

    def delete(self, remark: Remark) -> None:
        self.db.delete(remark)
        self.db.commit()
