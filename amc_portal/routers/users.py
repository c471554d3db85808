from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from amc_portal.database import get_db
from amc_portal.exceptions import NotFoundError, ValidationError
from amc_portal.models import ActivityType, User, UserRole
from amc_portal.repositories import UserRepository
from amc_portal.schemas import UserOut, UserUpdate
from amc_portal.services import ActivityLogger, AuthService
from amc_portal.utils.auth import require_admin
from amc_portal.utils.responses import dump, success

# every route here is admin only
router = APIRouter(dependencies=[Depends(require_admin)])


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = UserRepository(db).find_by_id(user_id, include_inactive=True)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("")
def get_users(role: Optional[UserRole] = None, db: Session = Depends(get_db)):
    users = UserRepository(db).find_all(role)
    return success(dump(UserOut, users))


@router.get("/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db)):
    return success(dump(UserOut, _get_user_or_404(db, user_id)))


@router.put("/{user_id}")
def update_user(
    user_id: str,
    payload: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = _get_user_or_404(db, user_id)
    user = AuthService(db, request).update_profile(user, payload, actor=current_user)
    return success(dump(UserOut, user), "User updated successfully")


@router.delete("/{user_id}")
def deactivate_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if user_id == current_user.id:
        raise ValidationError("You cannot deactivate your own account")

    user = _get_user_or_404(db, user_id)
    UserRepository(db).deactivate(user)
    ActivityLogger(db, request).log(
        current_user.id,
        ActivityType.USER_DEACTIVATED,
        f"Admin deactivated user: {user.name}",
        {"targetUserId": user.id},
    )
    return success(message="User deactivated successfully")
