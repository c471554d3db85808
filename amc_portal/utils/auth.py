# amc_portal/utils/auth.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from amc_portal.config import Settings
from amc_portal.database import get_db
from amc_portal.exceptions import AuthenticationError, AuthorizationError
from amc_portal.models import User, UserRole
from amc_portal.repositories import UserRepository
from amc_portal.utils.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def user_from_token(db: Session, token: Optional[str], settings: Optional[Settings] = None) -> User:
    """Resolve a bearer token to an active user or raise AuthenticationError"""
    if not token:
        raise AuthenticationError("Access token is required")

    payload = decode_access_token(token, settings)
    user = UserRepository(db).find_by_id(payload["userId"])
    if user is None:
        raise AuthenticationError("User not found or inactive")
    return user


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    return user_from_token(db, token, getattr(request.app.state, "settings", None))


def require_roles(*roles: UserRole):
    """Dependency factory: the current user's role must be one of ``roles``"""

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise AuthorizationError("Insufficient permissions")
        return current_user

    return checker


require_admin = require_roles(UserRole.ADMIN)
