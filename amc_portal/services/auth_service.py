# amc_portal/services/auth_service.py
import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from amc_portal.config import SecurityConfig, Settings, get_settings
from amc_portal.exceptions import AuthenticationError, ConflictError, ValidationError
from amc_portal.models import ActivityType, User, UserRole
from amc_portal.repositories import UserRepository
from amc_portal.schemas import PasswordChange, UserCreate, UserUpdate
from amc_portal.services.activity_logger import ActivityLogger
from amc_portal.utils.security import (
    create_token_pair,
    decode_refresh_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session, request: Optional[Request] = None, settings: Optional[Settings] = None):
        self.db = db
        if settings is None and request is not None:
            settings = getattr(request.app.state, "settings", None)
        self.settings = settings or get_settings()
        self.users = UserRepository(db)
        self.activity = ActivityLogger(db, request)

    def login(self, email: str, password: str, role: UserRole) -> dict:
        """Verify credentials and issue a token pair.

        The requested role has to equal the stored one; an admin logging in
        as "user" is rejected rather than downgraded.
        """
        user = self.users.find_by_email(email.lower())
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        if user.role != role:
            raise AuthenticationError("Invalid role for this user")

        user = self.users.update_last_login(user)
        tokens = create_token_pair(user, self.settings)
        self.activity.log(user.id, ActivityType.LOGIN, "User logged in", {"role": user.role.value})
        logger.info(f"User {user.email} logged in")
        return {"user": user, **tokens}

    def register(self, data: UserCreate) -> dict:
        email = data.email.lower()
        if self.users.find_by_email(email, include_inactive=True) is not None:
            raise ConflictError("User with this email already exists")

        user = self.users.create(
            name=data.name,
            email=email,
            password_hash=hash_password(data.password, self.settings),
            role=data.role,
            post=data.post,
            department=data.department,
        )
        tokens = create_token_pair(user, self.settings)
        self.activity.log(
            user.id,
            ActivityType.USER_REGISTERED,
            "User registered",
            {"role": user.role.value, "department": user.department},
        )
        logger.info(f"Registered {user.role.value} {user.email}")
        return {"user": user, **tokens}

    def refresh(self, refresh_token: Optional[str]) -> dict:
        if not refresh_token:
            raise AuthenticationError("Refresh token is required")

        payload = decode_refresh_token(refresh_token, self.settings)
        user = self.users.find_by_id(payload["userId"])
        if user is None:
            raise AuthenticationError("User not found")
        return create_token_pair(user, self.settings)

    def update_profile(self, user: User, data: UserUpdate, actor: Optional[User] = None) -> User:
        """Apply profile changes; ``actor`` is the admin when editing someone else"""
        actor = actor or user
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        user = self.users.update_profile(user, **changes)

        if actor.id == user.id:
            description = "Updated profile"
            metadata = {"updates": changes}
        else:
            description = f"Admin updated user profile: {user.name}"
            metadata = {"targetUserId": user.id, "updates": changes}
        self.activity.log(actor.id, ActivityType.PROFILE_UPDATED, description, metadata)
        return user

    def change_password(self, user: User, data: PasswordChange) -> None:
        if not verify_password(data.current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")
        if len(data.new_password) < SecurityConfig.PASSWORD["min_length"]:
            raise ValidationError(
                f"New password must be at least {SecurityConfig.PASSWORD['min_length']} characters"
            )

        self.users.change_password(user, hash_password(data.new_password, self.settings))
        self.activity.log(user.id, ActivityType.PASSWORD_CHANGED, "Password changed")

    def logout(self, user: User) -> None:
        # tokens are stateless; logging out only leaves an audit entry
        self.activity.log(user.id, ActivityType.LOGOUT, "User logged out")
