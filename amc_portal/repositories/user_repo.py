# amc_portal/repositories/user_repo.py
from typing import List, Optional

from amc_portal.models import User, UserRole
from amc_portal.repositories.base import BaseRepository
from amc_portal.utils.datetime import utc_now


class UserRepository(BaseRepository):

    def create(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole,
        post: Optional[str] = None,
        department: Optional[str] = None,
    ) -> User:
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            post=post,
            department=department,
        )
        return self._save(user)

    def find_by_email(self, email: str, include_inactive: bool = False) -> Optional[User]:
        query = self.db.query(User).filter(User.email == email)
        if not include_inactive:
            query = query.filter(User.is_active.is_(True))
        return query.first()

    def find_by_id(self, user_id: str, include_inactive: bool = False) -> Optional[User]:
        query = self.db.query(User).filter(User.id == user_id)
        if not include_inactive:
            query = query.filter(User.is_active.is_(True))
        return query.first()

    def find_all(self, role: Optional[UserRole] = None) -> List[User]:
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role)
        return query.order_by(User.created_at.desc()).all()

    def update_profile(self, user: User, **changes) -> User:
        """Apply the supplied profile fields; None leaves a field unchanged"""
        for field in ("name", "post", "department", "avatar_url"):
            value = changes.get(field)
            if value is not None:
                setattr(user, field, value)
        return self._save(user)

    def update_last_login(self, user: User) -> User:
        user.last_login = utc_now()
        return self._save(user)

    def change_password(self, user: User, password_hash: str) -> User:
        user.password_hash = password_hash
        return self._save(user)

    def deactivate(self, user: User) -> User:
        user.is_active = False
        return self._save(user)
