# amc_portal/utils/security.py
"""Password hashing and JWT issuing/verification.

Passwords: bcrypt over a SHA-256 pre-hash, so inputs longer than bcrypt's
72-byte limit are not silently truncated.

Tokens: access and refresh tokens are signed with different keys and carry
a ``type`` claim, so one can never stand in for the other. Keys, lifetimes
and bcrypt cost come from the ``Settings`` passed in (the app's own settings
on the server), falling back to the environment.
"""

import base64
import hashlib
from datetime import datetime, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from amc_portal.config import SecurityConfig, Settings, get_settings
from amc_portal.exceptions import AuthenticationError
from amc_portal.models import User


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str, settings: Optional[Settings] = None) -> str:
    salt = bcrypt.gensalt(rounds=SecurityConfig.bcrypt_rounds(settings))
    return bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bool(bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8")))
    except (ValueError, TypeError):
        return False


def _claims(user: User, token_type: str) -> dict:
    return {
        "sub": user.id,
        "userId": user.id,
        "email": user.email,
        "role": user.role.value,
        "type": token_type,
    }


def create_access_token(user: User, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    to_encode = _claims(user, SecurityConfig.TOKEN["access_type"])
    to_encode["exp"] = datetime.now(timezone.utc) + SecurityConfig.access_token_lifetime(settings)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_refresh_token(user: User, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    to_encode = _claims(user, SecurityConfig.TOKEN["refresh_type"])
    to_encode["exp"] = datetime.now(timezone.utc) + SecurityConfig.refresh_token_lifetime(settings)
    return jwt.encode(to_encode, settings.refresh_secret_key, algorithm=settings.algorithm)


def create_token_pair(user: User, settings: Optional[Settings] = None) -> dict:
    return {
        "access_token": create_access_token(user, settings),
        "refresh_token": create_refresh_token(user, settings),
    }


def _decode(token: str, key: str, token_type: str, error_message: str, settings: Settings) -> dict:
    try:
        payload = jwt.decode(token, key, algorithms=[settings.algorithm], options={"require_exp": True})
    except JWTError:
        raise AuthenticationError(error_message)
    if payload.get("type") != token_type or not payload.get("userId"):
        raise AuthenticationError(error_message)
    return payload


def decode_access_token(token: str, settings: Optional[Settings] = None) -> dict:
    settings = settings or get_settings()
    return _decode(
        token,
        settings.secret_key,
        SecurityConfig.TOKEN["access_type"],
        "Invalid or expired token",
        settings,
    )


def decode_refresh_token(token: str, settings: Optional[Settings] = None) -> dict:
    settings = settings or get_settings()
    return _decode(
        token,
        settings.refresh_secret_key,
        SecurityConfig.TOKEN["refresh_type"],
        "Invalid or expired refresh token",
        settings,
    )
