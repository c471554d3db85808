# amc_portal/schemas/tokens.py
from typing import Optional

from amc_portal.schemas.common import CamelModel
from amc_portal.schemas.user import UserOut


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class AuthResult(TokenPair):
    user: UserOut


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None
