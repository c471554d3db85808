from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from amc_portal.database import get_db
from amc_portal.models import User
from amc_portal.schemas import (
    AuthResult,
    PasswordChange,
    RefreshRequest,
    TokenPair,
    UserCreate,
    UserLogin,
    UserOut,
    UserUpdate,
)
from amc_portal.services import AuthService
from amc_portal.utils.auth import get_current_user
from amc_portal.utils.responses import dump, success

router = APIRouter()


@router.post("/login")
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)):
    result = AuthService(db, request).login(payload.email, payload.password, payload.role)
    return success(dump(AuthResult, result), "Login successful")


@router.post("/register", status_code=201)
def register(payload: UserCreate, request: Request, db: Session = Depends(get_db)):
    result = AuthService(db, request).register(payload)
    return success(dump(AuthResult, result), "User registered successfully")


@router.post("/refresh")
def refresh(payload: RefreshRequest, request: Request, db: Session = Depends(get_db)):
    tokens = AuthService(db, request).refresh(payload.refresh_token)
    return success(dump(TokenPair, tokens), "Token refreshed successfully")


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return success(dump(UserOut, current_user))


@router.put("/profile")
def update_profile(
    payload: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = AuthService(db, request).update_profile(current_user, payload)
    return success(dump(UserOut, user), "Profile updated successfully")


@router.put("/change-password")
def change_password(
    payload: PasswordChange,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    AuthService(db, request).change_password(current_user, payload)
    return success(message="Password changed successfully")


@router.post("/logout")
def logout(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    AuthService(db, request).logout(current_user)
    return success(message="Logout successful")
