from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from xpenso.api.deps import get_current_user, get_db, get_settings
from xpenso.core.config import Settings
from xpenso.core.security import create_access_token, hash_password, verify_password
from xpenso.models.user import User
from xpenso.schemas.auth import RegisterRequest, TokenRequest, TokenResponse, UserMe
from xpenso.schemas.expense import MessageOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _user_me(user: User) -> UserMe:
    return UserMe(id=user.id, email=user.email, name=user.name, photoUrl=user.photo_url, role=user.role)


@router.post("/users", response_model=UserMe)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> UserMe:
    email = _normalize_email(payload.email)
    existing = db.scalar(select(User).where(User.email == email))
    if existing:
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        email=email,
        name=payload.name,
        photo_url=payload.photoUrl,
        password_hash=hash_password(payload.password),
        role=User.ROLE_USER,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email.
        db.rollback()
        raise HTTPException(status_code=400, detail="User already exists")
    db.refresh(user)
    logger.info("Registered user id=%s", user.id)
    return _user_me(user)


@router.post("/jwt", response_model=TokenResponse)
def issue_token(
    payload: TokenRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    user = db.scalar(select(User).where(User.email == _normalize_email(payload.email)))
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(
        user.email,
        secret=settings.jwt_secret,
        expires_in=timedelta(minutes=settings.jwt_expire_minutes),
    )

    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=bool(settings.auth_cookie_secure),
        samesite=settings.auth_cookie_samesite,
        max_age=int(settings.jwt_expire_minutes) * 60,
        path="/",
    )

    return TokenResponse(access_token=token)


@router.post("/logout", response_model=MessageOut)
def logout(response: Response, settings: Settings = Depends(get_settings)) -> MessageOut:
    response.delete_cookie(key=settings.auth_cookie_name, path="/")
    return MessageOut(message="Logged out successfully")


@router.get("/auth/me", response_model=UserMe)
def me(current_user: User = Depends(get_current_user)) -> UserMe:
    return _user_me(current_user)
