from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidTokenError(ValueError):
    """Token is malformed, expired, badly signed or names no owner."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(email: str, *, secret: str, expires_in: timedelta) -> str:
    issued_at = datetime.now(timezone.utc)
    claims = {"sub": email, "iat": issued_at, "exp": issued_at + expires_in}
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, *, secret: str) -> str:
    """Return the owner email carried by ``token``."""

    try:
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    email = claims.get("sub")
    if not email:
        raise InvalidTokenError("Token names no owner")
    return str(email)
