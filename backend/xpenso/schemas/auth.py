from __future__ import annotations

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1, max_length=72)
    name: str | None = Field(default=None, max_length=200)
    photoUrl: str | None = Field(default=None, max_length=1000)


class TokenRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    success: bool = True
    access_token: str


class UserMe(BaseModel):
    id: int
    email: str
    name: str | None
    photoUrl: str | None
    role: str
