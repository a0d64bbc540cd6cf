from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ExpenseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    amount: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    category: str = Field(min_length=1, max_length=100)
    date: datetime

    # Display metadata only; the owner always comes from the token.
    userName: str | None = Field(default=None, max_length=200)
    userPhoto: str | None = Field(default=None, max_length=1000)


class ExpenseUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    amount: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    date: datetime | None = None


class ExpenseOut(BaseModel):
    id: str
    title: str
    amount: float
    category: str
    date: datetime
    userEmail: str
    userName: str | None = None
    userPhoto: str | None = None
    createdAt: datetime


class ExpenseCreated(BaseModel):
    insertedId: str


class MessageOut(BaseModel):
    message: str
