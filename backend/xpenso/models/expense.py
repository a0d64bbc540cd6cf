from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from xpenso.core.datetime_utils import utcnow_naive
from xpenso.models.base import Base


def new_expense_id() -> str:
    return uuid.uuid4().hex


class Expense(Base):
    __tablename__ = "expenses"

    # Insertion order; stats read records in this order.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Public, opaque identifier.
    id: Mapped[str] = mapped_column(String(32), unique=True, index=True, default=new_expense_id)

    title: Mapped[str] = mapped_column(String(200))
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    category: Mapped[str] = mapped_column(String(100), index=True)

    # Business date of the expense, UTC-naive.
    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), index=True)

    # Owner; never taken from the request body.
    user_email: Mapped[str] = mapped_column(String(254), index=True)
    user_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    user_photo: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow_naive, index=True)
