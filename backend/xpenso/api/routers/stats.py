from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from xpenso.api.deps import get_current_user, get_db, get_now, get_settings
from xpenso.core.config import Settings
from xpenso.core.datetime_utils import resolve_time_zone
from xpenso.core.quick_stats import MalformedExpenseError, StatsSummary, compute_stats
from xpenso.models.expense import Expense
from xpenso.models.user import User
from xpenso.schemas.stats import CategoryDatum, QuickStatsOut, TrendDatum

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stats"])


def fetch_owner_expenses(db: Session, owner_email: str) -> list[Expense]:
    # Insertion order keeps categoryData's first-seen order stable.
    return list(db.scalars(select(Expense).where(Expense.user_email == owner_email).order_by(Expense.seq.asc())).all())


def _to_out(summary: StatsSummary) -> QuickStatsOut:
    return QuickStatsOut(
        totalExpenses=summary.total_expenses,
        monthlyExpenses=summary.monthly_expenses,
        topCategory=summary.top_category,
        categoryData=[CategoryDatum(name=c.name, value=c.value) for c in summary.category_data],
        trendData=[TrendDatum(month=t.month, amount=t.amount) for t in summary.trend_data],
    )


@router.get("/quick-stats", response_model=QuickStatsOut)
def quick_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> QuickStatsOut:
    try:
        expenses = fetch_owner_expenses(db, current_user.email)
        summary = compute_stats(expenses, now, resolve_time_zone(settings.stats_time_zone))
    except (SQLAlchemyError, MalformedExpenseError):
        logger.exception("Quick stats error")
        raise HTTPException(status_code=500, detail="Failed to fetch stats")

    return _to_out(summary)
