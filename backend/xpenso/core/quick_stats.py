"""Quick stats aggregation over one owner's expenses.

``compute_stats`` is a pure function: it never touches the database or the
wall clock. Callers pass the owner's records (already scoped and in a fixed
retrieval order) together with the reference instant and calendar time zone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Any, Iterable

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

NO_CATEGORY = "N/A"


class MalformedExpenseError(ValueError):
    """An input record cannot be aggregated (bad date or amount)."""


@dataclass(frozen=True)
class CategoryTotal:
    name: str
    value: Decimal


@dataclass(frozen=True)
class TrendPoint:
    month: str
    amount: Decimal


@dataclass(frozen=True)
class StatsSummary:
    total_expenses: Decimal
    monthly_expenses: Decimal
    top_category: str
    category_data: list[CategoryTotal] = field(default_factory=list)
    trend_data: list[TrendPoint] = field(default_factory=list)


def empty_summary() -> StatsSummary:
    # Zero records report an empty trend, not twelve zero buckets.
    return StatsSummary(
        total_expenses=Decimal(0),
        monthly_expenses=Decimal(0),
        top_category=NO_CATEGORY,
        category_data=[],
        trend_data=[],
    )


def _localize(dt: datetime, tz: tzinfo) -> datetime:
    # Naive datetimes are UTC (that is how the store keeps them).
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def _record_amount(record: Any) -> Decimal:
    raw = getattr(record, "amount", None)
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        raise MalformedExpenseError(f"Invalid amount: {raw!r}")
    amount = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    if not amount.is_finite() or amount < 0:
        raise MalformedExpenseError(f"Invalid amount: {raw!r}")
    return amount


def _record_date(record: Any, tz: tzinfo) -> datetime:
    raw = getattr(record, "date", None)
    if not isinstance(raw, datetime):
        raise MalformedExpenseError(f"Invalid date: {raw!r}")
    return _localize(raw, tz)


def top_category(category_totals: dict[str, Decimal]) -> str:
    """Category with the largest total; the first-seen one wins a tie."""

    best_name = NO_CATEGORY
    best_value: Decimal | None = None
    for name, value in category_totals.items():
        if best_value is None or value > best_value:
            best_name, best_value = name, value
    return best_name


def compute_stats(records: Iterable[Any], now: datetime, tz: tzinfo = timezone.utc) -> StatsSummary:
    """Summarize one owner's expenses relative to ``now``.

    Records need ``amount``, ``category`` and ``date`` attributes. Month and
    year are read in ``tz``; naive datetimes (records and ``now``) are taken
    as UTC first. A malformed record raises ``MalformedExpenseError`` and no
    summary is produced.
    """

    rows = list(records)
    if not rows:
        return empty_summary()

    local_now = _localize(now, tz)
    current_year, current_month = local_now.year, local_now.month

    total = Decimal(0)
    monthly = Decimal(0)
    category_totals: dict[str, Decimal] = {}
    month_buckets = [Decimal(0)] * 12

    for record in rows:
        amount = _record_amount(record)
        when = _record_date(record, tz)
        category = str(record.category)

        total += amount

        if category not in category_totals:
            category_totals[category] = Decimal(0)
        category_totals[category] += amount

        if when.year == current_year:
            month_buckets[when.month - 1] += amount
            if when.month == current_month:
                monthly += amount

    return StatsSummary(
        total_expenses=total,
        monthly_expenses=monthly,
        top_category=top_category(category_totals),
        category_data=[CategoryTotal(name=k, value=v) for k, v in category_totals.items()],
        trend_data=[TrendPoint(month=MONTH_LABELS[i], amount=v) for i, v in enumerate(month_buckets)],
    )
