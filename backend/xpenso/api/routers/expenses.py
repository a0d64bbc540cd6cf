from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from xpenso.api.deps import get_current_user, get_db, get_settings
from xpenso.core.config import Settings
from xpenso.core.datetime_utils import as_utc, to_utc_naive
from xpenso.models.expense import Expense
from xpenso.models.user import User
from xpenso.schemas.expense import ExpenseCreate, ExpenseCreated, ExpenseOut, ExpenseUpdate, MessageOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["expenses"])


def _parse_expense_id(value: str) -> str:
    try:
        return uuid.UUID(value).hex
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid expense ID")


def _to_out(row: Expense) -> ExpenseOut:
    return ExpenseOut(
        id=row.id,
        title=row.title,
        amount=row.amount,
        category=row.category,
        date=as_utc(row.date),
        userEmail=row.user_email,
        userName=row.user_name,
        userPhoto=row.user_photo,
        createdAt=as_utc(row.created_at),
    )


@router.post("/expenses", response_model=ExpenseCreated)
def create_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExpenseCreated:
    row = Expense(
        title=payload.title,
        amount=payload.amount,
        category=payload.category,
        date=to_utc_naive(payload.date),
        user_email=current_user.email,
        user_name=payload.userName,
        user_photo=payload.userPhoto,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created expense id=%s category=%s", row.id, row.category)
    return ExpenseCreated(insertedId=row.id)


@router.get("/my-expense", response_model=list[ExpenseOut])
def list_my_expenses(
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ExpenseOut]:
    filters = [Expense.user_email == current_user.email]
    if category and category != "All":
        filters.append(Expense.category == category)

    try:
        rows = db.scalars(select(Expense).where(*filters).order_by(Expense.date.desc(), Expense.seq.desc())).all()
    except SQLAlchemyError:
        logger.exception("Failed to fetch expenses")
        raise HTTPException(status_code=500, detail="Failed to fetch expenses")

    return [_to_out(r) for r in rows]


@router.get("/recent-expenses", response_model=list[ExpenseOut])
def recent_expenses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> list[ExpenseOut]:
    try:
        rows = db.scalars(
            select(Expense)
            .where(Expense.user_email == current_user.email)
            .order_by(Expense.date.desc(), Expense.seq.desc())
            .limit(settings.recent_expenses_limit)
        ).all()
    except SQLAlchemyError:
        logger.exception("Recent expenses error")
        raise HTTPException(status_code=500, detail="Failed to fetch recent expenses")

    return [_to_out(r) for r in rows]


@router.get("/expenses/{expense_id}", response_model=ExpenseOut)
def get_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExpenseOut:
    key = _parse_expense_id(expense_id)
    try:
        row = db.scalar(select(Expense).where(Expense.id == key, Expense.user_email == current_user.email))
    except SQLAlchemyError:
        logger.exception("Failed to load expense id=%s", key)
        raise HTTPException(status_code=500, detail="Server error")

    if not row:
        raise HTTPException(status_code=404, detail="Expense not found")
    return _to_out(row)


@router.patch("/expenses/{expense_id}", response_model=MessageOut)
def update_expense(
    expense_id: str,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageOut:
    key = _parse_expense_id(expense_id)

    # Only the owner may edit; another user's id looks the same as a missing one.
    try:
        row = db.scalar(select(Expense).where(Expense.id == key, Expense.user_email == current_user.email))
    except SQLAlchemyError:
        logger.exception("Failed to load expense id=%s", key)
        raise HTTPException(status_code=500, detail="Server error")

    if not row:
        raise HTTPException(status_code=403, detail="Forbidden: cannot update this expense")

    if payload.title is not None:
        row.title = payload.title
    if payload.amount is not None:
        row.amount = payload.amount
    if payload.category is not None:
        row.category = payload.category
    if payload.date is not None:
        row.date = to_utc_naive(payload.date)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update expense id=%s", key)
        raise HTTPException(status_code=500, detail="Server error")

    logger.info("Updated expense id=%s", key)
    return MessageOut(message="Expense updated successfully")


@router.delete("/expenses/{expense_id}", response_model=MessageOut)
def delete_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageOut:
    key = _parse_expense_id(expense_id)
    try:
        result = db.execute(delete(Expense).where(Expense.id == key, Expense.user_email == current_user.email))
        if result.rowcount == 0:
            db.rollback()
            raise HTTPException(status_code=403, detail="Forbidden")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete expense id=%s", key)
        raise HTTPException(status_code=500, detail="Server error")

    logger.info("Deleted expense id=%s", key)
    return MessageOut(message="Expense deleted successfully")
