from __future__ import annotations

from pydantic import BaseModel, Field


class CategoryDatum(BaseModel):
    name: str
    value: float


class TrendDatum(BaseModel):
    month: str = Field(description="Jan..Dec")
    amount: float


class QuickStatsOut(BaseModel):
    totalExpenses: float
    monthlyExpenses: float
    topCategory: str
    categoryData: list[CategoryDatum]
    trendData: list[TrendDatum] = Field(description="12 entries, or empty when there are no expenses")
