"""Derived aggregates over a snapshot: summary, category split and daily series."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List

import pandas as pd

from ..data_model import DEFAULT_CATEGORY, Expense

BREAKDOWN_COLUMNS = ["Category", "Amount", "PercentageOfIncome", "PercentageOfExpenses"]
SERIES_COLUMNS = ["Date", "Total", "Count"]
SERIES_LIMIT = 30


@dataclass
class FinancialSummary:
    total_income: float
    total_expenses: float
    balance: float
    savings_percentage: float

    def to_dict(self) -> dict[str, float]:
        return {
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "balance": self.balance,
            "savingsPercentage": self.savings_percentage,
        }


def summarize(income: float, expenses: Iterable[Expense]) -> FinancialSummary:
    total_expenses = sum(expense.amount for expense in expenses)
    balance = income - total_expenses
    savings_percentage = (balance / income) * 100 if income > 0 else 0.0
    return FinancialSummary(
        total_income=income,
        total_expenses=total_expenses,
        balance=balance,
        savings_percentage=savings_percentage,
    )


def category_breakdown(expenses: List[Expense], income: float) -> pd.DataFrame:
    """Sum per category. Shares are reported against income and against total spend.

    Rows come out in first-seen order; sorting is left to the caller.
    """
    rows = [{"Category": expense.category or DEFAULT_CATEGORY, "Amount": expense.amount} for expense in expenses]
    if not rows:
        return pd.DataFrame(columns=BREAKDOWN_COLUMNS)

    df = pd.DataFrame(rows)
    grouped = df.groupby("Category", sort=False, as_index=False)["Amount"].sum()
    total = float(grouped["Amount"].sum())
    grouped["PercentageOfIncome"] = grouped["Amount"] / income * 100 if income > 0 else 0.0
    grouped["PercentageOfExpenses"] = grouped["Amount"] / total * 100 if total > 0 else 0.0
    return grouped[BREAKDOWN_COLUMNS]


def daily_expense_series(expenses: List[Expense], today: date, limit: int = SERIES_LIMIT) -> pd.DataFrame:
    """Spend per calendar day, oldest first, keeping the most recent `limit` days."""
    rows = [{"Date": expense.bucket_date(today).isoformat(), "Amount": expense.amount} for expense in expenses]
    if not rows:
        return pd.DataFrame(columns=SERIES_COLUMNS)

    df = pd.DataFrame(rows)
    grouped = df.groupby("Date", sort=True, as_index=False).agg(
        Total=("Amount", "sum"),
        Count=("Amount", "size"),
    )
    return grouped.tail(limit).reset_index(drop=True)[SERIES_COLUMNS]


def income_vs_expenses(income: float, series: pd.DataFrame, days: int = 12) -> pd.DataFrame:
    """Compare a flat daily income (monthly income / 30) with each day's spend."""
    columns = ["Date", "Income", "Expenses", "Savings"]
    if series.empty:
        return pd.DataFrame(columns=columns)
    recent = series.tail(days).reset_index(drop=True)
    daily_income = income / 30
    out = pd.DataFrame(
        {
            "Date": recent["Date"],
            "Income": daily_income,
            "Expenses": recent["Total"].astype(float),
        }
    )
    out["Savings"] = out["Income"] - out["Expenses"]
    return out[columns]


def spending_stats(expenses: List[Expense]) -> dict[str, Any]:
    count = len(expenses)
    total = sum(expense.amount for expense in expenses)
    return {
        "count": count,
        "total": total,
        "average": total / count if count else 0.0,
        "largest": max((expense.amount for expense in expenses), default=0.0),
    }
