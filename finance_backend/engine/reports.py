from __future__ import annotations

from datetime import date
from typing import Any, Dict

from ..data_model import Snapshot
from .aggregate import category_breakdown, daily_expense_series, income_vs_expenses, spending_stats, summarize
from .goals import analyze_goals, goal_progress
from .health import financial_health, monthly_projection, recommendations


def build_report(snapshot: Snapshot, today: date) -> Dict[str, Any]:
    """Everything the reports and analytics views render, derived in one pass."""
    summary = summarize(snapshot.income, snapshot.expenses)
    breakdown = category_breakdown(snapshot.expenses, snapshot.income)
    series = daily_expense_series(snapshot.expenses, today)
    goals = analyze_goals(snapshot.goals)
    projection = monthly_projection(summary, goals)
    health = financial_health(summary, breakdown, goals)

    return {
        "hasData": snapshot.income > 0 or bool(snapshot.expenses),
        "summary": summary.to_dict(),
        "categories": breakdown.sort_values("Amount", ascending=False).to_dict("records"),
        "dailyExpenses": series.to_dict("records"),
        "incomeVsExpenses": income_vs_expenses(snapshot.income, series).to_dict("records"),
        "spending": spending_stats(snapshot.expenses),
        "goals": goals.to_dict(),
        "goalProgress": [goal_progress(goal, today).to_dict() for goal in snapshot.goals],
        "monthlyProjection": projection,
        "health": health.to_dict(),
        "recommendations": recommendations(summary, breakdown, goals, projection),
    }
