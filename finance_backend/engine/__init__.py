from .aggregate import FinancialSummary, category_breakdown, daily_expense_series, summarize
from .goals import analyze_goals, goal_progress
from .health import financial_health, health_label, health_score
from .projection import simulate_projection
from .simulator import compare_scenario

__all__ = [
    "FinancialSummary",
    "analyze_goals",
    "category_breakdown",
    "compare_scenario",
    "daily_expense_series",
    "financial_health",
    "goal_progress",
    "health_label",
    "health_score",
    "simulate_projection",
    "summarize",
]
