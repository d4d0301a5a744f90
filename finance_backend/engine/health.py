"""Financial-health rubric and the recommendation rules shown next to it.

The thresholds and point values are a fixed policy; four criteria worth up to
25 points each.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import pandas as pd

from .aggregate import FinancialSummary
from .goals import GoalAnalysis

MAX_SCORE = 100
HEALTH_LABELS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
)
CRITICAL_LABEL = "Critical"


def _savings_points(savings_percentage: float) -> int:
    if savings_percentage >= 20:
        return 25
    if savings_percentage >= 10:
        return 15
    if savings_percentage >= 5:
        return 10
    return 0


def _diversity_points(category_count: int) -> int:
    if category_count >= 5:
        return 25
    if category_count >= 3:
        return 15
    if category_count >= 1:
        return 10
    return 0


def _goal_points(completion_rate: float) -> int:
    if completion_rate >= 50:
        return 25
    if completion_rate >= 25:
        return 15
    if completion_rate > 0:
        return 10
    return 0


def health_score(balance: float, savings_percentage: float, category_count: int, goal_completion_rate: float) -> int:
    score = 25 if balance > 0 else 0
    score += _savings_points(savings_percentage)
    score += _diversity_points(category_count)
    score += _goal_points(goal_completion_rate)
    return max(0, min(score, MAX_SCORE))


def health_label(score: int) -> str:
    for threshold, label in HEALTH_LABELS:
        if score >= threshold:
            return label
    return CRITICAL_LABEL


@dataclass
class HealthReport:
    score: int
    label: str
    max_score: int = MAX_SCORE

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "label": self.label, "maxScore": self.max_score}


def financial_health(summary: FinancialSummary, breakdown: pd.DataFrame, goals: GoalAnalysis) -> HealthReport:
    score = health_score(
        balance=summary.balance,
        savings_percentage=summary.savings_percentage,
        category_count=len(breakdown),
        goal_completion_rate=goals.completion_rate,
    )
    return HealthReport(score=score, label=health_label(score))


def monthly_projection(summary: FinancialSummary, goals: GoalAnalysis) -> Dict[str, float]:
    monthly_savings = summary.balance
    months = 0.0
    if goals.total_goal_value > 0 and monthly_savings > 0:
        months = max(0.0, (goals.total_goal_value - goals.total_saved) / monthly_savings)
    return {
        "monthlySavings": monthly_savings,
        "monthsToReachGoals": months,
        "yearlyProjection": monthly_savings * 12,
    }


def recommendations(
    summary: FinancialSummary,
    breakdown: pd.DataFrame,
    goals: GoalAnalysis,
    projection: Dict[str, float],
) -> List[Dict[str, str]]:
    recs: List[Dict[str, str]] = []

    if summary.balance < 0:
        recs.append({
            "type": "critical",
            "title": "Budget deficit",
            "message": "Your expenses exceed your income. Review your spending urgently.",
            "action": "Cut unnecessary expenses",
        })

    if summary.savings_percentage < 10:
        recs.append({
            "type": "warning",
            "title": "Low savings rate",
            "message": "Saving at least 10-20% of income is recommended.",
            "action": "Increase income or reduce expenses",
        })

    if not breakdown.empty:
        top = breakdown.sort_values("Amount", ascending=False).iloc[0]
        if top["PercentageOfExpenses"] > 50:
            recs.append({
                "type": "warning",
                "title": "Concentrated spending",
                "message": f'{top["PercentageOfExpenses"]:.1f}% of spending is in "{top["Category"]}".',
                "action": "Spread your spending for better control",
            })

    if goals.total_goals == 0:
        recs.append({
            "type": "info",
            "title": "No goals set",
            "message": "Setting financial goals helps with planning.",
            "action": "Create short and long term goals",
        })

    if projection["monthlySavings"] > 0 and goals.total_goals > 0:
        recs.append({
            "type": "success",
            "title": "Positive progress",
            "message": f'Saving {projection["monthlySavings"]:.2f}/month you can reach your goals.',
            "action": "Keep up this savings pace",
        })

    return recs
