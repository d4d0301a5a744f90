from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, List

from ..data_model import SavingsGoal

DAYS_PER_MONTH = 30
BALANCE_SHARE = 0.1


def progress_percent(current_amount: float, target_amount: float) -> float:
    if target_amount <= 0:
        return 0.0
    return max(0.0, min(current_amount / target_amount * 100, 100.0))


def days_remaining(deadline: date, today: date) -> int:
    return (deadline - today).days


def suggested_monthly_contribution(goal: SavingsGoal, today: date) -> float:
    remaining = goal.target_amount - goal.current_amount
    days = days_remaining(goal.deadline, today)
    if remaining <= 0 or days <= 0:
        return 0.0
    months = days / DAYS_PER_MONTH
    # Imminent deadlines saturate at one month instead of blowing up
    return remaining / max(months, 1)


def ten_percent_of_balance(balance: float) -> float:
    """Quick-contribution heuristic; a negative balance contributes nothing."""
    return max(0.0, balance * BALANCE_SHARE)


def goal_status(goal: SavingsGoal, today: date) -> str:
    if goal.is_complete:
        return "completed"
    if days_remaining(goal.deadline, today) < 0:
        return "overdue"
    return "active"


@dataclass
class GoalProgress:
    goal_id: str
    name: str
    progress_percent: float
    days_remaining: int
    suggested_monthly_contribution: float
    status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "goalId": self.goal_id,
            "name": self.name,
            "progressPercent": self.progress_percent,
            "daysRemaining": self.days_remaining,
            "suggestedMonthlyContribution": self.suggested_monthly_contribution,
            "status": self.status,
        }


def goal_progress(goal: SavingsGoal, today: date) -> GoalProgress:
    return GoalProgress(
        goal_id=goal.id,
        name=goal.name,
        progress_percent=progress_percent(goal.current_amount, goal.target_amount),
        days_remaining=days_remaining(goal.deadline, today),
        suggested_monthly_contribution=suggested_monthly_contribution(goal, today),
        status=goal_status(goal, today),
    )


@dataclass
class GoalAnalysis:
    total_goals: int
    completed_goals: int
    total_goal_value: float
    total_saved: float
    completion_rate: float
    savings_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalGoals": self.total_goals,
            "completedGoals": self.completed_goals,
            "totalGoalValue": self.total_goal_value,
            "totalSaved": self.total_saved,
            "completionRate": self.completion_rate,
            "savingsRate": self.savings_rate,
        }


def analyze_goals(goals: List[SavingsGoal]) -> GoalAnalysis:
    total_value = sum(goal.target_amount for goal in goals)
    total_saved = sum(goal.current_amount for goal in goals)
    completed = sum(1 for goal in goals if goal.is_complete)
    return GoalAnalysis(
        total_goals=len(goals),
        completed_goals=completed,
        total_goal_value=total_value,
        total_saved=total_saved,
        completion_rate=completed / len(goals) * 100 if goals else 0.0,
        savings_rate=total_saved / total_value * 100 if total_value > 0 else 0.0,
    )
