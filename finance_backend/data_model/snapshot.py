from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from .expense import Expense, records_to_expenses
from .goal import SavingsGoal, records_to_goals
from .values import safe_number


@dataclass
class Snapshot:
    """One user's income, expenses and goals at a point in time."""

    income: float = 0.0
    expenses: List[Expense] = field(default_factory=list)
    goals: List[SavingsGoal] = field(default_factory=list)
    last_updated: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "income": self.income,
            "expenses": [expense.to_dict() for expense in self.expenses],
            "goals": [goal.to_dict() for goal in self.goals],
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Snapshot":
        data = data or {}
        last_updated = data.get("lastUpdated")
        return cls(
            income=max(0.0, safe_number(data.get("income"))),
            expenses=records_to_expenses(data.get("expenses")),
            goals=records_to_goals(data.get("goals")),
            last_updated=str(last_updated) if last_updated else None,
        )

    def find_expense(self, expense_id: str) -> Expense | None:
        return next((e for e in self.expenses if e.id == expense_id), None)

    def find_goal(self, goal_id: str) -> SavingsGoal | None:
        return next((g for g in self.goals if g.id == goal_id), None)
