from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List

from ..errors import ValidationError
from .base import ColumnDefinition, TableModel
from .expense import new_id
from .values import require_text, safe_date, safe_number, to_date, to_number


@dataclass
class SavingsGoal:
    id: str
    name: str
    target_amount: float
    deadline: date
    current_amount: float = 0.0

    @classmethod
    def create(
        cls,
        name: Any,
        target_amount: Any,
        deadline: Any,
        *,
        today: date,
        goal_id: str | None = None,
        id_factory: Callable[[], str] = new_id,
    ) -> "SavingsGoal":
        clean_name = require_text(name, "Goal name")
        target = to_number(target_amount, "Target amount")
        if target <= 0:
            raise ValidationError("Target amount must be greater than zero.")
        due = to_date(deadline, "Deadline")
        if due <= today:
            raise ValidationError("Deadline must be in the future.")
        return cls(id=goal_id or id_factory(), name=clean_name, target_amount=target, deadline=due)

    @property
    def is_complete(self) -> bool:
        return self.target_amount > 0 and self.current_amount >= self.target_amount

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "targetAmount": self.target_amount,
            "currentAmount": self.current_amount,
            "deadline": self.deadline.isoformat(),
        }

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> "SavingsGoal | None":
        goal_id = str(row.get("id", "") or "").strip()
        deadline = safe_date(row.get("deadline"))
        if not goal_id or deadline is None:
            return None
        return cls(
            id=goal_id,
            name=str(row.get("name", "") or "").strip(),
            target_amount=max(0.0, safe_number(row.get("targetAmount"))),
            current_amount=max(0.0, safe_number(row.get("currentAmount"))),
            deadline=deadline,
        )


def records_to_goals(rows: List[dict[str, Any]] | None) -> List[SavingsGoal]:
    goals: List[SavingsGoal] = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        goal = SavingsGoal.from_dict(row)
        if goal is not None:
            goals.append(goal)
    return goals


class GoalTableModel(TableModel):
    def __init__(self) -> None:
        columns = [
            ColumnDefinition("name", "Goal"),
            ColumnDefinition(
                "targetAmount",
                "Target",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=100.0,
                format="%.2f",
            ),
            ColumnDefinition(
                "currentAmount",
                "Saved",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=100.0,
                format="%.2f",
            ),
            ColumnDefinition("deadline", "Deadline", kind="date", default=""),
            ColumnDefinition("progress", "Progress (%)", kind="number", default=0.0, editable=False),
        ]
        super().__init__("goals", columns)
