"""Pure state updates: each takes a snapshot and returns a new one.

Input is validated before the new snapshot is built, so a rejected command
leaves nothing half-applied. The incoming snapshot is never mutated.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Callable

from ..data_model import Expense, SavingsGoal, Snapshot
from ..data_model.expense import new_id
from ..data_model.values import to_number
from ..errors import NotFoundError, ValidationError
from ..logging_utils import get_logger

logger = get_logger(__name__)


def _require_expense(snapshot: Snapshot, expense_id: str) -> Expense:
    expense = snapshot.find_expense(expense_id)
    if expense is None:
        raise NotFoundError(f"Expense {expense_id} not found.")
    return expense


def _require_goal(snapshot: Snapshot, goal_id: str) -> SavingsGoal:
    goal = snapshot.find_goal(goal_id)
    if goal is None:
        raise NotFoundError(f"Goal {goal_id} not found.")
    return goal


def apply_set_income(snapshot: Snapshot, income: Any) -> Snapshot:
    value = to_number(income, "Income", default=0.0)
    if value < 0:
        raise ValidationError("Income cannot be negative.")
    return replace(snapshot, income=value)


def apply_add_expense(
    snapshot: Snapshot,
    name: Any,
    amount: Any,
    category: Any = None,
    spent_on: Any = None,
    *,
    today: date,
    id_factory: Callable[[], str] = new_id,
) -> Snapshot:
    expense = Expense.create(name, amount, category, spent_on, today=today, id_factory=id_factory)
    logger.info("expense added id=%s category=%s", expense.id, expense.category)
    return replace(snapshot, expenses=[*snapshot.expenses, expense])


def apply_replace_expense(
    snapshot: Snapshot,
    expense_id: str,
    name: Any,
    amount: Any,
    category: Any = None,
    spent_on: Any = None,
    *,
    today: date,
) -> Snapshot:
    current = _require_expense(snapshot, expense_id)
    updated = Expense.create(
        name,
        amount,
        category,
        spent_on if spent_on not in (None, "") else current.date,
        today=today,
        expense_id=expense_id,
    )
    expenses = [updated if e.id == expense_id else e for e in snapshot.expenses]
    return replace(snapshot, expenses=expenses)


def apply_remove_expense(snapshot: Snapshot, expense_id: str) -> Snapshot:
    _require_expense(snapshot, expense_id)
    return replace(snapshot, expenses=[e for e in snapshot.expenses if e.id != expense_id])


def apply_add_goal(
    snapshot: Snapshot,
    name: Any,
    target_amount: Any,
    deadline: Any,
    *,
    today: date,
    id_factory: Callable[[], str] = new_id,
) -> Snapshot:
    goal = SavingsGoal.create(name, target_amount, deadline, today=today, id_factory=id_factory)
    logger.info("goal added id=%s target=%.2f", goal.id, goal.target_amount)
    return replace(snapshot, goals=[*snapshot.goals, goal])


def apply_update_goal_amount(snapshot: Snapshot, goal_id: str, current_amount: Any) -> Snapshot:
    """Overwrite how much has been saved towards a goal."""
    value = to_number(current_amount, "Current amount", default=0.0)
    if value < 0:
        raise ValidationError("Current amount cannot be negative.")
    _require_goal(snapshot, goal_id)
    goals = [replace(g, current_amount=value) if g.id == goal_id else g for g in snapshot.goals]
    return replace(snapshot, goals=goals)


def apply_contribute_to_goal(snapshot: Snapshot, goal_id: str, amount: Any) -> Snapshot:
    value = to_number(amount, "Contribution")
    if value <= 0:
        raise ValidationError("Contribution must be greater than zero.")
    goal = _require_goal(snapshot, goal_id)
    return apply_update_goal_amount(snapshot, goal_id, goal.current_amount + value)


def apply_remove_goal(snapshot: Snapshot, goal_id: str) -> Snapshot:
    _require_goal(snapshot, goal_id)
    return replace(snapshot, goals=[g for g in snapshot.goals if g.id != goal_id])


def apply_clear(snapshot: Snapshot) -> Snapshot:
    return Snapshot()
