from .base import ColumnDefinition, TableModel
from .expense import (
    DEFAULT_CATEGORY,
    EXPENSE_CATEGORIES,
    Expense,
    ExpenseTableModel,
    normalize_category,
    records_to_expenses,
)
from .goal import GoalTableModel, SavingsGoal, records_to_goals
from .scenario import RATE_TABLE, SCENARIOS, ScenarioParams
from .snapshot import Snapshot

__all__ = [
    "DEFAULT_CATEGORY",
    "EXPENSE_CATEGORIES",
    "RATE_TABLE",
    "SCENARIOS",
    "ColumnDefinition",
    "Expense",
    "ExpenseTableModel",
    "GoalTableModel",
    "SavingsGoal",
    "ScenarioParams",
    "Snapshot",
    "TableModel",
    "normalize_category",
    "records_to_expenses",
    "records_to_goals",
]
