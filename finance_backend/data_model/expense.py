from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List

from ..errors import ValidationError
from .base import ColumnDefinition, TableModel
from .values import require_text, safe_date, safe_number, to_date, to_number

EXPENSE_CATEGORIES = [
    "Food",
    "Transport",
    "Housing",
    "Health",
    "Education",
    "Leisure",
    "Clothing",
    "Services",
    "Other",
]
DEFAULT_CATEGORY = "Other"

_CATEGORY_LOOKUP = {name.lower(): name for name in EXPENSE_CATEGORIES}


def new_id() -> str:
    return uuid.uuid4().hex


def normalize_category(value: Any) -> str:
    """Map user input onto the fixed category set; blank means Other."""
    text = str(value or "").strip()
    if not text:
        return DEFAULT_CATEGORY
    category = _CATEGORY_LOOKUP.get(text.lower())
    if category is None:
        raise ValidationError(f"Unknown category {text!r}. Choose one of: {', '.join(EXPENSE_CATEGORIES)}.")
    return category


@dataclass
class Expense:
    id: str
    name: str
    amount: float
    category: str = DEFAULT_CATEGORY
    date: date | None = None

    @classmethod
    def create(
        cls,
        name: Any,
        amount: Any,
        category: Any = None,
        spent_on: Any = None,
        *,
        today: date,
        expense_id: str | None = None,
        id_factory: Callable[[], str] = new_id,
    ) -> "Expense":
        """Validate raw input and apply the defaults (category, date, id) once."""
        clean_name = require_text(name, "Expense name")
        value = to_number(amount, "Amount")
        if value <= 0:
            raise ValidationError("Amount must be greater than zero.")
        return cls(
            id=expense_id or id_factory(),
            name=clean_name,
            amount=value,
            category=normalize_category(category),
            date=today if spent_on in (None, "") else to_date(spent_on, "Date"),
        )

    def bucket_date(self, today: date) -> date:
        return self.date or today

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "amount": self.amount,
            "category": self.category,
            "date": self.date.isoformat() if self.date else None,
        }

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> "Expense | None":
        expense_id = str(row.get("id", "") or "").strip()
        if not expense_id:
            return None
        return cls(
            id=expense_id,
            name=str(row.get("name", "") or "").strip(),
            amount=max(0.0, safe_number(row.get("amount"))),
            category=str(row.get("category", "") or "").strip() or DEFAULT_CATEGORY,
            date=safe_date(row.get("date")),
        )


def records_to_expenses(rows: List[dict[str, Any]] | None) -> List[Expense]:
    expenses: List[Expense] = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        expense = Expense.from_dict(row)
        if expense is not None:
            expenses.append(expense)
    return expenses


class ExpenseTableModel(TableModel):
    def __init__(self) -> None:
        columns = [
            ColumnDefinition("date", "Date", kind="date", default=""),
            ColumnDefinition("name", "Description"),
            ColumnDefinition(
                "category",
                "Category",
                kind="select",
                default=DEFAULT_CATEGORY,
                options=EXPENSE_CATEGORIES,
            ),
            ColumnDefinition(
                "amount",
                "Amount",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=0.01,
                format="%.2f",
            ),
        ]
        super().__init__("expenses", columns)
