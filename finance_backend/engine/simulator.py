"""What-if simulator: an independent income/expense set compared with the real one."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Callable, Dict, List

from ..data_model import Expense
from ..data_model.expense import new_id
from ..data_model.values import to_number
from ..errors import NotFoundError, ValidationError
from .aggregate import FinancialSummary, summarize

SIM_ID_PREFIX = "sim-"

# Fields where a higher simulated value is bad news
INVERTED_FIELDS = {"totalExpenses"}


@dataclass
class SimulatedSnapshot:
    income: float = 0.0
    expenses: List[Expense] = field(default_factory=list)

    def summary(self) -> FinancialSummary:
        return summarize(self.income, self.expenses)


def simulator_available(current_income: float) -> bool:
    return current_income > 0


def reset_simulation() -> SimulatedSnapshot:
    return SimulatedSnapshot()


def set_simulated_income(sim: SimulatedSnapshot, income: Any) -> SimulatedSnapshot:
    value = to_number(income, "Income", default=0.0)
    if value < 0:
        raise ValidationError("Income cannot be negative.")
    return replace(sim, income=value)


def add_simulated_expense(
    sim: SimulatedSnapshot,
    name: Any,
    amount: Any,
    *,
    today: date,
    id_factory: Callable[[], str] = new_id,
) -> SimulatedSnapshot:
    expense = Expense.create(name, amount, today=today, expense_id=SIM_ID_PREFIX + id_factory())
    return replace(sim, expenses=[*sim.expenses, expense])


def update_simulated_amount(sim: SimulatedSnapshot, expense_id: str, amount: Any) -> SimulatedSnapshot:
    value = to_number(amount, "Amount", default=0.0)
    if value < 0:
        raise ValidationError("Amount cannot be negative.")
    if not any(expense.id == expense_id for expense in sim.expenses):
        raise NotFoundError(f"Simulated expense {expense_id} not found.")
    expenses = [replace(e, amount=value) if e.id == expense_id else e for e in sim.expenses]
    return replace(sim, expenses=expenses)


def remove_simulated_expense(sim: SimulatedSnapshot, expense_id: str) -> SimulatedSnapshot:
    return replace(sim, expenses=[e for e in sim.expenses if e.id != expense_id])


def _sentiment(field_name: str, delta: float) -> str:
    if delta == 0:
        return "neutral"
    improved = delta > 0
    if field_name in INVERTED_FIELDS:
        improved = not improved
    return "positive" if improved else "negative"


@dataclass
class ScenarioDelta:
    field: str
    current: float
    simulated: float
    delta: float
    sentiment: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "current": self.current,
            "simulated": self.simulated,
            "delta": self.delta,
            "sentiment": self.sentiment,
        }


@dataclass
class ScenarioComparison:
    current: FinancialSummary
    simulated: FinancialSummary
    deltas: List[ScenarioDelta]

    def delta(self, field_name: str) -> ScenarioDelta:
        return next(d for d in self.deltas if d.field == field_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict(),
            "simulated": self.simulated.to_dict(),
            "deltas": {d.field: d.to_dict() for d in self.deltas},
        }


def compare_scenario(current: FinancialSummary, sim: SimulatedSnapshot) -> ScenarioComparison:
    simulated = sim.summary()
    current_values = current.to_dict()
    simulated_values = simulated.to_dict()
    deltas = []
    for name in ("totalIncome", "totalExpenses", "balance", "savingsPercentage"):
        delta = simulated_values[name] - current_values[name]
        deltas.append(
            ScenarioDelta(
                field=name,
                current=current_values[name],
                simulated=simulated_values[name],
                delta=delta,
                sentiment=_sentiment(name, delta),
            )
        )
    return ScenarioComparison(current=current, simulated=simulated, deltas=deltas)
