from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import ValidationError
from .values import to_number

# Annual nominal return per named risk scenario
RATE_TABLE: dict[str, float] = {
    "conservative": 0.05,
    "moderate": 0.07,
    "aggressive": 0.10,
}
SCENARIOS = tuple(RATE_TABLE)


def _whole_years(value: Any, field: str, default: int) -> int:
    number = to_number(value, field, default=float(default))
    if not number.is_integer():
        raise ValidationError(f"{field} must be a whole number of years.")
    return int(number)


@dataclass
class ScenarioParams:
    current_age: int = 30
    retirement_age: int = 65
    current_savings: float = 0.0
    monthly_contribution: float = 0.0
    scenario: str = "moderate"
    monthly_expenses: float = 0.0

    @property
    def rate(self) -> float:
        return RATE_TABLE[self.scenario]

    @property
    def years_to_retirement(self) -> int:
        return self.retirement_age - self.current_age

    def validate(self) -> "ScenarioParams":
        if self.scenario not in RATE_TABLE:
            raise ValidationError(f"Unknown scenario {self.scenario!r}. Choose one of: {', '.join(SCENARIOS)}.")
        if self.current_age < 0:
            raise ValidationError("Current age cannot be negative.")
        if self.retirement_age <= self.current_age:
            raise ValidationError("Retirement age must be greater than current age.")
        if self.current_savings < 0:
            raise ValidationError("Current savings cannot be negative.")
        if self.monthly_contribution < 0:
            raise ValidationError("Monthly contribution cannot be negative.")
        if self.monthly_expenses < 0:
            raise ValidationError("Monthly expenses cannot be negative.")
        return self

    @classmethod
    def from_payload(cls, payload: dict[str, Any], default_scenario: str = "moderate") -> "ScenarioParams":
        scenario = str(payload.get("scenario") or default_scenario).strip().lower()
        params = cls(
            current_age=_whole_years(payload.get("currentAge"), "Current age", 30),
            retirement_age=_whole_years(payload.get("retirementAge"), "Retirement age", 65),
            current_savings=to_number(payload.get("currentSavings"), "Current savings", default=0.0),
            monthly_contribution=to_number(payload.get("monthlyContribution"), "Monthly contribution", default=0.0),
            scenario=scenario,
            monthly_expenses=to_number(payload.get("monthlyExpenses"), "Monthly expenses", default=0.0),
        )
        return params.validate()
