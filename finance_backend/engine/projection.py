from __future__ import annotations

import math
from typing import Any, Dict

import pandas as pd

from ..data_model import ScenarioParams

PROJECTION_COLUMNS = [
    "YearIndex",
    "Year",
    "Age",
    "Balance",
    "Contributions",
    "CompoundReturns",
    "AnnualExpenses",
    "NetWorth",
]


def round_half_up(value: float) -> int:
    """Nearest whole currency unit, halves rounding up."""
    return int(math.floor(value + 0.5))


def simulate_projection(params: ScenarioParams, start_year: int) -> pd.DataFrame:
    """Yearly compound-growth projection from today (year 0) to retirement inclusive.

    Each year's contribution is deposited before that year's growth is applied,
    so the new money earns a full year of return. Only emitted values are
    rounded; the running balance keeps full precision.
    """
    params.validate()
    rate = params.rate
    annual_contribution = params.monthly_contribution * 12
    annual_expenses = round_half_up(params.monthly_expenses * 12)

    balance = params.current_savings
    records = []
    for year in range(params.years_to_retirement + 1):
        if year > 0:
            balance += annual_contribution
            balance *= 1 + rate

        contributions = params.current_savings + annual_contribution * year
        emitted = round_half_up(balance)
        records.append(
            {
                "YearIndex": year,
                "Year": start_year + year,
                "Age": params.current_age + year,
                "Balance": emitted,
                "Contributions": contributions,
                "CompoundReturns": emitted - contributions,
                "AnnualExpenses": annual_expenses,
                "NetWorth": emitted,
            }
        )

    return pd.DataFrame(records, columns=PROJECTION_COLUMNS)


def projection_summary(df: pd.DataFrame, params: ScenarioParams) -> Dict[str, Any]:
    if df.empty:
        return {
            "scenario": params.scenario,
            "rate": params.rate,
            "yearsToRetirement": params.years_to_retirement,
            "finalBalance": 0,
            "totalContributions": 0.0,
            "totalReturns": 0.0,
        }
    last = df.iloc[-1]
    return {
        "scenario": params.scenario,
        "rate": params.rate,
        "yearsToRetirement": params.years_to_retirement,
        "finalBalance": int(last["Balance"]),
        "totalContributions": float(last["Contributions"]),
        "totalReturns": float(last["CompoundReturns"]),
    }
