from datetime import date, timedelta

import pytest

from finance_backend.data_model import Expense
from finance_backend.engine.aggregate import (
    category_breakdown,
    daily_expense_series,
    income_vs_expenses,
    spending_stats,
    summarize,
)

TODAY = date(2024, 5, 20)


def _expense(idx, amount, category="Other", spent_on=TODAY):
    return Expense(id=str(idx), name=f"item {idx}", amount=amount, category=category, date=spent_on)


def test_summary_balance_and_savings_rate():
    expenses = [_expense(1, 1200.0), _expense(2, 300.5)]

    summary = summarize(5000.0, expenses)

    assert summary.total_income == 5000.0
    assert summary.total_expenses == 1500.5
    assert summary.balance == 5000.0 - 1500.5
    assert summary.savings_percentage == (5000.0 - 1500.5) / 5000.0 * 100


def test_summary_zero_income_has_zero_savings_rate():
    summary = summarize(0.0, [_expense(1, 50.0)])

    assert summary.balance == -50.0
    assert summary.savings_percentage == 0.0


def test_summary_negative_balance_is_reported():
    summary = summarize(100.0, [_expense(1, 250.0)])

    assert summary.balance == -150.0
    assert summary.savings_percentage == -150.0


def test_summary_is_pure():
    expenses = [_expense(1, 10.0), _expense(2, 20.0)]

    assert summarize(100.0, expenses) == summarize(100.0, expenses)
    assert [e.amount for e in expenses] == [10.0, 20.0]


def test_category_breakdown_uses_income_as_denominator():
    expenses = [
        _expense(1, 100.0, "Food"),
        _expense(2, 50.0, "Transport"),
        _expense(3, 150.0, "Food"),
        _expense(4, 20.0, ""),
    ]

    breakdown = category_breakdown(expenses, income=1000.0).set_index("Category")

    assert breakdown.loc["Food", "Amount"] == 250.0
    assert breakdown.loc["Food", "PercentageOfIncome"] == pytest.approx(25.0)
    assert breakdown.loc["Transport", "PercentageOfIncome"] == pytest.approx(5.0)
    assert breakdown.loc["Other", "Amount"] == 20.0
    assert breakdown.loc["Food", "PercentageOfExpenses"] == pytest.approx(250.0 / 320.0 * 100)


def test_category_percentages_sum_to_expense_share_of_income():
    expenses = [_expense(i, amount, cat) for i, (amount, cat) in enumerate([(12.3, "Food"), (45.6, "Health"), (7.8, "Food"), (99.9, "Leisure")])]
    income = 800.0

    breakdown = category_breakdown(expenses, income)

    total = sum(e.amount for e in expenses)
    assert breakdown["PercentageOfIncome"].sum() == pytest.approx(total / income * 100)


def test_category_breakdown_zero_income_and_empty_input():
    breakdown = category_breakdown([_expense(1, 10.0, "Food")], income=0.0)
    assert breakdown["PercentageOfIncome"].tolist() == [0.0]

    empty = category_breakdown([], income=100.0)
    assert empty.empty
    assert list(empty.columns) == ["Category", "Amount", "PercentageOfIncome", "PercentageOfExpenses"]


def test_daily_series_groups_sorts_and_defaults_missing_dates():
    expenses = [
        _expense(1, 10.0, spent_on=date(2024, 5, 18)),
        _expense(2, 5.0, spent_on=date(2024, 5, 1)),
        _expense(3, 7.5, spent_on=date(2024, 5, 18)),
        _expense(4, 3.0, spent_on=None),
    ]

    series = daily_expense_series(expenses, TODAY)

    assert series["Date"].tolist() == ["2024-05-01", "2024-05-18", "2024-05-20"]
    assert series["Total"].tolist() == [5.0, 17.5, 3.0]
    assert series["Count"].tolist() == [1, 2, 1]
    assert series["Total"].sum() == pytest.approx(sum(e.amount for e in expenses))


def test_daily_series_keeps_most_recent_thirty_days():
    expenses = [_expense(i, 1.0 + i, spent_on=TODAY - timedelta(days=i)) for i in range(40)]

    series = daily_expense_series(expenses, TODAY)

    assert len(series) == 30
    assert series["Date"].iloc[-1] == TODAY.isoformat()
    assert series["Date"].iloc[0] == (TODAY - timedelta(days=29)).isoformat()
    assert series["Date"].is_monotonic_increasing


def test_daily_series_does_not_mutate_input():
    expenses = [_expense(1, 4.0, spent_on=None)]

    daily_expense_series(expenses, TODAY)

    assert expenses[0].date is None


def test_income_vs_expenses_uses_daily_income():
    series = daily_expense_series([_expense(1, 40.0), _expense(2, 10.0, spent_on=date(2024, 5, 19))], TODAY)

    comparison = income_vs_expenses(3000.0, series)

    assert comparison["Income"].tolist() == [100.0, 100.0]
    assert comparison["Savings"].tolist() == [90.0, 60.0]


def test_spending_stats():
    stats = spending_stats([_expense(1, 10.0), _expense(2, 30.0)])

    assert stats == {"count": 2, "total": 40.0, "average": 20.0, "largest": 30.0}
    assert spending_stats([])["average"] == 0.0
