from datetime import date, timedelta

import pytest

from finance_backend.data_model import Expense, SavingsGoal
from finance_backend.engine.aggregate import category_breakdown, summarize
from finance_backend.engine.goals import analyze_goals
from finance_backend.engine.health import (
    financial_health,
    health_label,
    health_score,
    monthly_projection,
    recommendations,
)


def test_health_score_perfect():
    assert health_score(balance=1.0, savings_percentage=20.0, category_count=5, goal_completion_rate=50.0) == 100


def test_health_score_zero():
    assert health_score(balance=0.0, savings_percentage=4.99, category_count=0, goal_completion_rate=0.0) == 0


@pytest.mark.parametrize(
    "savings, expected",
    [(25.0, 25), (20.0, 25), (19.9, 15), (10.0, 15), (9.9, 10), (5.0, 10), (4.9, 0), (-30.0, 0)],
)
def test_savings_thresholds(savings, expected):
    assert health_score(balance=-1.0, savings_percentage=savings, category_count=0, goal_completion_rate=0.0) == expected


@pytest.mark.parametrize("count, expected", [(9, 25), (5, 25), (4, 15), (3, 15), (2, 10), (1, 10), (0, 0)])
def test_category_diversity_thresholds(count, expected):
    assert health_score(balance=-1.0, savings_percentage=0.0, category_count=count, goal_completion_rate=0.0) == expected


@pytest.mark.parametrize("rate, expected", [(100.0, 25), (50.0, 25), (49.0, 15), (25.0, 15), (24.0, 10), (0.1, 10), (0.0, 0)])
def test_goal_completion_thresholds(rate, expected):
    assert health_score(balance=-1.0, savings_percentage=0.0, category_count=0, goal_completion_rate=rate) == expected


@pytest.mark.parametrize("score, label", [(100, "Excellent"), (80, "Excellent"), (79, "Good"), (60, "Good"), (59, "Fair"), (40, "Fair"), (39, "Critical"), (0, "Critical")])
def test_health_labels(score, label):
    assert health_label(score) == label


def test_financial_health_from_snapshot_parts():
    today = date(2024, 3, 1)
    expenses = [
        Expense(id="1", name="rent", amount=1000.0, category="Housing"),
        Expense(id="2", name="food", amount=400.0, category="Food"),
        Expense(id="3", name="bus", amount=100.0, category="Transport"),
    ]
    goals = [
        SavingsGoal(id="g", name="car", target_amount=100.0, current_amount=100.0, deadline=today + timedelta(days=5)),
        SavingsGoal(id="h", name="trip", target_amount=100.0, current_amount=0.0, deadline=today + timedelta(days=5)),
    ]
    summary = summarize(2000.0, expenses)

    health = financial_health(summary, category_breakdown(expenses, 2000.0), analyze_goals(goals))

    # positive balance 25 + 25% savings 25 + three categories 15 + half the goals 25
    assert health.score == 90
    assert health.label == "Excellent"


def test_monthly_projection_months_to_goals():
    goals = analyze_goals(
        [SavingsGoal(id="g", name="car", target_amount=1200.0, current_amount=200.0, deadline=date(2030, 1, 1))]
    )
    summary = summarize(1000.0, [Expense(id="1", name="x", amount=750.0)])

    projection = monthly_projection(summary, goals)

    assert projection == {"monthlySavings": 250.0, "monthsToReachGoals": 4.0, "yearlyProjection": 3000.0}


def test_monthly_projection_without_savings():
    summary = summarize(100.0, [Expense(id="1", name="x", amount=150.0)])

    projection = monthly_projection(summary, analyze_goals([]))

    assert projection["monthsToReachGoals"] == 0.0
    assert projection["yearlyProjection"] == -600.0


def test_recommendations_for_deficit_and_concentration():
    expenses = [Expense(id="1", name="rent", amount=900.0, category="Housing"), Expense(id="2", name="bus", amount=200.0, category="Transport")]
    summary = summarize(1000.0, expenses)
    breakdown = category_breakdown(expenses, 1000.0)
    goals = analyze_goals([])

    recs = recommendations(summary, breakdown, goals, monthly_projection(summary, goals))

    types = [rec["type"] for rec in recs]
    assert types == ["critical", "warning", "warning", "info"]
    assert "Housing" in recs[2]["message"]


def test_recommendations_for_healthy_budget_with_goals():
    expenses = [Expense(id="1", name="rent", amount=300.0, category="Housing"), Expense(id="2", name="bus", amount=300.0, category="Transport")]
    summary = summarize(1000.0, expenses)
    goals = analyze_goals([SavingsGoal(id="g", name="car", target_amount=100.0, deadline=date(2030, 1, 1))])

    recs = recommendations(summary, category_breakdown(expenses, 1000.0), goals, monthly_projection(summary, goals))

    assert [rec["type"] for rec in recs] == ["success"]
