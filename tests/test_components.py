from datetime import date

from dash import dash_table, dcc

from components.dashboard import (
    EXPENSE_COLUMNS,
    EXPENSE_DROPDOWNS,
    build_dashboard,
    category_figure,
    daily_figure,
    expense_rows,
    format_money,
    goal_rows,
    projection_figure,
)
from finance_backend.data_model import Expense, SavingsGoal, ScenarioParams, Snapshot

TODAY = date(2024, 4, 1)


def _snapshot():
    return Snapshot(
        income=3000.0,
        expenses=[
            Expense(id="1", name="Rent", amount=1200.0, category="Housing", date=date(2024, 3, 30)),
            Expense(id="2", name="Food", amount=300.0, category="Food", date=None),
        ],
        goals=[SavingsGoal(id="g", name="Trip", target_amount=1000.0, current_amount=250.0, deadline=date(2024, 12, 1))],
    )


def _find_all(component, kind):
    found = []
    if isinstance(component, kind):
        found.append(component)
    children = getattr(component, "children", None)
    if children is None:
        return found
    if not isinstance(children, (list, tuple)):
        children = [children]
    for child in children:
        found.extend(_find_all(child, kind))
    return found


def test_expense_table_config_comes_from_model():
    assert [col["id"] for col in EXPENSE_COLUMNS] == ["date", "name", "category", "amount"]
    assert EXPENSE_DROPDOWNS["category"][-1] == {"label": "Other", "value": "Other"}


def test_rows_for_tables():
    assert expense_rows(_snapshot())[1] == {"date": "", "name": "Food", "category": "Food", "amount": 300.0}
    assert goal_rows(_snapshot(), TODAY)[0]["progress"] == 25.0


def test_figures():
    pie = category_figure(_snapshot())
    assert list(pie.data[0].labels) == ["Housing", "Food"]

    bars = daily_figure(_snapshot(), TODAY)
    assert list(bars.data[0].x) == ["2024-03-30", "2024-04-01"]

    line = projection_figure(ScenarioParams(current_age=30, retirement_age=32, current_savings=1000, monthly_contribution=100), 2024)
    assert list(line.data[0].y) == [1000, 2354, 3803]


def test_empty_snapshot_figures_have_no_traces():
    assert len(category_figure(Snapshot()).data) == 0
    assert len(daily_figure(Snapshot(), TODAY).data) == 0


def test_build_dashboard_contains_tables_and_graphs():
    layout = build_dashboard(_snapshot(), TODAY)

    tables = _find_all(layout, dash_table.DataTable)
    graphs = _find_all(layout, dcc.Graph)
    assert {table.id for table in tables} == {"expense-table", "goal-table"}
    assert {graph.id for graph in graphs} == {"category-chart", "daily-chart", "projection-chart"}


def test_format_money():
    assert format_money(1234.5) == "1,234.50"
    assert format_money(-20) == "-20.00"


def test_tables_are_read_only():
    tables = _find_all(build_dashboard(_snapshot(), TODAY), dash_table.DataTable)

    for table in tables:
        assert table.editable is False
        assert table.row_deletable is False
        assert all(col["editable"] is False for col in table.columns)
