# components/dashboard.py
from __future__ import annotations

from datetime import date

import dash_bootstrap_components as dbc
import pandas as pd
import plotly.graph_objects as go
from dash import dash_table, dcc, html

from finance_backend.data_model import ExpenseTableModel, GoalTableModel, ScenarioParams, Snapshot, TableModel
from finance_backend.engine.aggregate import category_breakdown, daily_expense_series, summarize
from finance_backend.engine.goals import analyze_goals, goal_progress
from finance_backend.engine.health import financial_health
from finance_backend.engine.projection import simulate_projection

EXPENSE_MODEL = ExpenseTableModel()
GOAL_MODEL = GoalTableModel()

CHART_COLORS = ["#3b82f6", "#8b5cf6", "#ec4899", "#f59e0b", "#10b981", "#06b6d4"]
STATUS_COLORS = {"completed": "success", "overdue": "danger", "active": "primary"}


def _table_config(model: TableModel):
    columns = []
    dropdowns = {}
    for col in model.columns:
        col_def = {"name": col.label, "id": col.field, "editable": col.editable}
        if col.kind == "number":
            col_def["type"] = "numeric"
        if col.kind == "select":
            col_def["presentation"] = "dropdown"
            if col.options:
                dropdowns[col.field] = [{"label": opt, "value": opt} for opt in col.options]
        columns.append(col_def)
    return columns, dropdowns


EXPENSE_COLUMNS, EXPENSE_DROPDOWNS = _table_config(EXPENSE_MODEL)
GOAL_COLUMNS, _ = _table_config(GOAL_MODEL)


def _datatable(id_value: str, data, columns, dropdowns=None):
    # Edits go through the REST commands; column flags would override the table flag
    columns = [{**col, "editable": False} for col in columns]
    table = dash_table.DataTable(
        id=id_value,
        data=data,
        columns=columns,
        editable=False,
        row_deletable=False,
        style_table={"height": "auto", "overflowY": "visible"},
        style_header={"backgroundColor": "#222", "color": "#eee", "fontWeight": "bold"},
        style_data={"backgroundColor": "#111", "color": "#eee"},
        dropdown={col: {"options": opts} for col, opts in (dropdowns or {}).items()},
        fill_width=True,
    )
    return html.Div(table, style={"maxHeight": "320px", "overflowY": "auto"})


def _stat_card(title: str, value: str, color: str = "secondary"):
    return dbc.Card(
        dbc.CardBody([html.H6(title, className="card-subtitle text-muted"), html.H4(value, className="card-title")]),
        color=color,
        outline=True,
    )


def format_money(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{abs(value):,.2f}"


def summary_cards(snapshot: Snapshot):
    summary = summarize(snapshot.income, snapshot.expenses)
    balance_color = "success" if summary.balance >= 0 else "danger"
    return dbc.Row(
        [
            dbc.Col(_stat_card("Income", format_money(summary.total_income))),
            dbc.Col(_stat_card("Expenses", format_money(summary.total_expenses), "warning")),
            dbc.Col(_stat_card("Balance", format_money(summary.balance), balance_color)),
            dbc.Col(_stat_card("Savings rate", f"{summary.savings_percentage:.1f}%", "info")),
        ],
        className="g-2",
    )


def expense_rows(snapshot: Snapshot) -> list[dict]:
    return [
        {
            "date": expense.date.isoformat() if expense.date else "",
            "name": expense.name,
            "category": expense.category,
            "amount": expense.amount,
        }
        for expense in snapshot.expenses
    ]


def goal_rows(snapshot: Snapshot, today: date) -> list[dict]:
    rows = []
    for goal in snapshot.goals:
        progress = goal_progress(goal, today)
        rows.append(
            {
                "name": goal.name,
                "targetAmount": goal.target_amount,
                "currentAmount": goal.current_amount,
                "deadline": goal.deadline.isoformat(),
                "progress": round(progress.progress_percent, 1),
            }
        )
    return rows


def category_figure(snapshot: Snapshot) -> go.Figure:
    breakdown = category_breakdown(snapshot.expenses, snapshot.income)
    fig = go.Figure()
    if not breakdown.empty:
        breakdown = breakdown.sort_values("Amount", ascending=False)
        fig.add_trace(
            go.Pie(
                labels=breakdown["Category"],
                values=breakdown["Amount"],
                hole=0.45,
                marker={"colors": CHART_COLORS},
            )
        )
    fig.update_layout(title="Spending by category", template="plotly_dark", margin={"t": 40, "b": 10})
    return fig


def daily_figure(snapshot: Snapshot, today: date) -> go.Figure:
    series = daily_expense_series(snapshot.expenses, today)
    fig = go.Figure()
    if not series.empty:
        fig.add_trace(go.Bar(x=series["Date"], y=series["Total"], name="Expenses", marker_color=CHART_COLORS[0]))
    fig.update_layout(title="Daily spending (last 30 days with expenses)", template="plotly_dark", margin={"t": 40, "b": 10})
    return fig


def projection_figure(params: ScenarioParams, start_year: int) -> go.Figure:
    df: pd.DataFrame = simulate_projection(params, start_year)
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=df["Year"],
            y=df["Balance"],
            mode="lines+markers",
            fill="tozeroy",
            name=f"{params.scenario.capitalize()} ({params.rate:.0%})",
            line={"color": CHART_COLORS[0], "width": 3},
        )
    )
    fig.add_trace(
        go.Scatter(x=df["Year"], y=df["Contributions"], mode="lines", name="Contributions", line={"dash": "dot"})
    )
    fig.update_layout(title="Retirement projection", template="plotly_dark", margin={"t": 40, "b": 10})
    return fig


def health_badge(snapshot: Snapshot):
    summary = summarize(snapshot.income, snapshot.expenses)
    breakdown = category_breakdown(snapshot.expenses, snapshot.income)
    health = financial_health(summary, breakdown, analyze_goals(snapshot.goals))
    color = {"Excellent": "success", "Good": "warning", "Fair": "info"}.get(health.label, "danger")
    return dbc.Badge(f"Financial health: {health.score}/{health.max_score} ({health.label})", color=color, className="p-2")


def build_dashboard(snapshot: Snapshot, today: date, params: ScenarioParams | None = None):
    summary = summarize(snapshot.income, snapshot.expenses)
    params = params or ScenarioParams(
        monthly_contribution=max(0.0, summary.balance),
        monthly_expenses=summary.total_expenses,
    )
    return dbc.Container(
        [
            html.H2("Financial dashboard", className="my-3"),
            health_badge(snapshot),
            html.Div(summary_cards(snapshot), className="my-3"),
            dbc.Row(
                [
                    dbc.Col(dcc.Graph(id="category-chart", figure=category_figure(snapshot)), md=6),
                    dbc.Col(dcc.Graph(id="daily-chart", figure=daily_figure(snapshot, today)), md=6),
                ]
            ),
            html.H4("Expenses", className="mt-3"),
            _datatable("expense-table", expense_rows(snapshot), EXPENSE_COLUMNS, EXPENSE_DROPDOWNS),
            html.H4("Savings goals", className="mt-3"),
            _datatable("goal-table", goal_rows(snapshot, today), GOAL_COLUMNS),
            html.H4("Retirement", className="mt-3"),
            dcc.Graph(id="projection-chart", figure=projection_figure(params, today.year)),
        ],
        fluid=True,
    )
