"""REST backend for the personal finance dashboard."""

from __future__ import annotations

import math
import uuid
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List

from flask import Flask, Response, jsonify, request

from .config import Settings, load_settings
from .data_model import (
    EXPENSE_CATEGORIES,
    RATE_TABLE,
    ExpenseTableModel,
    GoalTableModel,
    ScenarioParams,
    Snapshot,
)
from .engine.aggregate import summarize
from .engine.commands import (
    apply_add_expense,
    apply_add_goal,
    apply_clear,
    apply_contribute_to_goal,
    apply_remove_expense,
    apply_remove_goal,
    apply_replace_expense,
    apply_set_income,
    apply_update_goal_amount,
)
from .engine.export import csv_filename, export_csv, export_json, json_filename
from .engine.goals import goal_progress, suggested_monthly_contribution, ten_percent_of_balance
from .engine.projection import projection_summary, simulate_projection
from .engine.reports import build_report
from .engine.simulator import (
    add_simulated_expense,
    compare_scenario,
    reset_simulation,
    set_simulated_income,
    simulator_available,
)
from .engine.storage import LOCAL_KEY, SnapshotStore, build_store
from .errors import AuthError, FinanceError, NotFoundError, ValidationError
from .identity import IdentityProvider, LocalIdentityProvider
from .logging_utils import get_logger, set_log_context, setup_logging

logger = get_logger(__name__)

USER_HEADER = "X-User-Id"
EXPENSE_MODEL = ExpenseTableModel()
GOAL_MODEL = GoalTableModel()


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _is_nan(value: Any) -> bool:
    try:
        return not math.isfinite(value)
    except (TypeError, ValueError):
        return False


def _sanitize_records(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    clean_rows: List[Dict[str, Any]] = []
    for row in records:
        clean_rows.append({key: (None if _is_nan(value) else value) for key, value in row.items()})
    return clean_rows


def _extract_payload_value(payload: dict, *keys: str, default=None):
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def _json_object() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return dict(payload)


def _user_key() -> str:
    user_id = (request.headers.get(USER_HEADER) or "").strip()
    return user_id or LOCAL_KEY


def _require_user_id() -> str:
    user_id = (request.headers.get(USER_HEADER) or "").strip()
    if not user_id:
        raise AuthError("invalid-credential")
    return user_id


def create_app(
    settings: Settings | None = None,
    store: SnapshotStore | None = None,
    identity: IdentityProvider | None = None,
    clock: Callable[[], datetime] = _local_now,
) -> Flask:
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    store = store or build_store(settings)
    identity = identity or LocalIdentityProvider(settings.users_path, settings.min_password_length)

    app = Flask(__name__)
    app.config["FINANCE_SETTINGS"] = settings

    def today() -> date:
        return clock().date()

    def load_snapshot() -> Snapshot:
        return store.get(_user_key()) or Snapshot()

    def save_snapshot(snapshot: Snapshot) -> Snapshot:
        stamped = replace(snapshot, last_updated=clock().astimezone(timezone.utc).isoformat())
        store.put(_user_key(), stamped)
        return stamped

    def snapshot_payload(snapshot: Snapshot) -> Dict[str, Any]:
        current_day = today()
        return {
            "snapshot": snapshot.to_dict(),
            "summary": summarize(snapshot.income, snapshot.expenses).to_dict(),
            "goalProgress": [goal_progress(goal, current_day).to_dict() for goal in snapshot.goals],
        }

    def mutate(command: Callable[[Snapshot], Snapshot]):
        # Nothing is written unless the command succeeds
        updated = save_snapshot(command(load_snapshot()))
        return jsonify(snapshot_payload(updated))

    @app.before_request
    def bind_log_context():
        set_log_context(request_id=uuid.uuid4().hex[:8], user_id=request.headers.get(USER_HEADER))

    @app.after_request
    def apply_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = f"Content-Type,{USER_HEADER}"
        return response

    @app.errorhandler(FinanceError)
    def handle_finance_error(exc: FinanceError):
        if isinstance(exc, ValidationError):
            logger.info("request rejected: %s", exc.message)
        else:
            logger.warning("%s: %s", type(exc).__name__, exc.message)
        body: Dict[str, Any] = {"error": exc.message}
        if isinstance(exc, AuthError):
            body["code"] = exc.code
        return jsonify(body), exc.status_code

    @app.get("/api/health")
    def healthcheck():
        return jsonify({"status": "ok"})

    @app.get("/api/schema")
    def get_schema():
        return jsonify(
            {
                "categories": EXPENSE_CATEGORIES,
                "scenarios": [{"name": name, "rate": rate} for name, rate in RATE_TABLE.items()],
                "defaultScenario": settings.default_scenario,
                "minPasswordLength": settings.min_password_length,
                "expenses": EXPENSE_MODEL.to_payload(),
                "goals": GOAL_MODEL.to_payload(),
            }
        )

    # --- identity -----------------------------------------------------------

    @app.post("/api/auth/register")
    def register():
        payload = _json_object()
        user_id = identity.register(
            email=str(payload.get("email", "")),
            password=str(payload.get("password", "")),
            confirm_password=str(_extract_payload_value(payload, "confirmPassword", "confirm_password", default="")),
            name=str(payload.get("name", "")),
        )
        return jsonify({"userId": user_id, "message": "Account created."}), 201

    @app.post("/api/auth/login")
    def login():
        payload = _json_object()
        user_id = identity.sign_in(str(payload.get("email", "")), str(payload.get("password", "")))
        return jsonify({"userId": user_id, "message": "Signed in."})

    @app.post("/api/auth/password")
    def change_password():
        payload = _json_object()
        identity.change_password(
            _require_user_id(),
            current_password=str(payload.get("currentPassword", "")),
            new_password=str(payload.get("newPassword", "")),
            confirm_password=str(payload.get("confirmPassword", "")),
        )
        return jsonify({"message": "Password updated."})

    @app.get("/api/profile")
    def get_profile():
        return jsonify({"profile": identity.get_profile(_require_user_id())})

    @app.put("/api/profile")
    def update_profile():
        payload = _json_object()
        profile = identity.update_profile(_require_user_id(), payload)
        return jsonify({"profile": profile, "message": "Profile updated."})

    # --- snapshot ------------------------------------------------------------

    @app.get("/api/snapshot")
    def get_snapshot():
        return jsonify(snapshot_payload(load_snapshot()))

    @app.delete("/api/snapshot")
    def clear_snapshot():
        cleared = apply_clear(load_snapshot())
        store.delete(_user_key())
        return jsonify(snapshot_payload(cleared) | {"message": "All data cleared."})

    @app.put("/api/income")
    def set_income():
        payload = _json_object()
        income = _extract_payload_value(payload, "income", "monthlyIncome")
        return mutate(lambda snap: apply_set_income(snap, income))

    @app.post("/api/expenses")
    def add_expense():
        payload = _json_object()
        return mutate(
            lambda snap: apply_add_expense(
                snap,
                _extract_payload_value(payload, "name", "description"),
                payload.get("amount"),
                payload.get("category"),
                payload.get("date"),
                today=today(),
            )
        )

    @app.put("/api/expenses/<expense_id>")
    def replace_expense(expense_id: str):
        payload = _json_object()
        return mutate(
            lambda snap: apply_replace_expense(
                snap,
                expense_id,
                _extract_payload_value(payload, "name", "description"),
                payload.get("amount"),
                payload.get("category"),
                payload.get("date"),
                today=today(),
            )
        )

    @app.delete("/api/expenses/<expense_id>")
    def remove_expense(expense_id: str):
        return mutate(lambda snap: apply_remove_expense(snap, expense_id))

    @app.post("/api/goals")
    def add_goal():
        payload = _json_object()
        return mutate(
            lambda snap: apply_add_goal(
                snap,
                payload.get("name"),
                _extract_payload_value(payload, "targetAmount", "target_amount"),
                payload.get("deadline"),
                today=today(),
            )
        )

    @app.put("/api/goals/<goal_id>")
    def update_goal(goal_id: str):
        payload = _json_object()
        amount = _extract_payload_value(payload, "currentAmount", "current_amount")
        return mutate(lambda snap: apply_update_goal_amount(snap, goal_id, amount))

    @app.post("/api/goals/<goal_id>/contribute")
    def contribute_to_goal(goal_id: str):
        payload = _json_object()
        mode = str(payload.get("mode") or "amount").strip().lower()

        def command(snap: Snapshot) -> Snapshot:
            goal = snap.find_goal(goal_id)
            if goal is None:
                raise NotFoundError(f"Goal {goal_id} not found.")
            if mode == "ten_percent":
                amount = ten_percent_of_balance(summarize(snap.income, snap.expenses).balance)
            elif mode == "suggested":
                amount = suggested_monthly_contribution(goal, today())
            elif mode == "amount":
                amount = payload.get("amount")
            else:
                raise ValidationError("Contribution mode must be amount, ten_percent or suggested.")
            return apply_contribute_to_goal(snap, goal_id, amount)

        return mutate(command)

    @app.delete("/api/goals/<goal_id>")
    def remove_goal(goal_id: str):
        return mutate(lambda snap: apply_remove_goal(snap, goal_id))

    # --- derived views -------------------------------------------------------

    @app.get("/api/reports")
    def get_reports():
        report = build_report(load_snapshot(), today())
        for key in ("categories", "dailyExpenses", "incomeVsExpenses"):
            report[key] = _sanitize_records(report[key])
        return jsonify(report)

    @app.post("/api/projection")
    def project_retirement():
        payload = _json_object()
        snapshot = load_snapshot()
        summary = summarize(snapshot.income, snapshot.expenses)
        payload.setdefault("monthlyExpenses", summary.total_expenses)
        payload.setdefault("monthlyContribution", max(0.0, summary.balance))

        params = ScenarioParams.from_payload(payload, settings.default_scenario)
        df = simulate_projection(params, start_year=today().year)
        return jsonify(
            {
                "params": {
                    "currentAge": params.current_age,
                    "retirementAge": params.retirement_age,
                    "currentSavings": params.current_savings,
                    "monthlyContribution": params.monthly_contribution,
                    "monthlyExpenses": params.monthly_expenses,
                    "scenario": params.scenario,
                },
                "summary": projection_summary(df, params),
                "rows": _sanitize_records(df.to_dict(orient="records")),
            }
        )

    @app.post("/api/simulator")
    def simulate_scenario():
        payload = _json_object()
        snapshot = load_snapshot()
        if not simulator_available(snapshot.income):
            return jsonify(
                {
                    "available": False,
                    "message": "Enter your income and expenses before using the scenario simulator.",
                }
            )

        sim = set_simulated_income(reset_simulation(), payload.get("income"))
        for row in payload.get("expenses") or []:
            if not isinstance(row, dict):
                raise ValidationError("Each simulated expense must be an object.")
            sim = add_simulated_expense(sim, row.get("name"), row.get("amount"), today=today())

        comparison = compare_scenario(summarize(snapshot.income, snapshot.expenses), sim)
        return jsonify(
            {
                "available": True,
                "expenses": [expense.to_dict() for expense in sim.expenses],
                **comparison.to_dict(),
            }
        )

    # --- export --------------------------------------------------------------

    @app.get("/api/export/json")
    def export_json_endpoint():
        body = export_json(load_snapshot(), clock())
        return Response(
            body,
            mimetype="application/json",
            headers={"Content-Disposition": f"attachment; filename={json_filename(today())}"},
        )

    @app.get("/api/export/csv")
    def export_csv_endpoint():
        body = export_csv(load_snapshot(), today())
        return Response(
            body,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={csv_filename(today())}"},
        )

    return app


def main() -> None:
    settings = load_settings()
    app = create_app(settings)
    app.run(debug=False, port=settings.port)


if __name__ == "__main__":
    main()
