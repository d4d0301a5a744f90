from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime
from typing import Any, Dict

from ..data_model import DEFAULT_CATEGORY, Snapshot
from .aggregate import summarize
from .storage import _sanitize_json_compat

CSV_HEADERS = ["Date", "Description", "Category", "Amount"]


def export_document(snapshot: Snapshot, exported_at: datetime) -> Dict[str, Any]:
    data = snapshot.to_dict()
    return {
        "income": data["income"],
        "expenses": data["expenses"],
        "goals": data["goals"],
        "summary": summarize(snapshot.income, snapshot.expenses).to_dict(),
        "exportDate": exported_at.isoformat(),
    }


def export_json(snapshot: Snapshot, exported_at: datetime) -> str:
    document = _sanitize_json_compat(export_document(snapshot, exported_at))
    return json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)


def export_csv(snapshot: Snapshot, today: date) -> str:
    """Expense list as CSV; undated rows are stamped with `today`."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for expense in snapshot.expenses:
        writer.writerow(
            [
                expense.bucket_date(today).isoformat(),
                expense.name,
                expense.category or DEFAULT_CATEGORY,
                f"{expense.amount:.2f}",
            ]
        )
    return buffer.getvalue()


def json_filename(today: date) -> str:
    return f"financial-data-{today.isoformat()}.json"


def csv_filename(today: date) -> str:
    return f"financial-report-{today.isoformat()}.csv"
