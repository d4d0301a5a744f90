from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from ..errors import ValidationError


def to_number(value: Any, field: str, *, default: float | None = None) -> float:
    """Strict numeric parsing for user input; rejects text, bools and NaN/inf."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is not None:
            return default
        raise ValidationError(f"{field} is required.")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number.") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number.")
    return number


def safe_number(value: Any, default: float = 0.0) -> float:
    """Lenient parsing for persisted data: anything unusable becomes `default`."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def to_date(value: Any, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required.")
    try:
        return date.fromisoformat(text.split("T")[0])
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format.") from None


def safe_date(value: Any) -> date | None:
    try:
        return to_date(value, "date")
    except ValidationError:
        return None


def require_text(value: Any, field: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required.")
    return text
