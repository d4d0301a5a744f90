from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

import pandas as pd


@dataclass
class ColumnDefinition:
    """Lightweight schema descriptor used by the Dash editors and the schema endpoint."""

    field: str
    label: str
    kind: str = "text"  # text | number | select | date
    default: Any = ""
    options: List[str] | None = None
    min_value: float | None = None
    step: float | None = None
    format: str | None = None
    help: str | None = None
    editable: bool = True


@dataclass
class TableModel:
    """Container for a table schema plus default rows."""

    name: str
    columns: List[ColumnDefinition]
    default_rows: List[dict[str, Any]] = field(default_factory=list)

    def field_names(self) -> List[str]:
        return [col.field for col in self.columns]

    def create_default_df(self) -> pd.DataFrame:
        if self.default_rows:
            return pd.DataFrame(self.default_rows, columns=self.field_names())
        seed = {col.field: col.default for col in self.columns}
        return pd.DataFrame([seed])

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [
                {
                    "field": col.field,
                    "label": col.label,
                    "kind": col.kind,
                    "default": col.default,
                    "options": col.options or [],
                    "min": col.min_value,
                    "step": col.step,
                    "format": col.format,
                    "help": col.help,
                    "editable": col.editable,
                }
                for col in self.columns
            ],
            "defaults": self.create_default_df().to_dict("records"),
        }
