# console_core/models/result.py
"""
Result Model for the query console.

Every execution, whatever the store returned or raised, ends up as one
QueryResult. A failed result never carries rows; a successful one never
carries an error. Rows keep the order the store returned them in.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from console_core.config.config import CONFIG
from console_core.errors import InconsistentRowsError

Row = Dict[str, Any]

ERROR_FALLBACK: str = CONFIG["console"]["error_fallback"]


class ExecutionState(str, Enum):
    IDLE = "Idle"
    EXECUTING = "Executing"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


@dataclass(frozen=True)
class QueryResult:
    success: bool
    data: List[Row] = field(default_factory=list)
    error: Optional[str] = None

    def __post_init__(self):
        if not self.success and self.data:
            raise ValueError("a failed QueryResult cannot carry rows")
        if self.success and self.error:
            raise ValueError("a successful QueryResult cannot carry an error")
        # NaN / numpy / date values would not survive JSON export as-is
        object.__setattr__(self, "data", [{k: _to_python(v) for k, v in r.items()} for r in self.data])

    # ---------- constructors ----------
    @classmethod
    def ok(cls, rows: Optional[List[Mapping[str, Any]]] = None) -> "QueryResult":
        return cls(success=True, data=[dict(r) for r in (rows or [])], error=None)

    @classmethod
    def failure(cls, message: Optional[str] = None) -> "QueryResult":
        msg = (message or "").strip()
        return cls(success=False, data=[], error=msg or ERROR_FALLBACK)

    @classmethod
    def from_raw(cls, raw: Any) -> "QueryResult":
        """
        Normalize whatever a data source handed back into a QueryResult.

        Accepted shapes:
        - QueryResult (returned as-is)
        - {"success": bool, "data": [...], "error": str|None}
        - {"columns": [...], "rows": [[...], ...]} (DB-API style)
        - pandas.DataFrame
        - a plain list of row mappings
        """
        if isinstance(raw, QueryResult):
            return raw
        if isinstance(raw, pd.DataFrame):
            return cls.ok(frame_to_records(raw))
        if isinstance(raw, Mapping):
            if "success" in raw:
                if raw.get("success"):
                    return cls.ok(raw.get("data") or [])
                return cls.failure(raw.get("error"))
            if "columns" in raw and "rows" in raw:
                cols = list(raw["columns"])
                return cls.ok([dict(zip(cols, r)) for r in raw["rows"]])
            if raw.get("error"):
                return cls.failure(raw["error"])
        if isinstance(raw, list):
            return cls.ok(raw)
        return cls.failure(f"Unrecognized result type: {type(raw).__name__}")

    # ---------- derived ----------
    @property
    def columns(self) -> List[str]:
        """Column headers are the keys of the first row, in order."""
        if not self.data:
            return []
        return list(self.data[0].keys())

    @property
    def has_rows(self) -> bool:
        return self.success and len(self.data) > 0

    @property
    def state(self) -> ExecutionState:
        return ExecutionState.SUCCEEDED if self.success else ExecutionState.FAILED


def check_homogeneous(rows: List[Mapping[str, Any]], strict: bool = False) -> List[int]:
    """
    Return indices of rows whose key set differs from row 0's.
    With strict=True a non-empty result raises InconsistentRowsError.
    """
    if not rows:
        return []
    expected = set(rows[0].keys())
    bad = [i for i, r in enumerate(rows) if set(r.keys()) != expected]
    if strict and bad:
        raise InconsistentRowsError(bad)
    return bad


def _to_python(value: Any) -> Any:
    # numpy scalars, NaN/NaT, dates and timestamps coming out of DuckDB or pandas
    if value is None:
        return None
    if isinstance(value, (str, bool)):
        return value
    if isinstance(value, Mapping):
        return {k: _to_python(v) for k, v in value.items()}
    if pd.api.types.is_list_like(value):
        return [_to_python(v) for v in value]
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "tolist"):
        return value.tolist()
    if hasattr(value, "item"):
        return value.item()
    return value


def frame_to_records(df: pd.DataFrame) -> List[Row]:
    """DataFrame -> list of row dicts, column order preserved, values made JSON-friendly."""
    cols = [str(c) for c in df.columns]
    records: List[Row] = []
    for values in df.itertuples(index=False, name=None):
        records.append({c: _to_python(v) for c, v in zip(cols, values)})
    return records


def cursor_to_records(description: Sequence[Sequence[Any]], rows: Sequence[Sequence[Any]]) -> List[Row]:
    """DB-API description + fetchall() rows -> list of row dicts; a DATE stays a date, not a midnight timestamp."""
    cols = [str(d[0]) for d in description]
    return [{c: _to_python(v) for c, v in zip(cols, values)} for values in rows]
