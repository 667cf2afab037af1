# apps/console/renderer.py
"""
Result Renderer: a pure projection from (QueryResult, ExecutionState) to the
view the console should show. Nothing here touches Streamlit, so the same
views back the web page, the ASCII table and the tests.
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Union

import pandas as pd

from console_core.models.result import (
    ERROR_FALLBACK, ExecutionState, QueryResult, check_homogeneous,
)

MISSING = "undefined"
EMPTY_MESSAGE = "No results found"


def display_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


@dataclass(frozen=True)
class NoResultView:
    pass


@dataclass(frozen=True)
class ErrorView:
    message: str


@dataclass(frozen=True)
class EmptyView:
    message: str = EMPTY_MESSAGE


@dataclass(frozen=True)
class TableView:
    headers: List[str]
    rows: List[List[str]]
    mismatched_rows: List[int] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=self.headers)


View = Union[NoResultView, ErrorView, EmptyView, TableView]


@dataclass(frozen=True)
class ConsoleView:
    body: View
    busy: bool
    can_submit: bool
    can_export: bool


def project(result: Optional[QueryResult]) -> View:
    if result is None:
        return NoResultView()
    if not result.success:
        return ErrorView(result.error or ERROR_FALLBACK)
    if not result.data:
        return EmptyView()
    headers = result.columns
    rows = [[display_value(r[h]) if h in r else MISSING for h in headers] for r in result.data]
    return TableView(headers=headers, rows=rows, mismatched_rows=check_homogeneous(result.data))


def render(result: Optional[QueryResult], state: ExecutionState = ExecutionState.IDLE) -> ConsoleView:
    busy = state == ExecutionState.EXECUTING
    return ConsoleView(
        body=project(result),
        busy=busy,
        can_submit=not busy,
        can_export=result is not None and result.has_rows,
    )


def format_table(view: TableView) -> str:
    """Aligned ASCII table for a TableView."""
    widths = [len(h) for h in view.headers]
    for r in view.rows:
        for i, cell in enumerate(r):
            widths[i] = max(widths[i], len(cell))

    def fmt_row(r: Iterable[str]) -> str:
        return " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(r))

    out: List[str] = [fmt_row(view.headers), "-+-".join("-" * w for w in widths)]
    out.extend(fmt_row(r) for r in view.rows)
    return "\n".join(out)
