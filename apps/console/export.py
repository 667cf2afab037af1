# apps/console/export.py
from __future__ import annotations
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional
from urllib.parse import quote

from console_core.config.config import CONFIG
from console_core.models.result import QueryResult, Row

FILE_NAME: str = CONFIG["export"]["file_name"]
MIME: str = CONFIG["export"]["mime"]


@dataclass(frozen=True)
class DownloadArtifact:
    file_name: str
    mime: str
    payload: str

    @property
    def data_uri(self) -> str:
        return to_data_uri(self.payload, self.mime)


def _default(value: Any) -> Any:
    # Anything json can't encode natively (dates, decimals, numpy scalars)
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "item"):
        return value.item()
    return str(value)


def to_json(rows: List[Row]) -> str:
    """Rows as pretty-printed JSON, 2-space indent."""
    return json.dumps(rows, indent=2, ensure_ascii=False, default=_default)


def to_data_uri(text: str, mime: str = MIME) -> str:
    return f"data:{mime};charset=utf-8," + quote(text, safe="")


def download_artifact(result: Optional[QueryResult]) -> Optional[DownloadArtifact]:
    """The file to save for a result, or None when there is nothing to export."""
    if result is None or not result.has_rows:
        return None
    return DownloadArtifact(file_name=FILE_NAME, mime=MIME, payload=to_json(result.data))
