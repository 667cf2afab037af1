# console_core/data/database.py
"""
Database Access Service: runs a free-form query against the DuckDB store and
hands back a normalized QueryResult. Query failures never raise; they come
back as failed results carrying the engine's message.
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Optional

import duckdb

from console_core.config.config import CONFIG
from console_core.config.path_utils import db_path_from_url
from console_core.data.seed_patients import ensure_seeded
from console_core.errors import DatabaseNotInitialized
from console_core.models.result import QueryResult, cursor_to_records
from console_core.utils.app_logging import setup_logger

log = setup_logger("console.db")


def _resolve_db_path() -> Path:
    return db_path_from_url(CONFIG["storage"]["db_url"])


class DatabaseService:
    def __init__(self, db_path: str | Path | None = None,
                 read_only: Optional[bool] = None,
                 require_initialized: bool = True) -> None:
        self.db_path = Path(db_path) if db_path else _resolve_db_path()
        self.read_only = CONFIG["storage"]["read_only"] if read_only is None else read_only
        self.require_initialized = require_initialized
        self.is_initialized = False

    def connect(self, read_only: Optional[bool] = None) -> duckdb.DuckDBPyConnection:
        ro = self.read_only if read_only is None else read_only
        return duckdb.connect(str(self.db_path), read_only=ro)

    def initialize(self, csv_path: Path | None = None) -> "DatabaseService":
        """Make sure the patients table exists and has rows; safe to re-run."""
        if self.is_initialized:
            return self
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        log.info("connecting -> %s", self.db_path)
        con = self.connect(read_only=False)
        try:
            n = ensure_seeded(con, csv_path)
        finally:
            con.close()
        if n:
            log.info("seeded %d patient rows", n)
        self.is_initialized = True
        return self

    def execute(self, query: str) -> QueryResult:
        if self.require_initialized and not self.is_initialized:
            raise DatabaseNotInitialized(f"database at {self.db_path} is not initialized")

        try:
            con = self.connect()
        except duckdb.Error as e:
            log.error("connect failed: %s", e)
            return QueryResult.failure(str(e))

        try:
            cur = con.execute(query)
            if cur.description is None:
                return QueryResult.ok([])
            description = cur.description
            fetched = cur.fetchall()
        except duckdb.Error as e:
            log.info("query failed: %s", e)
            return QueryResult.failure(str(e))
        finally:
            con.close()

        rows = cursor_to_records(description, fetched)
        log.info("query returned %d row(s)", len(rows))
        return QueryResult.ok(rows)

    def tables(self) -> List[str]:
        con = self.connect()
        try:
            df = con.execute(
                "SELECT table_name FROM information_schema.tables ORDER BY table_name"
            ).df()
        finally:
            con.close()
        return df["table_name"].tolist()
