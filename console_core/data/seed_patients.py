# console_core/data/seed_patients.py
from __future__ import annotations
import argparse
from pathlib import Path
import pandas as pd
import duckdb

from console_core.config.config import CONFIG
from console_core.config.path_utils import db_path_from_url, to_abs
from console_core.utils.app_logging import setup_logger

log = setup_logger("console.seed")

TABLE = CONFIG["seed"]["table"]

PATIENTS_DDL = """
    CREATE TABLE IF NOT EXISTS {table} (
      id INTEGER PRIMARY KEY,
      first_name TEXT,
      last_name TEXT,
      date_of_birth DATE,
      gender TEXT,
      phone TEXT,
      email TEXT,
      blood_type TEXT,
      allergies TEXT
    );
"""

COLUMNS = ["id", "first_name", "last_name", "date_of_birth", "gender",
           "phone", "email", "blood_type", "allergies"]

def resolve_csv_path(cli_csv: str | None) -> Path:
    default_csv = to_abs(CONFIG["seed"]["mock_csv"])
    candidate = to_abs(cli_csv) if cli_csv else default_csv
    if not candidate.exists():
        raise FileNotFoundError(f"[seed] Mock CSV not found at '{candidate}'. "
                                f"Expected a file at {default_csv} or pass --csv <path>.")
    return candidate

def resolve_db_path(cli_db: str | None) -> Path:
    candidate = to_abs(cli_db) if cli_db else db_path_from_url(CONFIG["storage"]["db_url"])
    candidate.parent.mkdir(parents=True, exist_ok=True)
    return candidate

def load_and_normalize(csv_path: Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path)

    # Flexible column mapping
    rename_map = {"patient_id": "id", "dob": "date_of_birth", "surname": "last_name"}
    for k, v in rename_map.items():
        if k in df.columns and v not in df.columns:
            df = df.rename(columns={k: v})

    required = {"id", "first_name", "last_name"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"[seed] Missing required columns {missing} in {csv_path}. "
                         f"Expected columns: {sorted(required)} (extras allowed).")

    df = df.copy()
    for col in COLUMNS:
        if col not in df.columns:
            df[col] = None
    df["id"] = pd.to_numeric(df["id"], errors="coerce")
    df = df.dropna(subset=["id", "last_name"])
    df["id"] = df["id"].astype("int64")
    df["date_of_birth"] = pd.to_datetime(df["date_of_birth"], errors="coerce").dt.date
    df["allergies"] = df["allergies"].where(df["allergies"].notna(), None)
    return df[COLUMNS]

def seed(con: duckdb.DuckDBPyConnection, csv_path: Path, table: str = TABLE, replace: bool = False) -> int:
    """Create the patients table and load the CSV into it. Returns rows inserted."""
    df = load_and_normalize(csv_path)
    con.execute(PATIENTS_DDL.format(table=table))
    if replace:
        con.execute(f"DELETE FROM {table}")
    con.register("df_src", df)
    con.execute(f"""
        DELETE FROM {table}
        USING df_src s
        WHERE {table}.id = s.id;
    """)
    con.execute(f"INSERT INTO {table} SELECT {', '.join(COLUMNS)} FROM df_src;")
    con.unregister("df_src")
    return len(df)

def ensure_seeded(con: duckdb.DuckDBPyConnection, csv_path: Path | None = None, table: str = TABLE) -> int:
    """Seed only when the table is missing or empty. Returns rows inserted (0 if already seeded)."""
    con.execute(PATIENTS_DDL.format(table=table))
    n = con.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    if n:
        return 0
    return seed(con, csv_path or resolve_csv_path(None), table)

def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Seed the patients table for the query console")
    ap.add_argument("--csv", type=str, default=None, help="CSV path - overrides CONFIG seed.mock_csv")
    ap.add_argument("--db", type=str, default=None, help="DuckDB file path (default: CONFIG storage.db_url)")
    ap.add_argument("--table", type=str, default=TABLE, help=f"Target table name (default: {TABLE})")
    ap.add_argument("--replace", action="store_true", help="Delete existing rows before loading")
    args = ap.parse_args(argv)

    csv_path = resolve_csv_path(args.csv)
    db_path = resolve_db_path(args.db)

    log.info("Using CSV: %s", csv_path)
    log.info("Using DB : %s :: %s", db_path, args.table)

    con = duckdb.connect(str(db_path))
    try:
        n = seed(con, csv_path, args.table, replace=args.replace)
    finally:
        con.close()

    log.info("Seeded %d rows -> %s::%s", n, db_path, args.table)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
