# console_core/config/config.py
import os
from pathlib import Path
from dotenv import load_dotenv
from console_core.config.path_utils import as_project_relative

# ---------------------------------------------------------------------
# Resolve repo root no matter where code is run from
# ---------------------------------------------------------------------
ROOT = Path(__file__).resolve().parents[2]
load_dotenv(ROOT / ".env")

def _to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).lower() in ("1", "true", "yes", "on")

# ---------------------------------------------------------------------
# Base configuration dictionary
# ---------------------------------------------------------------------
CONFIG = {
    "storage": {
        # Use relative path (GitHub-friendly)
        "db_url": os.getenv("DB_URL", "duckdb:///console_core/data/patients.duckdb"),
        "read_only": _to_bool(os.getenv("DB_READ_ONLY")),
    },
    "seed": {
        "mock_csv": "console_core/data/mock/patients.csv",
        "table": "patients",
    },
    "console": {
        "default_query": "SELECT * FROM patients LIMIT 10",
        "examples": {
            "Basic query": "SELECT * FROM patients ORDER BY last_name LIMIT 10",
            "Filter by name": "SELECT * FROM patients WHERE last_name LIKE 'S%' ORDER BY last_name",
        },
        "copied_reset_ms": 2000,
        "error_fallback": "An error occurred while executing the query",
    },
    "export": {
        "file_name": "patient_query_results.json",
        "mime": "application/json",
        "download_dir": os.getenv("DOWNLOAD_DIR", "downloads"),
    },
}

# ---------------------------------------------------------------------
# Normalize paths to relative (never absolute)
# ---------------------------------------------------------------------
CONFIG["seed"]["mock_csv"] = as_project_relative(
    CONFIG["seed"].get("mock_csv"),
    "console_core/data/mock/patients.csv"
)

_db_url = CONFIG["storage"]["db_url"]
if _db_url.startswith("duckdb:///") and not os.path.isabs(_db_url.replace("duckdb:///", "")):
    _db_rel = as_project_relative(_db_url.replace("duckdb:///", ""), "console_core/data/patients.duckdb")
    CONFIG["storage"]["db_url"] = f"duckdb:///{_db_rel}"

# ---------------------------------------------------------------------
# Optional: log config on import for sanity
# ---------------------------------------------------------------------
if __name__ == "__main__":
    print("mock_csv =", CONFIG["seed"]["mock_csv"])
    print("db_url   =", CONFIG["storage"]["db_url"])
