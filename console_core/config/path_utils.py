# console_core/config/path_utils.py
from pathlib import Path, PurePosixPath

def project_root() -> Path:
    # .../console_core/config/path_utils.py -> repo root after 2 parents
    return Path(__file__).resolve().parents[2]

def as_project_relative(p: str | None, default_rel: str) -> str:
    """
    Return a *relative POSIX* path string (no leading slash).
    Safe to store in CONFIG.
    """
    cand = (p or default_rel).strip().replace("\\", "/")
    while cand.startswith("/"):
        cand = cand[1:]
    return str(PurePosixPath(cand))

def to_abs(p_rel: str) -> Path:
    """
    Turn a project-relative string into an absolute Path when you actually
    need to touch the filesystem. Do NOT write this back into CONFIG.
    """
    p = Path(p_rel)
    if p.is_absolute():
        return p
    return project_root() / p_rel

def db_path_from_url(db_url: str) -> Path:
    """duckdb:///relative/file.duckdb -> absolute Path."""
    raw = db_url.replace("duckdb:///", "") if db_url.startswith("duckdb:///") else db_url
    return to_abs(raw)
