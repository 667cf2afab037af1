# tests/conftest.py
from __future__ import annotations
import sys
import threading
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from console_core.data.database import DatabaseService
from console_core.models.result import QueryResult


PATIENTS_CSV = """id,first_name,last_name,date_of_birth,gender,phone,email,blood_type,allergies
1,Ana,Silva,1990-01-02,F,555-1,ana@example.com,O+,
2,Ben,Adams,1985-06-30,M,555-2,ben@example.com,A-,Latex
3,Cara,Smith,1972-11-11,F,555-3,cara@example.com,B+,
"""


@pytest.fixture
def patients_csv(tmp_path: Path) -> Path:
    p = tmp_path / "patients.csv"
    p.write_text(PATIENTS_CSV, encoding="utf-8")
    return p


@pytest.fixture
def db(tmp_path: Path, patients_csv: Path) -> DatabaseService:
    svc = DatabaseService(db_path=tmp_path / "test.duckdb", read_only=False)
    return svc.initialize(csv_path=patients_csv)


class FakeService:
    """Returns queued outcomes; an Exception instance is raised instead of returned."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.on_call = None

    def execute(self, query):
        self.calls.append(query)
        if self.on_call:
            self.on_call()
        out = self.outcomes.pop(0) if self.outcomes else QueryResult.ok([])
        if isinstance(out, BaseException):
            raise out
        return out


class FakeClipboard:
    def __init__(self, fail: Exception | None = None):
        self.writes = []
        self.fail = fail

    def write(self, text):
        if self.fail:
            raise self.fail
        self.writes.append(text)


class FakeSaver:
    def __init__(self):
        self.saved = []

    def save(self, artifact):
        self.saved.append(artifact)
        return Path("/tmp") / artifact.file_name


class ManualTimer:
    """Stands in for threading.Timer; fire() runs the callback on demand."""

    def __init__(self, interval, fn):
        self.interval = interval
        self.fn = fn
        self.started = False
        self.cancelled = False
        self.finished = threading.Event()

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True
        self.finished.set()

    def fire(self):
        if not self.cancelled:
            self.finished.set()
            self.fn()


class TimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, fn):
        t = ManualTimer(interval, fn)
        self.timers.append(t)
        return t


@pytest.fixture
def fake_clipboard():
    return FakeClipboard()


@pytest.fixture
def fake_saver():
    return FakeSaver()


@pytest.fixture
def timers():
    return TimerFactory()
