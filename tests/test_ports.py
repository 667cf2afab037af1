# tests/test_ports.py
import json

import pytest

from apps.console.export import DownloadArtifact
from apps.console.ports import LocalFileSaver, RevertTimer, SystemClipboard
from console_core.errors import ExportError


def test_local_file_saver_writes_file(tmp_path):
    saver = LocalFileSaver(tmp_path / "dl")
    art = DownloadArtifact("patient_query_results.json", "application/json", json.dumps([{"a": 1}], indent=2))
    path = saver.save(art)
    assert path == tmp_path / "dl" / "patient_query_results.json"
    assert json.loads(path.read_text(encoding="utf-8")) == [{"a": 1}]
    # no temp artifacts left behind
    assert [p.name for p in (tmp_path / "dl").iterdir()] == ["patient_query_results.json"]


def test_system_clipboard_without_tools(monkeypatch):
    monkeypatch.setattr("apps.console.ports.shutil.which", lambda name: None)
    with pytest.raises(ExportError):
        SystemClipboard().write("x")


def test_revert_timer_single_pending(timers):
    rt = RevertTimer(timers)
    fired = []
    rt.schedule(2.0, lambda: fired.append(1))
    rt.schedule(2.0, lambda: fired.append(2))
    assert rt.pending
    for t in timers.timers:
        t.fire()
    assert fired == [2]
    assert not rt.pending


def test_revert_timer_cancel(timers):
    rt = RevertTimer(timers)
    rt.schedule(1.0, lambda: None)
    rt.cancel()
    assert timers.timers[0].cancelled
    assert not rt.pending
