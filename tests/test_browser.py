# tests/test_browser.py
import json

from apps.console.controller import QueryConsoleController
from apps.ui.browser import BrowserClipboard, BrowserDownload, clipboard_snippet, copy_refresh_interval
from console_core.models.result import QueryResult
from conftest import FakeService


def test_copy_works_without_any_clipboard_tool_on_the_server(monkeypatch, timers):
    from apps.console.ports import RevertTimer

    monkeypatch.setattr("apps.console.ports.shutil.which", lambda name: None)
    clip = BrowserClipboard()
    rows = [{"id": 1, "name": "A"}]
    c = QueryConsoleController(FakeService(QueryResult.ok(rows)), clipboard=clip,
                               file_saver=BrowserDownload(), revert_timer=RevertTimer(timers),
                               query_text="SELECT 1")
    c.execute()
    assert c.copy_results() is True
    assert c.copied is True
    assert c.notice is None
    assert clip.take() == json.dumps(rows, indent=2)
    assert clip.take() is None


def test_clipboard_snippet_embeds_text_safely():
    html = clipboard_snippet('x</script><b>"q"')
    assert "navigator.clipboard.writeText" in html
    assert "</script><b>" not in html
    assert 'x<\\/script><b>\\"q\\"' in html


def test_browser_download_writes_nothing(tmp_path):
    from apps.console.export import DownloadArtifact

    assert BrowserDownload().save(DownloadArtifact("f.json", "application/json", "[]")) is None
    assert list(tmp_path.iterdir()) == []


def test_copy_refresh_interval():
    assert copy_refresh_interval(False, 2000) is None
    assert copy_refresh_interval(True, 2000) == 0.5
    assert copy_refresh_interval(True, 100) == 0.25
