# apps/console/controller.py
"""
Query Console Controller.

Owns the query text, the execution lifecycle and the current QueryResult.
The store, the clipboard and the file save are injected so the lifecycle can
be driven from the Streamlit page or from tests with fakes.

Overlapping submissions are rejected: while a query is in flight a second
execute() is a logged no-op.
"""
from __future__ import annotations
import threading
from pathlib import Path
from typing import Any, Optional, Protocol

from apps.console.export import download_artifact, to_json
from apps.console.ports import ClipboardWriter, FileSaver, LocalFileSaver, RevertTimer, SystemClipboard
from apps.console.renderer import ConsoleView, render
from console_core.config.config import CONFIG
from console_core.models.result import ExecutionState, QueryResult
from console_core.utils.app_logging import setup_logger

log = setup_logger("console.controller")


class QueryService(Protocol):
    def execute(self, query: str) -> Any: ...


class QueryConsoleController:
    def __init__(self, service: QueryService,
                 clipboard: Optional[ClipboardWriter] = None,
                 file_saver: Optional[FileSaver] = None,
                 revert_timer: Optional[RevertTimer] = None,
                 query_text: Optional[str] = None,
                 copied_reset_ms: Optional[int] = None) -> None:
        self.service = service
        self.clipboard = clipboard or SystemClipboard()
        self.file_saver = file_saver or LocalFileSaver()
        self._timer = revert_timer or RevertTimer()
        self.copied_reset_ms = copied_reset_ms if copied_reset_ms is not None else CONFIG["console"]["copied_reset_ms"]

        self.query_text: str = CONFIG["console"]["default_query"] if query_text is None else query_text
        self.result: Optional[QueryResult] = None
        self.state: ExecutionState = ExecutionState.IDLE
        self.copied: bool = False
        self.notice: Optional[str] = None
        self._lock = threading.Lock()
        self._copy_seq = 0

    # ---------- input ----------
    def set_query_text(self, text: str) -> None:
        self.query_text = text

    def load_example(self, text: str) -> None:
        self.query_text = text

    @property
    def is_executing(self) -> bool:
        return self.state == ExecutionState.EXECUTING

    # ---------- lifecycle ----------
    def execute(self) -> bool:
        """Run the current query. Returns False when nothing ran (blank text or already executing)."""
        query = self.query_text
        if not query.strip():
            return False

        with self._lock:
            if self.state == ExecutionState.EXECUTING:
                log.warning("execute() ignored: a query is already running")
                return False
            self.state = ExecutionState.EXECUTING

        log.info("executing query: %s", " ".join(query.split())[:200])
        result: Optional[QueryResult] = None
        try:
            try:
                result = QueryResult.from_raw(self.service.execute(query))
            except Exception as e:  # pylint: disable=broad-except
                log.error("query raised: %s", e)
                result = QueryResult.failure(str(e))
            self.result = result
        finally:
            self.state = result.state if result is not None else ExecutionState.FAILED

        if result.success:
            log.info("query succeeded: %d row(s)", len(result.data))
        else:
            log.info("query failed: %s", result.error)
        return True

    # ---------- clipboard ----------
    def copy_to_clipboard(self, text: str) -> bool:
        self.notice = None
        try:
            self.clipboard.write(text)
        except Exception as e:  # pylint: disable=broad-except
            log.warning("clipboard write failed: %s", e)
            self.notice = f"Could not copy to clipboard: {e}"
            return False
        with self._lock:
            self._timer.cancel()
            self._copy_seq += 1
            seq = self._copy_seq
            self.copied = True
        self._timer.schedule(self.copied_reset_ms / 1000.0, lambda: self._reset_copied(seq))
        return True

    def copy_results(self) -> bool:
        if self.result is None or not self.result.has_rows:
            return False
        return self.copy_to_clipboard(to_json(self.result.data))

    def _reset_copied(self, seq: int) -> None:
        # a revert left over from an earlier copy must not clear a newer one
        with self._lock:
            if seq == self._copy_seq:
                self.copied = False

    # ---------- download ----------
    def download_results(self) -> Optional[Path]:
        artifact = download_artifact(self.result)
        if artifact is None:
            return None
        self.notice = None
        try:
            path = self.file_saver.save(artifact)
        except Exception as e:  # pylint: disable=broad-except
            log.warning("download failed: %s", e)
            self.notice = f"Could not save {artifact.file_name}: {e}"
            return None
        log.info("saved %d row(s) -> %s", len(self.result.data), path)
        return path

    # ---------- view / teardown ----------
    def view(self) -> ConsoleView:
        return render(self.result, self.state)

    def close(self) -> None:
        self._timer.cancel()
