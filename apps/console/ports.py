# apps/console/ports.py
"""
Platform capabilities the controller depends on, injected so the console
logic runs the same against a real desktop, a Streamlit page, or test fakes.
"""
from __future__ import annotations
import os
import shutil
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Callable, List, Optional, Protocol

from apps.console.export import DownloadArtifact
from console_core.config.config import CONFIG
from console_core.config.path_utils import to_abs
from console_core.errors import ExportError


class ClipboardWriter(Protocol):
    def write(self, text: str) -> None: ...


class FileSaver(Protocol):
    def save(self, artifact: DownloadArtifact) -> Optional[Path]: ...


# ---------- Clipboard ----------
_CLIPBOARD_COMMANDS: List[List[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]

class SystemClipboard:
    """Pipes text into the first clipboard tool found on PATH."""

    def __init__(self, commands: Optional[List[List[str]]] = None) -> None:
        self.commands = commands or _CLIPBOARD_COMMANDS

    def _command(self) -> List[str]:
        for cmd in self.commands:
            if shutil.which(cmd[0]):
                return cmd
        raise ExportError("no clipboard tool found (tried: %s)" % ", ".join(c[0] for c in self.commands))

    def write(self, text: str) -> None:
        cmd = self._command()
        proc = subprocess.run(cmd, input=text.encode("utf-8"), capture_output=True, check=False)
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            raise ExportError(f"{cmd[0]} exited with {proc.returncode}: {stderr}")


# ---------- File save ----------
class LocalFileSaver:
    """Writes the artifact into a download directory (project-relative by default)."""

    def __init__(self, download_dir: str | Path | None = None) -> None:
        self.download_dir = Path(download_dir) if download_dir else to_abs(CONFIG["export"]["download_dir"])

    def save(self, artifact: DownloadArtifact) -> Optional[Path]:
        self.download_dir.mkdir(parents=True, exist_ok=True)
        target = self.download_dir / artifact.file_name
        # temp file is the transient artifact; it is gone once replaced
        fd, tmp = tempfile.mkstemp(dir=self.download_dir, prefix=".", suffix=".part")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(artifact.payload)
            os.replace(tmp, target)
        except OSError as e:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise ExportError(f"could not save {target}: {e}") from e
        return target


# ---------- Timer ----------
TimerFactory = Callable[[float, Callable[[], None]], "threading.Timer"]

class RevertTimer:
    """
    Single cancellable scheduled task. Scheduling again cancels whatever is
    still pending, so at most one callback is ever outstanding.
    """

    def __init__(self, timer_factory: Optional[TimerFactory] = None) -> None:
        self._factory = timer_factory or threading.Timer
        self._timer = None
        self._lock = threading.Lock()

    def schedule(self, delay_s: float, fn: Callable[[], None]) -> None:
        with self._lock:
            self._cancel_locked()
            t = self._factory(delay_s, fn)
            if hasattr(t, "daemon"):
                t.daemon = True
            self._timer = t
        t.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    @property
    def pending(self) -> bool:
        t = self._timer
        return t is not None and not t.finished.is_set()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
