# apps/ui/browser.py
"""
Browser-side ports for the Streamlit page. The server process has no access
to the user's clipboard or disk, so both go through what the page sends to
the browser.
"""
from __future__ import annotations
import json
from typing import Optional

from apps.console.export import DownloadArtifact
from console_core.utils.app_logging import setup_logger

log = setup_logger("console.ui")


class BrowserClipboard:
    """
    Holds the text until the page renders it as a clipboard-write snippet.
    write() never fails server-side; the browser does the actual copy.
    """

    def __init__(self) -> None:
        self.pending: Optional[str] = None

    def write(self, text: str) -> None:
        self.pending = text

    def take(self) -> Optional[str]:
        text, self.pending = self.pending, None
        return text


class BrowserDownload:
    """st.download_button already hands the bytes to the browser; nothing to write server-side."""

    def save(self, artifact: DownloadArtifact):
        log.info("download served to browser: %s (%d bytes)", artifact.file_name, len(artifact.payload))
        return None


def clipboard_snippet(text: str) -> str:
    """HTML/JS that writes text to the clipboard from inside a component iframe."""
    payload = json.dumps(text).replace("</", "<\\/")
    return (
        "<script>\n"
        f"const text = {payload};\n"
        "navigator.clipboard.writeText(text).catch(function () {\n"
        "  const ta = document.createElement('textarea');\n"
        "  ta.value = text;\n"
        "  document.body.appendChild(ta);\n"
        "  ta.select();\n"
        "  document.execCommand('copy');\n"
        "  ta.remove();\n"
        "});\n"
        "</script>"
    )


def copy_refresh_interval(copied: bool, reset_ms: int) -> Optional[float]:
    """Seconds between header reruns while the Copied! label is up; None once it is gone."""
    if not copied:
        return None
    return max(reset_ms / 1000.0 / 4, 0.25)
