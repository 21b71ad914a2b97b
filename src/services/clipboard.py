"""System clipboard access through the platform's clipboard tools."""

import logging
import os
import shutil
import subprocess
import sys
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

CLIPBOARD_TIMEOUT_SECONDS = 10

HTML_FLAVOR = "text/html"
PLAIN_FLAVOR = "text/plain"


class ClipboardError(Exception):
    """Raised when the clipboard refuses a write."""
    pass


class ClipboardService:
    """Writes rich (HTML) and plain text payloads to the system clipboard."""

    def __init__(self, platform: Optional[str] = None):
        self.platform = platform or sys.platform

    def write_rich(self, html: str, text: str) -> Tuple[str, ...]:
        """Write the HTML flavor of a document.

        wl-copy and xclip serve a single target per invocation, so the plain
        flavor cannot ride along; callers decide what to tell the user.

        Args:
            html: Rich payload
            text: Plain payload, published only by clipboards that take both at once

        Returns:
            MIME types the clipboard now offers

        Raises:
            ClipboardError: If no rich-capable tool is available or the write fails
        """
        cmd = self._rich_command()
        if cmd is None:
            raise ClipboardError(f"Rich clipboard writes are not supported on {self.platform}")
        logger.debug(
            f"Writing {len(html)} characters of HTML to clipboard, "
            f"{len(text)} plain characters not published by {cmd[0]}"
        )
        self._run(cmd, html)
        return (HTML_FLAVOR,)

    def write_text(self, text: str) -> None:
        """Write a plain text payload.

        Raises:
            ClipboardError: If no clipboard tool is available or the write fails
        """
        cmd = self._text_command()
        if cmd is None:
            raise ClipboardError(f"No clipboard tool found on {self.platform}")
        self._run(cmd, text)

    def _rich_command(self) -> Optional[List[str]]:
        if not self.platform.startswith("linux"):
            return None
        if os.getenv("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            return ["wl-copy", "--type", HTML_FLAVOR]
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard", "-t", HTML_FLAVOR]
        return None

    def _text_command(self) -> Optional[List[str]]:
        if self.platform == "darwin":
            return ["pbcopy"] if shutil.which("pbcopy") else None
        if self.platform.startswith("win"):
            return ["clip"]
        if os.getenv("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            return ["wl-copy"]
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard"]
        return None

    def _run(self, cmd: List[str], payload: str) -> None:
        # xclip and wl-copy fork a process that keeps serving the selection;
        # it must not inherit our pipes or run() waits for it until the timeout.
        try:
            subprocess.run(
                cmd,
                input=payload,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                check=True,
                timeout=CLIPBOARD_TIMEOUT_SECONDS,
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"Clipboard command {cmd[0]} exited with {e.returncode}")
            raise ClipboardError(f"{cmd[0]} exited with {e.returncode}") from e
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"Clipboard command {cmd[0]} could not run: {e}")
            raise ClipboardError(str(e)) from e
