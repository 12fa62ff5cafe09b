"""Desktop notifications for finished intervals."""
from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import List, Optional

logger = logging.getLogger(__name__)


def _command(title: str, body: str) -> Optional[List[str]]:
    if sys.platform == "darwin":
        script = f'display notification "{_quote(body)}" with title "{_quote(title)}" sound name "Ping"'
        return ["osascript", "-e", script]
    if sys.platform.startswith("linux") and shutil.which("notify-send"):
        return ["notify-send", title, body]
    return None


def _quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def send(title: str, body: str) -> bool:
    """Show a desktop notification; returns whether one was sent."""
    command = _command(title, body)
    if command is None:
        logger.debug("No notification backend for platform %s", sys.platform)
        return False
    try:
        subprocess.run(command, check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as error:
        logger.debug("Notification failed: %s", error)
        return False
    return True
