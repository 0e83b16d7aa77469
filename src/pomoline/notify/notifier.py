"""Desktop notification backends.

- notify-send on Linux (libnotify)
- osascript on macOS
"""

from __future__ import annotations

import logging
import platform
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from pomoline.core.errors import NotificationFailed

if TYPE_CHECKING:
    from pomoline.core.config import NotificationConfig

logger = logging.getLogger(__name__)

APP_NAME = "pomoline"
BACKENDS = ("notify-send", "osascript")


class Notifier(Protocol):
    """Anything that can show a titled notification."""

    def notify(self, title: str, body: str, icon: str | Path | None = None) -> None:
        ...


class NullNotifier:
    """Notifier that drops everything (notifications disabled or unavailable)."""

    def notify(self, title: str, body: str, icon: str | Path | None = None) -> None:
        logger.debug(f"Notification dropped: {title}")


class DesktopNotifier:
    """Show notifications through a command line backend."""

    def __init__(self, backend: str, timeout_seconds: float = 5.0):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown notification backend: {backend}")
        self.backend = backend
        self.timeout_seconds = timeout_seconds

    def command(self, title: str, body: str, icon: str | Path | None = None) -> list[str]:
        """Build the backend command line."""
        if self.backend == "notify-send":
            cmd = ["notify-send", "-a", APP_NAME]
            if icon:
                cmd += ["-i", str(icon)]
            return cmd + [title, body]

        script = (
            f'display notification "{_applescript_quote(body)}" '
            f'with title "{_applescript_quote(title)}"'
        )
        return ["osascript", "-e", script]

    def notify(self, title: str, body: str, icon: str | Path | None = None) -> None:
        cmd = self.command(title, body, icon)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise NotificationFailed(f"{self.backend} failed: {e}") from e

        if result.returncode != 0:
            raise NotificationFailed(
                f"{self.backend} exited with {result.returncode}: {result.stderr.strip()}"
            )


def detect_backend() -> str | None:
    """Pick the notification backend available on this machine."""
    if platform.system() == "Darwin" and shutil.which("osascript"):
        return "osascript"
    if shutil.which("notify-send"):
        return "notify-send"
    return None


def build_notifier(config: NotificationConfig) -> Notifier:
    """Create the notifier described by the configuration."""
    if not config.enabled or config.backend == "none":
        return NullNotifier()

    backend = detect_backend() if config.backend == "auto" else config.backend
    if backend is None:
        logger.warning("No notification backend found (notify-send/osascript), notifications disabled")
        return NullNotifier()

    logger.debug(f"Using notification backend: {backend}")
    return DesktopNotifier(backend, timeout_seconds=config.timeout_seconds)


def _applescript_quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " - ")
