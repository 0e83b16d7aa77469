"""Status surfaces: where the clock publishes its status line.

The clock only ever replaces the whole content of a surface or clears it.
Status bars (tmux, polybar, i3blocks, editor mode lines) poll the status
file or run ``pomoline line``.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from pomoline.clock.state import ClockStatus

logger = logging.getLogger(__name__)


class StatusSurface(Protocol):
    def publish(self, status: ClockStatus) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryStatusSurface:
    """Keeps the latest status in memory."""

    def __init__(self) -> None:
        self.line = ""
        self.status: ClockStatus | None = None
        self.updates = 0

    def publish(self, status: ClockStatus) -> None:
        self.status = status
        self.line = status.line
        self.updates += 1

    def clear(self) -> None:
        self.status = None
        self.line = ""
        self.updates += 1


class StatusFile:
    """JSON status file replaced atomically on every update."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def publish(self, status: ClockStatus) -> None:
        data = status.to_dict()
        data["updated_at"] = datetime.now().isoformat()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data))
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        logger.debug(f"Status file removed: {self.path}")


def read_status_file(path: Path) -> dict[str, Any] | None:
    """Read the status document, None when missing or unreadable."""
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text())
    except (OSError, ValueError) as e:
        logger.debug(f"Unreadable status file {path}: {e}")
        return None
