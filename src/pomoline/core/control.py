"""Control queue used by the CLI to send commands to the running daemon.

Each command is its own JSON file in the control directory, named so that
lexical order is submission order. The daemon drains the directory on
every poll, so commands sent between two polls are all applied in order.
"""

from __future__ import annotations

import itertools
import json
import logging
import os
import time
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

ACTION_START = "start"
ACTION_REWIND = "rewind"
ACTION_PAUSE = "pause"
ACTION_STATUS = "status"
ACTION_STOP = "stop"

ACTIONS: frozenset[str] = frozenset(
    {ACTION_START, ACTION_REWIND, ACTION_PAUSE, ACTION_STATUS, ACTION_STOP}
)

SUFFIX = ".json"

_sequence = itertools.count()


def write_control(control_dir: Path, action: str) -> Path:
    """Queue a control command for the running daemon."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown action: {action}")
    control_dir.mkdir(parents=True, exist_ok=True)

    name = f"{time.time_ns():020d}-{os.getpid()}-{next(_sequence):06d}-{action}"
    data = {"action": action, "timestamp": datetime.now().isoformat()}

    # Write under a name the reader skips, then rename into place
    tmp_path = control_dir / f".{name}.tmp"
    tmp_path.write_text(json.dumps(data))
    path = control_dir / f"{name}{SUFFIX}"
    os.replace(tmp_path, path)
    return path


def read_controls(control_dir: Path) -> list[dict]:
    """Read and remove every queued command, oldest first."""
    if not control_dir.is_dir():
        return []

    commands: list[dict] = []
    for path in sorted(control_dir.glob(f"[0-9]*{SUFFIX}")):
        try:
            data = json.loads(path.read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Discarding unreadable control file {path.name}: {e}")
            data = None
        path.unlink(missing_ok=True)
        if isinstance(data, dict):
            commands.append(data)
    return commands


def clear_controls(control_dir: Path) -> int:
    """Drop queued commands without applying them."""
    dropped = read_controls(control_dir)
    if dropped:
        logger.info(f"Discarded {len(dropped)} stale control command(s)")
    return len(dropped)
